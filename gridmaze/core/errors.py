class MazeError(Exception):
    """Base class for every error raised by gridmaze."""


class InvalidDimension(MazeError, ValueError):
    def __init__(self, rows: int, cols: int):
        super().__init__(f"Grid dimensions must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols


class InvalidPosition(MazeError, IndexError):
    def __init__(self, pos, rows: int, cols: int):
        super().__init__(f"Position {pos!r} is not a cell of the {rows}x{cols} grid")
        self.pos = pos
        self.rows = rows
        self.cols = cols


class NotAdjacent(MazeError, ValueError):
    """Raised when remove_wall_between is given cells that are not one step apart."""
    def __init__(self, a, b):
        super().__init__(f"Cells {a} and {b} are not grid-adjacent")
        self.a = a
        self.b = b


class UnknownAlgorithm(MazeError, ValueError):
    pass


class MazeFormatError(MazeError, ValueError):
    pass
