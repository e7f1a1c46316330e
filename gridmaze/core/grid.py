import numbers
from array import array
from typing import Iterator, List, Tuple

from gridmaze.core.errors import InvalidDimension, InvalidPosition, NotAdjacent

Position = Tuple[int, int]


class Grid:
    # Bitmask Constants, in (top, right, bottom, left) order
    TOP    = 0b0001
    RIGHT  = 0b0010
    BOTTOM = 0b0100
    LEFT   = 0b1000

    # All walls present by default (T|R|B|L) = 15
    ALL_WALLS = TOP | RIGHT | BOTTOM | LEFT

    # Fixed expansion order. Solver tie-breaks depend on it.
    DIRECTIONS = (TOP, RIGHT, BOTTOM, LEFT)

    # Direction Helpers (row, col deltas)
    DR = {TOP: -1, RIGHT: 0, BOTTOM: 1, LEFT: 0}
    DC = {TOP: 0, RIGHT: 1, BOTTOM: 0, LEFT: -1}
    OPPOSITE = {TOP: BOTTOM, BOTTOM: TOP, RIGHT: LEFT, LEFT: RIGHT}
    STEP_TO_DIRECTION = {(-1, 0): TOP, (0, 1): RIGHT, (1, 0): BOTTOM, (0, -1): LEFT}

    __slots__ = ('rows', 'cols', 'cells', 'event_writer')

    def __init__(self, rows: int, cols: int, event_writer=None):
        if rows <= 0 or cols <= 0:
            raise InvalidDimension(rows, cols)
        self.rows = rows
        self.cols = cols
        self.event_writer = event_writer
        # 'B' (unsigned char) -> 1 byte per cell, row-major
        self.cells = array('B', [self.ALL_WALLS] * (rows * cols))

        if self.event_writer:
            self.event_writer.write_header(rows, cols)

    @property
    def size(self) -> int:
        return self.rows * self.cols

    def in_bounds(self, pos: Position) -> bool:
        row, col = pos
        return 0 <= row < self.rows and 0 <= col < self.cols

    def index(self, pos: Position) -> int:
        row, col = pos
        if 0 <= row < self.rows and 0 <= col < self.cols:
            return row * self.cols + col
        raise InvalidPosition(pos, self.rows, self.cols)

    def check_position(self, pos) -> Position:
        """
        Validates a caller-supplied cell. Only a pair of in-bounds integers is
        accepted (bools and floats are rejected). Returns it as a plain tuple.
        """
        try:
            row, col = pos
        except (TypeError, ValueError):
            raise InvalidPosition(pos, self.rows, self.cols) from None
        for value in (row, col):
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidPosition(pos, self.rows, self.cols)
        pos = (int(row), int(col))
        if not self.in_bounds(pos):
            raise InvalidPosition(pos, self.rows, self.cols)
        return pos

    def position(self, idx: int) -> Position:
        return divmod(idx, self.cols)

    def remove_wall_between(self, a: Position, b: Position):
        """
        Opens the passage between two grid-adjacent cells.
        Clears the wall on a's side facing b and the opposite wall on b's side.
        This is the only code path that mutates wall state.
        """
        idx_a = self.index(a)
        idx_b = self.index(b)

        direction = self.STEP_TO_DIRECTION.get((b[0] - a[0], b[1] - a[1]))
        if direction is None:
            raise NotAdjacent(a, b)

        if self.event_writer:
            self.event_writer.log_carve(a[0], a[1], direction)

        self.cells[idx_a] &= ~direction
        self.cells[idx_b] &= ~self.OPPOSITE[direction]

    def has_wall(self, pos: Position, direction: int) -> bool:
        return (self.cells[self.index(pos)] & direction) != 0

    def walls(self, pos: Position) -> Tuple[bool, bool, bool, bool]:
        """Wall flags as (top, right, bottom, left)."""
        val = self.cells[self.index(pos)]
        return tuple((val & d) != 0 for d in self.DIRECTIONS)

    def neighbors_by_adjacency(self, pos: Position) -> List[Position]:
        """
        Up to four in-bounds neighbours in top, right, bottom, left order.
        Does NOT check walls (that's for generation).
        """
        self.index(pos)
        row, col = pos
        neighbors = []
        if row > 0:
            neighbors.append((row - 1, col))
        if col < self.cols - 1:
            neighbors.append((row, col + 1))
        if row < self.rows - 1:
            neighbors.append((row + 1, col))
        if col > 0:
            neighbors.append((row, col - 1))
        return neighbors

    def neighbors_by_passage(self, pos: Position) -> List[Position]:
        """
        Neighbours with no wall in between, in top, right, bottom, left order.
        This is the traversal graph every solver searches.
        """
        row, col = pos
        val = self.cells[self.index(pos)]
        neighbors = []
        if not (val & self.TOP) and row > 0:
            neighbors.append((row - 1, col))
        if not (val & self.RIGHT) and col < self.cols - 1:
            neighbors.append((row, col + 1))
        if not (val & self.BOTTOM) and row < self.rows - 1:
            neighbors.append((row + 1, col))
        if not (val & self.LEFT) and col > 0:
            neighbors.append((row, col - 1))
        return neighbors

    def iter_positions(self) -> Iterator[Position]:
        for row in range(self.rows):
            for col in range(self.cols):
                yield (row, col)

    def passage_count(self) -> int:
        # Count each passage once via the right and bottom sides
        count = 0
        for idx, val in enumerate(self.cells):
            row, col = divmod(idx, self.cols)
            if not (val & self.RIGHT) and col < self.cols - 1:
                count += 1
            if not (val & self.BOTTOM) and row < self.rows - 1:
                count += 1
        return count

    def copy(self) -> "Grid":
        clone = Grid(self.rows, self.cols)
        clone.cells = array('B', self.cells)
        return clone

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (self.rows, self.cols) == (other.rows, other.cols) and self.cells == other.cells

    def __repr__(self) -> str:
        return f"Grid({self.rows}x{self.cols})"
