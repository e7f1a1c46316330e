import numpy as np

from gridmaze.core.grid import Grid
from gridmaze.io.serializer import MazeSerializer


def to_numpy(grid: Grid) -> np.ndarray:
    """
    Wall bits as a (rows, cols) uint8 array for renderers.
    Returns a copy, so the caller may modify it freely.
    """
    arr = np.frombuffer(grid.cells, dtype=np.uint8)
    return arr.reshape((grid.rows, grid.cols)) & Grid.ALL_WALLS


def wall_planes(grid: Grid) -> np.ndarray:
    """(rows, cols, 4) bool array of wall flags in top, right, bottom, left order."""
    arr = to_numpy(grid)
    return np.stack([(arr & d) != 0 for d in Grid.DIRECTIONS], axis=-1)


def from_numpy(arr: np.ndarray) -> Grid:
    if arr.ndim != 2:
        raise ValueError(f"Expected a 2-D array, got shape {arr.shape}")
    rows, cols = arr.shape
    data = np.ascontiguousarray(arr, dtype=np.uint8).tobytes()
    return MazeSerializer.grid_from_bytes(rows, cols, data)
