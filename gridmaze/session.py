import logging
import random
import time
from typing import Optional

from gridmaze.algo.generate import GenerationAlgorithm, create_maze
from gridmaze.algo.solvers import SolvingAlgorithm, solve
from gridmaze.core.grid import Position
from gridmaze.core.maze import Maze
from gridmaze.core.trace import Trace

logger = logging.getLogger(__name__)

DEFAULT_ROWS = 20
DEFAULT_COLS = 20
DEFAULT_GENERATION = GenerationAlgorithm.DFS
DEFAULT_SOLVING = SolvingAlgorithm.BFS


class MazeSession:
    """
    Caller-side composition of the two engines: one current maze, its
    endpoints and the last trace. Regenerating replaces the maze and drops
    the trace. Moving an endpoint also drops the trace.
    """

    def __init__(self, rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS,
                 generation_algorithm=DEFAULT_GENERATION, solving_algorithm=DEFAULT_SOLVING,
                 rng: Optional[random.Random] = None, seed: int = None):
        self.rows = rows
        self.cols = cols
        self.generation_algorithm = GenerationAlgorithm.parse(generation_algorithm)
        self.solving_algorithm = SolvingAlgorithm.parse(solving_algorithm)
        self.rng = rng if rng is not None else random.Random(seed)
        self.maze: Optional[Maze] = None
        self.start: Optional[Position] = None
        self.end: Optional[Position] = None
        self.trace: Optional[Trace] = None
        self.elapsed_ms = 0.0

    def regenerate(self, rows: int = None, cols: int = None, algorithm=None) -> Maze:
        rows = self.rows if rows is None else rows
        cols = self.cols if cols is None else cols
        algo = self.generation_algorithm if algorithm is None else GenerationAlgorithm.parse(algorithm)

        # Session state only changes once the new maze exists
        maze = create_maze(algo, rows, cols, rng=self.rng)
        self.rows, self.cols, self.generation_algorithm = rows, cols, algo
        self.maze = maze
        self.start = (0, 0)
        self.end = (self.rows - 1, self.cols - 1)
        self.reset()
        logger.debug(f"Session maze {self.maze.id} ({self.rows}x{self.cols})")
        return self.maze

    def load(self, maze: Maze):
        self.maze = maze
        self.rows, self.cols = maze.rows, maze.cols
        self.start = (0, 0)
        self.end = (maze.rows - 1, maze.cols - 1)
        self.reset()

    def _require_maze(self) -> Maze:
        if self.maze is None:
            raise RuntimeError("No maze in session; call regenerate() or load() first")
        return self.maze

    def _check(self, pos: Position) -> Position:
        return self._require_maze().grid.check_position(pos)

    def set_start(self, pos: Position):
        self.start = self._check(pos)
        self.reset()

    def set_end(self, pos: Position):
        self.end = self._check(pos)
        self.reset()

    def solve(self, algorithm=None) -> Trace:
        maze = self._require_maze()
        if algorithm is not None:
            self.solving_algorithm = SolvingAlgorithm.parse(algorithm)

        t0 = time.perf_counter()
        self.trace = solve(self.solving_algorithm, maze.grid, self.start, self.end)
        self.elapsed_ms = (time.perf_counter() - t0) * 1000
        return self.trace

    @property
    def steps(self) -> int:
        return self.trace.steps if self.trace else 0

    def reset(self):
        self.trace = None
        self.elapsed_ms = 0.0
