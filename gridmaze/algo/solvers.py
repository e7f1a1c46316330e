import logging
from abc import ABC, abstractmethod
from array import array
from collections import deque
from enum import Enum
from typing import Iterator, List, Union

from gridmaze.core.errors import UnknownAlgorithm
from gridmaze.core.grid import Grid, Position
from gridmaze.core.trace import Trace

logger = logging.getLogger(__name__)

# Per-cell search state
UNVISITED = 0
FRONTIER = 1
EXPANDED = 2


class Solver(ABC):
    def __init__(self, grid: Grid):
        self.grid = grid
        self.path: List[Position] = []
        self.visited: List[Position] = []

    def reset(self):
        """Allocates fresh working arrays sized to the grid. The Grid itself is never written."""
        size = self.grid.size
        self.path = []
        self.visited = []
        self.state = array('B', [UNVISITED] * size)
        # Dense parent array: flat index of the parent, -1 = None
        self.parents = array('i', [-1] * size)

    @abstractmethod
    def run(self, start: Position, end: Position) -> Iterator[str]:
        pass

    def run_all(self, start: Position, end: Position):
        for _ in self.run(start, end):
            pass

    def expand(self, pos: Position):
        self.state[self.grid.index(pos)] = EXPANDED
        self.visited.append(pos)

    def reconstruct_path(self, start: Position, end: Position):
        grid = self.grid
        idx = grid.index(end)
        start_idx = grid.index(start)
        path = [end]
        while idx != start_idx:
            idx = self.parents[idx]
            if idx == -1:
                # end was never reached from start
                self.path = []
                return
            path.append(grid.position(idx))
        path.reverse()
        self.path = path


class BreadthFirstSearch(Solver):
    """FIFO frontier. Cells are marked when queued so each is expanded at most once."""

    def pop_next(self, fringe: deque) -> Position:
        return fringe.popleft()

    def run(self, start: Position, end: Position) -> Iterator[str]:
        self.reset()
        grid = self.grid

        fringe = deque([start])
        self.state[grid.index(start)] = FRONTIER

        while fringe:
            current = self.pop_next(fringe)
            self.expand(current)

            if current == end:
                self.reconstruct_path(start, end)
                yield "Solved"
                return

            curr_idx = grid.index(current)
            for neighbor in grid.neighbors_by_passage(current):
                n_idx = grid.index(neighbor)
                if self.state[n_idx] == UNVISITED:
                    self.state[n_idx] = FRONTIER
                    self.parents[n_idx] = curr_idx
                    fringe.append(neighbor)

            if len(self.visited) % 100 == 0:
                yield f"Visited: {len(self.visited)}"

        yield "No Path"


class DepthFirstSearch(BreadthFirstSearch):
    """ Same discipline as BFS with a LIFO frontier. Paths are not necessarily shortest. """
    def pop_next(self, fringe: deque) -> Position:
        return fringe.pop()


class AStar(Solver):
    """
    A* with a Manhattan heuristic and a linearly scanned open list.

    The scan keeps the first minimum it meets, so ties resolve in insertion
    order. Expanded cells are closed for good and a frontier cell is only
    relaxed on a strictly smaller g.
    """

    def heuristic(self, a: Position, b: Position) -> int:
        return abs(a[0] - b[0]) + abs(a[1] - b[1])

    def run(self, start: Position, end: Position) -> Iterator[str]:
        self.reset()
        grid = self.grid

        # -1 = infinity
        self.g_score = array('i', [-1] * grid.size)
        self.f_score = array('i', [-1] * grid.size)

        start_idx = grid.index(start)
        self.g_score[start_idx] = 0
        self.f_score[start_idx] = self.heuristic(start, end)
        self.state[start_idx] = FRONTIER
        open_list: List[Position] = [start]

        while open_list:
            best = 0
            best_f = self.f_score[grid.index(open_list[0])]
            for i in range(1, len(open_list)):
                f = self.f_score[grid.index(open_list[i])]
                if f < best_f:
                    best, best_f = i, f

            current = open_list.pop(best)
            self.expand(current)

            if current == end:
                self.reconstruct_path(start, end)
                yield "Solved"
                return

            curr_idx = grid.index(current)
            new_g = self.g_score[curr_idx] + 1

            for neighbor in grid.neighbors_by_passage(current):
                n_idx = grid.index(neighbor)
                state = self.state[n_idx]
                if state == EXPANDED:
                    continue
                if state == UNVISITED:
                    self.state[n_idx] = FRONTIER
                    open_list.append(neighbor)
                elif new_g >= self.g_score[n_idx]:
                    continue

                self.parents[n_idx] = curr_idx
                self.g_score[n_idx] = new_g
                self.f_score[n_idx] = new_g + self.heuristic(neighbor, end)

            if len(self.visited) % 100 == 0:
                yield f"Visited: {len(self.visited)}"

        yield "No Path"


class Dijkstra(AStar):
    """ Unit-cost Dijkstra is just A* with h(n) = 0. """
    def heuristic(self, a, b):
        return 0


class SolvingAlgorithm(Enum):
    DFS = "DFS"
    BFS = "BFS"
    ASTAR = "AStar"
    DIJKSTRA = "Dijkstra"

    @classmethod
    def parse(cls, value: Union[str, "SolvingAlgorithm"]) -> "SolvingAlgorithm":
        if isinstance(value, cls):
            return value
        key = str(value).replace("*", "star").replace("_", "").replace("-", "").lower()
        for algo in cls:
            if key in (algo.value.lower(), algo.name.lower()):
                return algo
        raise UnknownAlgorithm(f"Unknown solving algorithm: {value!r}")


SOLVERS = {
    SolvingAlgorithm.DFS: DepthFirstSearch,
    SolvingAlgorithm.BFS: BreadthFirstSearch,
    SolvingAlgorithm.ASTAR: AStar,
    SolvingAlgorithm.DIJKSTRA: Dijkstra,
}


def solve(algorithm, grid: Grid, start: Position, end: Position) -> Trace:
    """
    Searches the passage graph of `grid` from start to end.
    Works on any wall layout, not only perfect mazes. Never mutates the grid.
    """
    algo = SolvingAlgorithm.parse(algorithm)
    start = grid.check_position(start)
    end = grid.check_position(end)

    solver = SOLVERS[algo](grid)
    solver.run_all(start, end)

    logger.debug(f"{algo.value}: expanded {len(solver.visited)} cells, "
                 f"path length {len(solver.path)}")
    return Trace(
        algorithm=algo.value,
        start=start,
        end=end,
        visited=tuple(solver.visited),
        path=tuple(solver.path),
    )
