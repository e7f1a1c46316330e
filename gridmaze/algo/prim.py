from typing import Iterator, List, Tuple

from gridmaze.core.grid import Position
from gridmaze.algo.base import Generator


class PrimsAlgorithm(Generator):
    """
    Randomized Prim's over wall candidates.

    The frontier holds (in-maze cell, neighbour) pairs. A candidate is carved
    only when exactly one of its cells is in the maze. Every picked candidate
    leaves the frontier whatever the outcome, so stale pairs are dropped
    rather than revisited. Duplicate pairs may coexist.
    """

    def run(self) -> Iterator[str]:
        grid = self.grid
        visited = self.visited

        start = self.random_cell()
        visited[grid.index(start)] = 1

        frontier: List[Tuple[Position, Position]] = [
            (start, n) for n in grid.neighbors_by_adjacency(start)
        ]

        while frontier:
            idx = self.rng.randrange(len(frontier))
            # Swap remove for O(1)
            a, b = frontier[idx]
            frontier[idx] = frontier[-1]
            frontier.pop()

            a_in = visited[grid.index(a)]
            b_in = visited[grid.index(b)]
            if a_in == b_in:
                continue

            grid.remove_wall_between(a, b)
            added = b if a_in else a
            visited[grid.index(added)] = 1
            self.step_count += 1

            for n in grid.neighbors_by_adjacency(added):
                if not visited[grid.index(n)]:
                    frontier.append((added, n))

            if self.step_count % 100 == 0:
                yield f"Frontier: {len(frontier)}"

        yield "Done"
