from typing import Iterator, List

from gridmaze.core.grid import Position
from gridmaze.algo.base import Generator


class RecursiveBacktracker(Generator):
    def run(self) -> Iterator[str]:
        grid = self.grid
        visited = self.visited

        start = self.random_cell()
        visited[grid.index(start)] = 1

        stack: List[Position] = [start]

        while stack:
            current = stack[-1]

            # Unvisited neighbours only
            neighbors = [n for n in grid.neighbors_by_adjacency(current)
                         if not visited[grid.index(n)]]

            if neighbors:
                nxt = self.rng.choice(neighbors)
                visited[grid.index(nxt)] = 1
                grid.remove_wall_between(current, nxt)

                stack.append(nxt)
                self.step_count += 1

                # Yield every N steps to keep callers responsive without spamming
                if self.step_count % 100 == 0:
                    yield f"Carving... Stack: {len(stack)}"
            else:
                # Backtrack
                stack.pop()

        yield "Done"
