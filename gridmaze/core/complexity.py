import random
from array import array
from collections import deque
from typing import Dict, Optional

from gridmaze.core.grid import Grid


class MazePostProcessor:
    @staticmethod
    def braid(grid: Grid, factor: float = 1.0, rng: Optional[random.Random] = None, seed: int = None) -> int:
        """
        Removes dead ends to create loops.
        factor: 0.0 = Remove NO dead ends (Perfect Maze)
                1.0 = Remove ALL dead ends (No dead ends)
        Returns the number of walls removed.
        """
        rng = rng if rng is not None else random.Random(seed)

        # Dead end = exactly one open passage
        dead_ends = [pos for pos in grid.iter_positions()
                     if len(grid.neighbors_by_passage(pos)) == 1]

        rng.shuffle(dead_ends)

        target_remove = int(len(dead_ends) * factor)
        removed_count = 0

        for pos in dead_ends:
            if removed_count >= target_remove:
                break

            # Re-check, an earlier carve may have opened it already
            open_neighbors = grid.neighbors_by_passage(pos)
            if len(open_neighbors) != 1:
                continue

            closed_neighbors = [n for n in grid.neighbors_by_adjacency(pos) if n not in open_neighbors]
            if closed_neighbors:
                grid.remove_wall_between(pos, rng.choice(closed_neighbors))
                removed_count += 1

        return removed_count

    @staticmethod
    def calculate_stats(grid: Grid) -> Dict[str, float]:
        dead_ends = 0
        intersections = 0 # 3+ exits
        corridors = 0 # 2 exits

        for pos in grid.iter_positions():
            exits = len(grid.neighbors_by_passage(pos))
            if exits == 1: dead_ends += 1
            elif exits == 2: corridors += 1
            elif exits >= 3: intersections += 1

        total = grid.size
        return {
            "dead_ends": dead_ends,
            "corridors": corridors,
            "intersections": intersections,
            "passages": grid.passage_count(),
            "dead_end_percent": (dead_ends / total) * 100 if total > 0 else 0
        }

    @staticmethod
    def is_connected(grid: Grid) -> bool:
        """Flood fill over passages from (0, 0)."""
        seen = array('B', [0] * grid.size)
        seen[0] = 1
        count = 1
        queue = deque([(0, 0)])
        while queue:
            current = queue.popleft()
            for n in grid.neighbors_by_passage(current):
                idx = grid.index(n)
                if not seen[idx]:
                    seen[idx] = 1
                    count += 1
                    queue.append(n)
        return count == grid.size

    @staticmethod
    def walls_symmetric(grid: Grid) -> bool:
        for row, col in grid.iter_positions():
            val = grid.cells[grid.index((row, col))]
            if col < grid.cols - 1:
                right = grid.cells[grid.index((row, col + 1))]
                if bool(val & Grid.RIGHT) != bool(right & Grid.LEFT):
                    return False
            if row < grid.rows - 1:
                below = grid.cells[grid.index((row + 1, col))]
                if bool(val & Grid.BOTTOM) != bool(below & Grid.TOP):
                    return False
        return True

    @staticmethod
    def is_perfect(grid: Grid) -> bool:
        """Spanning tree check: connected with exactly rows*cols - 1 passages."""
        return (MazePostProcessor.walls_symmetric(grid)
                and grid.passage_count() == grid.size - 1
                and MazePostProcessor.is_connected(grid))
