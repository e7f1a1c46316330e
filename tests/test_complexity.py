import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gridmaze.core.grid import Grid
from gridmaze.core.complexity import MazePostProcessor
from gridmaze.algo.generate import generate

class TestComplexity(unittest.TestCase):
    def test_braiding(self):
        grid = generate("DFS", 20, 20, seed=42)

        # Initial stats
        stats1 = MazePostProcessor.calculate_stats(grid)
        self.assertGreater(stats1["dead_ends"], 0)
        self.assertEqual(stats1["passages"], 20 * 20 - 1)

        # Braid 1.0 (Remove all dead ends)
        removed = MazePostProcessor.braid(grid, factor=1.0, seed=42)

        # Final stats
        stats2 = MazePostProcessor.calculate_stats(grid)
        self.assertEqual(stats2["dead_ends"], 0, "Factor 1.0 should remove all dead ends")
        self.assertGreater(removed, 0)
        self.assertEqual(stats2["passages"], stats1["passages"] + removed)

        # Loops now exist but the wall layout stays consistent
        self.assertTrue(MazePostProcessor.walls_symmetric(grid))
        self.assertTrue(MazePostProcessor.is_connected(grid))
        self.assertFalse(MazePostProcessor.is_perfect(grid))

    def test_partial_braiding(self):
        grid = generate("DFS", 30, 30, seed=99)

        initial_dead_ends = MazePostProcessor.calculate_stats(grid)["dead_ends"]

        # Braid 50%
        MazePostProcessor.braid(grid, factor=0.5, seed=99)

        stats_new = MazePostProcessor.calculate_stats(grid)
        # Should have fewer dead ends, but not zero
        self.assertLess(stats_new["dead_ends"], initial_dead_ends)
        self.assertGreater(stats_new["dead_ends"], 0)

    def test_zero_factor_is_noop(self):
        grid = generate("Prim", 10, 10, seed=4)
        before = grid.copy()
        self.assertEqual(MazePostProcessor.braid(grid, factor=0.0, seed=4), 0)
        self.assertEqual(grid, before)

    def test_stats_categories(self):
        grid = generate("Prim", 9, 11, seed=6)
        stats = MazePostProcessor.calculate_stats(grid)
        # Every cell in a perfect maze of 2+ cells has at least one exit
        self.assertEqual(stats["dead_ends"] + stats["corridors"] + stats["intersections"], 9 * 11)
        self.assertAlmostEqual(stats["dead_end_percent"], stats["dead_ends"] / 99 * 100)

    def test_checks_on_blank_grid(self):
        grid = Grid(3, 3)
        self.assertTrue(MazePostProcessor.walls_symmetric(grid))
        self.assertFalse(MazePostProcessor.is_connected(grid))
        self.assertFalse(MazePostProcessor.is_perfect(grid))

    def test_asymmetric_walls_detected(self):
        grid = Grid(2, 2)
        # Bypass remove_wall_between to fake a corrupted layout
        grid.cells[0] &= ~Grid.RIGHT
        self.assertFalse(MazePostProcessor.walls_symmetric(grid))

    def test_cycle_is_not_perfect(self):
        grid = Grid(2, 2)
        grid.remove_wall_between((0, 0), (0, 1))
        grid.remove_wall_between((0, 1), (1, 1))
        grid.remove_wall_between((1, 1), (1, 0))
        self.assertTrue(MazePostProcessor.is_perfect(grid))
        grid.remove_wall_between((1, 0), (0, 0))
        self.assertFalse(MazePostProcessor.is_perfect(grid))

if __name__ == '__main__':
    unittest.main()
