import random
import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gridmaze.core.grid import Grid
from gridmaze.core.complexity import MazePostProcessor
from gridmaze.core.errors import InvalidDimension, UnknownAlgorithm
from gridmaze.algo.dfs import RecursiveBacktracker
from gridmaze.algo.prim import PrimsAlgorithm
from gridmaze.algo.generate import GenerationAlgorithm, GENERATION_ALIASES, generate, create_maze
from gridmaze.algo.solvers import solve

class TestGenerators(unittest.TestCase):
    def test_dfs_perfect(self):
        rows, cols = 20, 15
        grid = Grid(rows, cols)
        RecursiveBacktracker(grid, seed=42).run_all()

        self.assertEqual(grid.passage_count(), rows * cols - 1)
        self.assertTrue(MazePostProcessor.is_connected(grid), "DFS should reach every cell")
        self.assertTrue(MazePostProcessor.walls_symmetric(grid))

    def test_prim_perfect(self):
        rows, cols = 15, 20
        grid = Grid(rows, cols)
        PrimsAlgorithm(grid, seed=42).run_all()

        self.assertEqual(grid.passage_count(), rows * cols - 1)
        self.assertTrue(MazePostProcessor.is_connected(grid), "Prim's should reach every cell")
        self.assertTrue(MazePostProcessor.walls_symmetric(grid))

    def test_many_seeds_and_shapes(self):
        for algo in (GenerationAlgorithm.DFS, GenerationAlgorithm.PRIM):
            for rows, cols in [(1, 1), (1, 9), (9, 1), (2, 2), (7, 5)]:
                for seed in range(5):
                    grid = generate(algo, rows, cols, seed=seed)
                    self.assertTrue(MazePostProcessor.is_perfect(grid), f"{algo} {rows}x{cols} seed={seed}")

    def test_boundary_walls_untouched(self):
        grid = generate("Prim", 6, 6, seed=3)
        for col in range(6):
            self.assertTrue(grid.has_wall((0, col), Grid.TOP))
            self.assertTrue(grid.has_wall((5, col), Grid.BOTTOM))
        for row in range(6):
            self.assertTrue(grid.has_wall((row, 0), Grid.LEFT))
            self.assertTrue(grid.has_wall((row, 5), Grid.RIGHT))

    def test_two_by_two_scenario(self):
        grid = generate(GenerationAlgorithm.DFS, 2, 2, seed=7)
        self.assertEqual(grid.passage_count(), 3)
        self.assertEqual(grid, generate(GenerationAlgorithm.DFS, 2, 2, seed=7))

        # Opposite corners are always joined through one of the other two cells
        for algo in (GenerationAlgorithm.DFS, GenerationAlgorithm.PRIM):
            for seed in range(5):
                grid = generate(algo, 2, 2, seed=seed)
                path = solve("BFS", grid, (0, 0), (1, 1)).path
                self.assertEqual(path[0], (0, 0))
                self.assertEqual(path[-1], (1, 1))
                self.assertEqual(len(path), 3)
                self.assertIn(path[1], ((0, 1), (1, 0)))

    def test_determinism(self):
        grid1 = Grid(10, 10)
        RecursiveBacktracker(grid1, seed=12345).run_all()

        grid2 = Grid(10, 10)
        rec = RecursiveBacktracker(grid2, seed=12345)
        for _ in rec.run(): pass

        self.assertEqual(grid1.cells.tobytes(), grid2.cells.tobytes())

    def test_injected_rng(self):
        a = generate("Prim", 12, 12, rng=random.Random(99))
        b = generate("Prim", 12, 12, seed=99)
        self.assertEqual(a, b)

    def test_no_residual_state(self):
        grid = generate("DFS", 8, 8, seed=1)
        for val in grid.cells:
            self.assertEqual(val & ~Grid.ALL_WALLS, 0)

    def test_invalid_dimension(self):
        with self.assertRaises(InvalidDimension):
            generate("DFS", 0, 5)
        with self.assertRaises(InvalidDimension):
            generate("Prim", 5, -2)

    def test_unknown_algorithm(self):
        with self.assertRaises(UnknownAlgorithm):
            generate("Wilson", 5, 5)

    def test_parse_names(self):
        self.assertIs(GenerationAlgorithm.parse("prim"), GenerationAlgorithm.PRIM)
        self.assertIs(GenerationAlgorithm.parse("recursive_division"), GenerationAlgorithm.RECURSIVE_DIVISION)
        self.assertIs(GenerationAlgorithm.parse("AldousBroder"), GenerationAlgorithm.ALDOUS_BRODER)

    def test_aliases_warn_and_match_dfs(self):
        for alias in GENERATION_ALIASES:
            with self.assertLogs("gridmaze.algo.generate", level="WARNING") as logs:
                grid = generate(alias, 6, 6, seed=11)
            self.assertIn("not implemented", logs.output[0])
            self.assertEqual(grid, generate(GenerationAlgorithm.DFS, 6, 6, seed=11))

    def test_create_maze_metadata(self):
        with self.assertLogs("gridmaze.algo.generate", level="WARNING"):
            maze = create_maze("Kruskal", 4, 5, seed=2)
        self.assertEqual(maze.algorithm, "Kruskal")
        self.assertEqual(maze.effective_algorithm, "DFS")
        self.assertTrue(maze.aliased)
        self.assertEqual((maze.rows, maze.cols), (4, 5))
        self.assertEqual(maze.seed, 2)

        other = create_maze("Prim", 4, 5, seed=2)
        self.assertFalse(other.aliased)
        self.assertNotEqual(maze.id, other.id)

if __name__ == '__main__':
    unittest.main()
