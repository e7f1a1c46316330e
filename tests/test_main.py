import contextlib
import io
import json
import unittest
import sys
import os
import shutil

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gridmaze.main import main
from gridmaze.io.serializer import MazeSerializer

OUT_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "test_out_cli")

class TestCLI(unittest.TestCase):
    def setUp(self):
        os.makedirs(OUT_DIR, exist_ok=True)

    def tearDown(self):
        shutil.rmtree(OUT_DIR, ignore_errors=True)

    def run_cli(self, *argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = main(list(argv))
        return code, out.getvalue()

    def test_generate_and_solve(self):
        maze_path = os.path.join(OUT_DIR, "m.maze")
        trace_path = os.path.join(OUT_DIR, "t.json")
        code, _ = self.run_cli("generate", "--rows", "8", "--cols", "9", "--algo", "Prim",
                               "--seed", "4", "--out", maze_path)
        self.assertEqual(code, 0)
        grid, meta = MazeSerializer.load(maze_path)
        self.assertEqual((grid.rows, grid.cols), (8, 9))
        self.assertEqual(meta["algo"], "Prim")

        code, out = self.run_cli("solve", maze_path, "--algo", "AStar", "--trace-out", trace_path)
        self.assertEqual(code, 0)
        self.assertIn("Path Length", out)
        with open(trace_path, "r", encoding="utf-8") as f:
            trace = json.load(f)
        self.assertEqual(trace["path"][0], [0, 0])
        self.assertEqual(trace["path"][-1], [7, 8])

    def test_json_output(self):
        maze_path = os.path.join(OUT_DIR, "m.json")
        code, _ = self.run_cli("generate", "--rows", "3", "--cols", "3", "--seed", "1", "--out", maze_path)
        self.assertEqual(code, 0)
        code, out = self.run_cli("solve", maze_path, "--start", "2", "2", "--end", "0", "0")
        self.assertEqual(code, 0)

    def test_record_and_replay(self):
        gen_log = os.path.join(OUT_DIR, "gen.events")
        maze_path = os.path.join(OUT_DIR, "m.maze")
        rebuilt_path = os.path.join(OUT_DIR, "r.maze")
        solve_log = os.path.join(OUT_DIR, "solve.events")

        self.run_cli("generate", "--rows", "5", "--cols", "5", "--seed", "2",
                     "--out", maze_path, "--record-events", gen_log)
        code, out = self.run_cli("replay", gen_log, "--out", rebuilt_path)
        self.assertEqual(code, 0)
        self.assertIn("perfect=True", out)
        self.assertEqual(MazeSerializer.load(maze_path)[0], MazeSerializer.load(rebuilt_path)[0])

        self.run_cli("solve", maze_path, "--algo", "DFS", "--record-events", solve_log)
        code, out = self.run_cli("replay", solve_log)
        self.assertEqual(code, 0)
        self.assertIn("DFS", out)

    def test_record_events_with_braid(self):
        gen_log = os.path.join(OUT_DIR, "braid.events")
        maze_path = os.path.join(OUT_DIR, "m.maze")
        rebuilt_path = os.path.join(OUT_DIR, "r.maze")

        code, _ = self.run_cli("generate", "--rows", "8", "--cols", "8", "--seed", "3", "--braid", "0.5",
                               "--out", maze_path, "--record-events", gen_log)
        self.assertEqual(code, 0)
        code, _ = self.run_cli("replay", gen_log, "--out", rebuilt_path)
        self.assertEqual(code, 0)
        # Braid carves land in the same log
        self.assertEqual(MazeSerializer.load(maze_path)[0], MazeSerializer.load(rebuilt_path)[0])

    def test_seed_only_braid_rejected_before_generating(self):
        gen_log = os.path.join(OUT_DIR, "rejected.events")
        maze_path = os.path.join(OUT_DIR, "m.maze")
        code, _ = self.run_cli("generate", "--rows", "4", "--cols", "4", "--seed", "1", "--braid", "0.5",
                               "--seed-only", "--out", maze_path, "--record-events", gen_log)
        self.assertEqual(code, 1)
        self.assertFalse(os.path.exists(gen_log))
        self.assertFalse(os.path.exists(maze_path))

    def test_errors_exit_nonzero(self):
        code, _ = self.run_cli("generate", "--rows", "0", "--cols", "5")
        self.assertEqual(code, 1)

        maze_path = os.path.join(OUT_DIR, "m.maze")
        self.run_cli("generate", "--rows", "3", "--cols", "3", "--out", maze_path)
        code, _ = self.run_cli("solve", maze_path, "--end", "-1", "0")
        self.assertEqual(code, 1)

    def test_benchmark(self):
        code, out = self.run_cli("benchmark", "--size", "10")
        self.assertEqual(code, 0)
        for name in ("DFS", "BFS", "AStar", "Dijkstra"):
            self.assertIn(name, out)

if __name__ == '__main__':
    unittest.main()
