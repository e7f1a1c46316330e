import sys
import os
import time
import argparse

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gridmaze.algo.generate import GenerationAlgorithm, generate
from gridmaze.algo.solvers import SolvingAlgorithm, solve
from gridmaze.core.complexity import MazePostProcessor

# ==========================================
# GLOBAL CONFIGURATION
# Add or remove names here to include/exclude them from the race.
# ==========================================
ENABLED_GENERATORS = [GenerationAlgorithm.DFS, GenerationAlgorithm.PRIM]
ENABLED_SOLVERS = list(SolvingAlgorithm)


def run_benchmark():
    parser = argparse.ArgumentParser(description="Solver Benchmark")
    parser.add_argument("--rows", type=int, default=150, help="Maze rows")
    parser.add_argument("--cols", type=int, default=150, help="Maze columns")
    parser.add_argument("--braid", type=float, default=0.1, help="Braid Factor (0.0-1.0)")
    parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    args = parser.parse_args()

    print(f"=== MAZE SOLVER BENCHMARK ===")
    print(f"Size: {args.rows}x{args.cols} | Braid: {args.braid}")
    print(f"Solvers: {', '.join(a.value for a in ENABLED_SOLVERS)}")
    print("-" * 50)

    start = (0, 0)
    end = (args.rows - 1, args.cols - 1)

    for gen_algo in ENABLED_GENERATORS:
        t0 = time.perf_counter()
        grid = generate(gen_algo, args.rows, args.cols, seed=args.seed)
        print(f"\n[{gen_algo.value}] generated in {time.perf_counter() - t0:.4f}s")

        if args.braid > 0:
            removed = MazePostProcessor.braid(grid, factor=args.braid, seed=args.seed)
            print(f"Braided: Removed {removed} dead ends.")

        print(f"{'SOLVER':<10} | {'TIME (s)':<10} | {'PATH LEN':<10} | {'VISITED':<10}")
        for solve_algo in ENABLED_SOLVERS:
            t_start = time.perf_counter()
            trace = solve(solve_algo, grid, start, end)
            duration = time.perf_counter() - t_start
            print(f"{solve_algo.value:<10} | {duration:<10.4f} | {len(trace.path):<10} | {trace.explored:<10}")


if __name__ == "__main__":
    run_benchmark()
