import argparse
import json
import sys
import os
import logging
import time

# Ensure project root is in path so we can import 'gridmaze' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gridmaze.algo.generate import GenerationAlgorithm, create_maze
from gridmaze.algo.solvers import SolvingAlgorithm, solve
from gridmaze.core.complexity import MazePostProcessor
from gridmaze.core.errors import MazeError
from gridmaze.core.maze import Maze
from gridmaze.io.events import EventWriter, EventReader, EVT_CARVE, replay_carves, read_traces
from gridmaze.io.serializer import MazeSerializer

logger = logging.getLogger("gridmaze")

DEFAULT_SIZE = 20


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="gridmaze: perfect maze generator and solver")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_choices = [a.value for a in GenerationAlgorithm]
    solve_choices = [a.value for a in SolvingAlgorithm]

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    gen_parser.add_argument("--rows", type=int, default=DEFAULT_SIZE, help="Maze rows")
    gen_parser.add_argument("--cols", type=int, default=DEFAULT_SIZE, help="Maze columns")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--algo", type=str, default="DFS", choices=gen_choices, help="Generation Algorithm")
    gen_parser.add_argument("--braid", type=float, default=0.0, help="Braid Factor (0.0 - 1.0)")
    gen_parser.add_argument("--out", type=str, help="Output file path (.json for a JSON record)")
    gen_parser.add_argument("--compress", action="store_true", help="zlib-compress binary output")
    gen_parser.add_argument("--seed-only", action="store_true", help="Store only seed and algorithm")
    gen_parser.add_argument("--record-events", type=str, help="Save generation events to binary file")

    # Solve Command
    solve_parser = subparsers.add_parser("solve", help="Solve an existing maze")
    solve_parser.add_argument("input_file", help="Path to maze file")
    solve_parser.add_argument("--algo", type=str, default="BFS", choices=solve_choices, help="Solver algorithm")
    solve_parser.add_argument("--start", type=int, nargs=2, metavar=("ROW", "COL"), help="Start cell (default 0 0)")
    solve_parser.add_argument("--end", type=int, nargs=2, metavar=("ROW", "COL"), help="End cell (default bottom-right)")
    solve_parser.add_argument("--record-events", type=str, help="Save solver trace to binary event file")
    solve_parser.add_argument("--trace-out", type=str, help="Save solver trace as JSON")

    # Replay Command
    replay_parser = subparsers.add_parser("replay", help="Rebuild a maze or list traces from an event log")
    replay_parser.add_argument("event_file", help="Path to event log file")
    replay_parser.add_argument("--out", type=str, help="Save the rebuilt maze")

    # Benchmark Command
    bench_parser = subparsers.add_parser("benchmark", help="Run performance suite")
    bench_parser.add_argument("--size", type=int, default=100, help="Benchmark size")
    bench_parser.add_argument("--seed", type=int, default=123, help="Random Seed")
    bench_parser.add_argument("--braid", type=float, default=0.0, help="Braid Factor (0.0 - 1.0)")

    return parser


def load_maze(path: str) -> Maze:
    if path.endswith(".json"):
        return MazeSerializer.load_json(path)
    grid, meta = MazeSerializer.load(path)
    algo = meta.get("algo", "DFS")
    return Maze(grid=grid, algorithm=algo, effective_algorithm=meta.get("effective_algo", algo),
                seed=meta.get("seed"), name=os.path.basename(path))


def save_maze(maze: Maze, path: str, compress: bool = False, seed_only: bool = False):
    if path.endswith(".json"):
        MazeSerializer.save_json(maze, path)
        return
    meta = {"algo": maze.algorithm, "effective_algo": maze.effective_algorithm, "seed": maze.seed}
    MazeSerializer.save(maze.grid, path, meta=meta, seed_only=seed_only, compress=compress)


def cmd_generate(args):
    if args.seed_only and args.braid > 0.0:
        raise MazeError("--seed-only cannot store a braided maze")

    logger.info(f"Generating {args.rows}x{args.cols} maze with {args.algo}...")

    # Create Event Writer if requested
    evt_writer = None
    if args.record_events:
        evt_writer = EventWriter(args.record_events)
        logger.info(f"Recording events to {args.record_events}...")

    try:
        maze = create_maze(args.algo, args.rows, args.cols, seed=args.seed, event_writer=evt_writer)

        # Post-Processing (Braid), logged to the same event file
        if args.braid > 0.0:
            logger.info(f"Braiding maze (factor={args.braid})...")
            maze.grid.event_writer = evt_writer
            try:
                removed = MazePostProcessor.braid(maze.grid, factor=args.braid, seed=args.seed)
            finally:
                maze.grid.event_writer = None
            logger.info(f"Removed {removed} dead ends.")
    finally:
        if evt_writer:
            evt_writer.close()

    stats = MazePostProcessor.calculate_stats(maze.grid)
    logger.info(f"Stats: {stats}")

    if args.out:
        logger.info(f"Saving maze to {args.out}...")
        save_maze(maze, args.out, compress=args.compress, seed_only=args.seed_only)
        logger.info("Save complete.")
    return 0


def cmd_solve(args):
    logger.info(f"Loading {args.input_file}...")
    maze = load_maze(args.input_file)
    grid = maze.grid
    logger.info(f"Loaded {grid.rows}x{grid.cols} maze ({maze.algorithm}).")

    start = tuple(args.start) if args.start else (0, 0)
    end = tuple(args.end) if args.end else (grid.rows - 1, grid.cols - 1)

    logger.info(f"Solving with {args.algo} from {start} to {end}...")
    t0 = time.perf_counter()
    trace = solve(args.algo, grid, start, end)
    duration = time.perf_counter() - t0

    if trace.found:
        print(f"Done. Path Length: {len(trace.path)} ({trace.steps} steps), "
              f"Visited: {trace.explored}, Time: {duration * 1000:.2f} ms")
    else:
        print(f"No path found. Visited: {trace.explored}")

    if args.record_events:
        with EventWriter(args.record_events) as evt_writer:
            evt_writer.write_header(grid.rows, grid.cols)
            evt_writer.write_trace(trace)
        logger.info(f"Saved events to {args.record_events}")

    if args.trace_out:
        with open(args.trace_out, "w", encoding="utf-8") as f:
            json.dump(trace.to_dict(), f)
        logger.info(f"Saved trace to {args.trace_out}")
    return 0


def cmd_replay(args):
    logger.info(f"Replaying {args.event_file}...")
    with EventReader(args.event_file) as reader:
        rows, cols = reader.read_header()
        has_carves = any(code == EVT_CARVE for code, _ in reader.stream_events())
    logger.info(f"Log Header: {rows}x{cols}")

    if has_carves:
        with EventReader(args.event_file) as reader:
            grid = replay_carves(reader)
        print(f"Rebuilt {grid.rows}x{grid.cols} maze, {grid.passage_count()} passages, "
              f"perfect={MazePostProcessor.is_perfect(grid)}")
        if args.out:
            save_maze(Maze(grid=grid, algorithm="replay", effective_algorithm="replay"), args.out)
            logger.info(f"Saved maze to {args.out}")
    else:
        with EventReader(args.event_file) as reader:
            traces = read_traces(reader)
        for trace in traces:
            print(f"{trace.algorithm:<10} {trace.start} -> {trace.end}: "
                  f"visited {trace.explored}, path {len(trace.path)}")
    return 0


def cmd_benchmark(args):
    logger.info(f"Running Solver Benchmark Suite (Size: {args.size}x{args.size})...")

    logger.info("Generating base maze (DFS)...")
    t0 = time.perf_counter()
    maze = create_maze(GenerationAlgorithm.DFS, args.size, args.size, seed=args.seed)
    logger.info(f"Generation complete in {time.perf_counter() - t0:.4f}s")

    if args.braid > 0.0:
        removed = MazePostProcessor.braid(maze.grid, factor=args.braid, seed=args.seed)
        logger.info(f"Braided: Removed {removed} dead ends.")

    print(f"\n{'ALGORITHM':<20} | {'TIME (s)':<10} | {'PATH LEN':<10} | {'VISITED':<10}")
    print("-" * 60)

    start_pos = (0, 0)
    end_pos = (args.size - 1, args.size - 1)

    for algo in SolvingAlgorithm:
        t_start = time.perf_counter()
        trace = solve(algo, maze.grid, start_pos, end_pos)
        duration = time.perf_counter() - t_start
        print(f"{algo.value:<20} | {duration:<10.4f} | {len(trace.path):<10} | {trace.explored:<10}")
    return 0


COMMANDS = {
    "generate": cmd_generate,
    "solve": cmd_solve,
    "replay": cmd_replay,
    "benchmark": cmd_benchmark,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")
    try:
        return COMMANDS[args.command](args)
    except MazeError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
