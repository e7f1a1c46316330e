import logging
import random
from enum import Enum
from typing import Dict, Optional, Union

from gridmaze.core.errors import InvalidDimension, UnknownAlgorithm
from gridmaze.core.grid import Grid
from gridmaze.core.maze import Maze
from gridmaze.algo.dfs import RecursiveBacktracker
from gridmaze.algo.prim import PrimsAlgorithm

logger = logging.getLogger(__name__)


class GenerationAlgorithm(Enum):
    DFS = "DFS"
    BFS = "BFS"
    PRIM = "Prim"
    KRUSKAL = "Kruskal"
    RECURSIVE_DIVISION = "RecursiveDivision"
    ALDOUS_BRODER = "AldousBroder"

    @classmethod
    def parse(cls, value: Union[str, "GenerationAlgorithm"]) -> "GenerationAlgorithm":
        if isinstance(value, cls):
            return value
        key = str(value).replace("_", "").replace("-", "").lower()
        for algo in cls:
            if key in (algo.value.lower(), algo.name.replace("_", "").lower()):
                return algo
        raise UnknownAlgorithm(f"Unknown generation algorithm: {value!r}")


IMPLEMENTATIONS = {
    GenerationAlgorithm.DFS: RecursiveBacktracker,
    GenerationAlgorithm.PRIM: PrimsAlgorithm,
}

# Recognised names without their own carver run the backtracker instead
GENERATION_ALIASES: Dict[GenerationAlgorithm, GenerationAlgorithm] = {
    GenerationAlgorithm.BFS: GenerationAlgorithm.DFS,
    GenerationAlgorithm.KRUSKAL: GenerationAlgorithm.DFS,
    GenerationAlgorithm.RECURSIVE_DIVISION: GenerationAlgorithm.DFS,
    GenerationAlgorithm.ALDOUS_BRODER: GenerationAlgorithm.DFS,
}


def resolve_generation_algorithm(algorithm) -> GenerationAlgorithm:
    """Returns the algorithm that will actually run, warning when an alias applies."""
    requested = GenerationAlgorithm.parse(algorithm)
    effective = GENERATION_ALIASES.get(requested, requested)
    if effective is not requested:
        logger.warning(f"{requested.value} generation is not implemented; "
                       f"using {effective.value} instead")
    return effective


def generate(algorithm, rows: int, cols: int, seed: int = None,
             rng: Optional[random.Random] = None, event_writer=None) -> Grid:
    """
    Carves a perfect maze on a fresh rows x cols grid.
    Pass either a seed or an already-seeded random.Random for reproducible output.
    """
    if rows <= 0 or cols <= 0:
        raise InvalidDimension(rows, cols)

    effective = resolve_generation_algorithm(algorithm)
    grid = Grid(rows, cols, event_writer=event_writer)

    logger.debug(f"Generating {rows}x{cols} maze with {effective.value} (seed={seed})")
    generator = IMPLEMENTATIONS[effective](grid, rng=rng, seed=seed)
    try:
        generator.run_all()
    finally:
        # The log belongs to this run only; later carves must not write to it
        grid.event_writer = None
    logger.debug(f"Carved {generator.step_count} passages")
    return grid


def create_maze(algorithm, rows: int, cols: int, seed: int = None,
                rng: Optional[random.Random] = None, name: str = None, event_writer=None) -> Maze:
    requested = GenerationAlgorithm.parse(algorithm)
    effective = resolve_generation_algorithm(requested)
    grid = generate(effective, rows, cols, seed=seed, rng=rng, event_writer=event_writer)
    return Maze(
        grid=grid,
        algorithm=requested.value,
        effective_algorithm=effective.value,
        seed=seed,
        name=name or f"{requested.value} {rows}x{cols}",
    )
