import random
from abc import ABC, abstractmethod
from array import array
from typing import Iterator, Optional

from gridmaze.core.grid import Grid


class Generator(ABC):
    def __init__(self, grid: Grid, rng: Optional[random.Random] = None, seed: int = None):
        self.grid = grid
        self.seed = seed
        # Injected random source; a seeded private one otherwise
        self.rng = rng if rng is not None else random.Random(seed)
        self.step_count = 0
        # Generation-local "in maze" flags, never stored on the Grid
        self.visited = array('B', [0] * grid.size)

    @abstractmethod
    def run(self) -> Iterator[str]:
        """
        Yields status strings or progress updates.
        The actual grid modifications happen in-place on self.grid.
        """
        pass

    def run_all(self):
        """Helper to run the generator to completion."""
        for _ in self.run():
            pass

    def random_cell(self):
        return self.rng.randrange(self.grid.rows), self.rng.randrange(self.grid.cols)
