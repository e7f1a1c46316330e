import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from gridmaze.core.grid import Grid


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


@dataclass
class Maze:
    """A carved Grid plus the metadata of the run that produced it."""
    grid: Grid
    algorithm: str
    effective_algorithm: str
    seed: Optional[int] = None
    name: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(default_factory=_now)

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols

    @property
    def aliased(self) -> bool:
        return self.algorithm != self.effective_algorithm
