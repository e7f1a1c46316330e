from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from gridmaze.core.grid import Position


@dataclass(frozen=True)
class Trace:
    """
    Result of one solve call.
    visited: cells in the order they were expanded (popped, not discovered).
    path: start..end inclusive, empty when end is unreachable.
    An empty path is a valid result, not an error.
    """
    algorithm: str
    start: Position
    end: Position
    visited: Tuple[Position, ...] = field(default_factory=tuple)
    path: Tuple[Position, ...] = field(default_factory=tuple)

    @property
    def found(self) -> bool:
        return len(self.path) > 0

    @property
    def steps(self) -> int:
        # Edge count of the path
        return max(len(self.path) - 1, 0)

    @property
    def explored(self) -> int:
        return len(self.visited)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "start": list(self.start),
            "end": list(self.end),
            "visited": [list(p) for p in self.visited],
            "path": [list(p) for p in self.path],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trace":
        return cls(
            algorithm=data["algorithm"],
            start=tuple(data["start"]),
            end=tuple(data["end"]),
            visited=tuple(tuple(p) for p in data.get("visited", [])),
            path=tuple(tuple(p) for p in data.get("path", [])),
        )
