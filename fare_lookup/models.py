"""
Internal models for fare lookup.

FareMatrix is the single format every fare sheet is parsed into, so the
lookup side never touches spreadsheet cells.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

Fare = int | float


class CacheState(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class FareMatrix:
    """
    Stop-to-stop fare table.

    Attributes:
        stops: Stop names in source column order (duplicates kept)
        fares: One row per data row; fares[i][j] is the fare from
            stops[i] to stops[j]
        source_path: File the matrix was read from, if any
        source_mtime: Modification time of that file at load time
    """
    stops: tuple[str, ...]
    fares: tuple[tuple[Fare, ...], ...]
    source_path: Path | None = field(default=None, compare=False)
    source_mtime: float | None = field(default=None, compare=False)

    def index_of(self, name: str) -> int | None:
        """Return the first index of a stop name, or None if absent."""
        try:
            return self.stops.index(name)
        except ValueError:
            return None

    @property
    def is_square(self) -> bool:
        size = len(self.stops)
        return len(self.fares) == size and all(len(row) == size for row in self.fares)

    def ragged_rows(self) -> list[int]:
        """Indexes of rows whose length differs from the stop count."""
        size = len(self.stops)
        return [i for i, row in enumerate(self.fares) if len(row) != size]

    def to_dict(self) -> dict:
        return {
            "stops": list(self.stops),
            "fares": [list(row) for row in self.fares],
        }
