"""
FareMatrixStore - cache and lookup interface over a FareMatrix.

The store is created once by the application and handed to whatever
answers queries. The matrix is loaded on first use and kept for the life
of the store; a failed load leaves the store empty so the next call tries
again.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable

from .errors import ShapeMismatchError, UnknownStopError
from .loader import load_fare_matrix
from .models import CacheState, Fare, FareMatrix

logger = logging.getLogger(__name__)


class FareMatrixStore:
    """
    Lazily loaded fare matrix with name-based lookups.

    Loads are serialized: concurrent cold-start requests wait for a single
    read of the source instead of each parsing it.

    Usage:
        store = FareMatrixStore.from_path(Path("data/fare_data.xlsx"))
        store.get_stops()
        store.get_fare("Kalyani Nagar", "Ramwadi")
    """

    def __init__(self, loader: Callable[[], FareMatrix]):
        """
        Args:
            loader: Zero-argument callable returning a freshly parsed matrix
        """
        self._loader = loader
        self._matrix: FareMatrix | None = None
        self._state = CacheState.EMPTY
        self._lock = threading.Lock()

    @classmethod
    def from_path(cls, excel_path: Path, *, strict_rows: bool = False) -> "FareMatrixStore":
        return cls(lambda: load_fare_matrix(excel_path, strict_rows=strict_rows))

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state is CacheState.READY

    @property
    def matrix(self) -> FareMatrix | None:
        """The cached matrix, without triggering a load."""
        return self._matrix

    def load(self) -> FareMatrix:
        """Return the cached matrix, loading it first if needed."""
        matrix = self._matrix
        if matrix is not None:
            return matrix

        with self._lock:
            if self._matrix is not None:
                return self._matrix

            self._state = CacheState.LOADING
            try:
                matrix = self._loader()
            except Exception:
                self._state = CacheState.EMPTY
                logger.warning("Fare data load failed; cache left empty")
                raise

            self._matrix = matrix
            self._state = CacheState.READY
            return matrix

    def get_stops(self) -> list[str]:
        return list(self.load().stops)

    def get_fare(self, from_stop: str, to_stop: str) -> Fare:
        """
        Look up the fare between two stops.

        Names must match the normalized header text exactly. When a name
        appears more than once in the header, the first column wins.

        Raises:
            UnknownStopError: Either name is not a known stop
            ShapeMismatchError: The origin's row has no cell for the
                destination (ragged matrix)
        """
        matrix = self.load()

        from_index = matrix.index_of(from_stop)
        to_index = matrix.index_of(to_stop)

        unknown = [name for name, idx in ((from_stop, from_index), (to_stop, to_index)) if idx is None]
        if unknown:
            raise UnknownStopError(unknown)

        row = matrix.fares[from_index]
        if to_index >= len(row):
            raise ShapeMismatchError(
                f"No fare recorded from {from_stop!r} to {to_stop!r}: row has {len(row)} of {len(matrix.stops)} cells"
            )
        return row[to_index]
