"""
Fare Lookup

Loads a stop-to-stop bus fare chart from Excel and answers fare queries.

Usage:
    from fare_lookup import FareMatrixStore

    store = FareMatrixStore.from_path(Path("data/fare_data.xlsx"))
    fare = store.get_fare("Kalyani Nagar", "Ramwadi")
"""

from .errors import (
    EmptyDataError,
    FareDataError,
    FareLookupError,
    MissingParameterError,
    ShapeMismatchError,
    UnknownStopError,
)
from .loader import coerce_fare, load_fare_matrix, parse_fare_sheet
from .models import CacheState, FareMatrix
from .store import FareMatrixStore

__all__ = [
    "CacheState",
    "EmptyDataError",
    "FareDataError",
    "FareLookupError",
    "FareMatrix",
    "FareMatrixStore",
    "MissingParameterError",
    "ShapeMismatchError",
    "UnknownStopError",
    "coerce_fare",
    "load_fare_matrix",
    "parse_fare_sheet",
]
