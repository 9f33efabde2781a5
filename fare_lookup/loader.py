"""
Fare Matrix Loader

Turns the first worksheet of a fare chart into a FareMatrix.

Expected layout:
- Row 1 is the header: column A is a label (e.g. "BRT Bus Shelter"),
  columns B.. are the destination stops
- Every following row holds the fares from one stop; column A repeats the
  stop label and is not read
- Blank or non-numeric fare cells count as 0

Usage:
    from fare_lookup.loader import load_fare_matrix

    matrix = load_fare_matrix(Path("data/fare_data.xlsx"))
"""

from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from .errors import EmptyDataError, ShapeMismatchError
from .models import Fare, FareMatrix

logger = logging.getLogger(__name__)

# Column A holds the row label in both the header and the data rows
LABEL_COLUMNS = 1

_LINE_BREAKS = re.compile(r"\r\n|\r|\n")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _cell_text(value: Any) -> str:
    """Rendered text of a cell, the way the sheet would display it."""
    if _is_blank(value):
        return ""
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return str(value)


def normalize_stop_name(value: Any) -> str:
    """
    Normalize a header cell into a stop name.

    Line breaks inside the cell (wrapped shelter names) become single
    spaces. Nothing else is changed: no trimming, no case folding.
    """
    return _LINE_BREAKS.sub(" ", _cell_text(value))


def coerce_fare(value: Any) -> Fare:
    """
    Coerce a fare cell to a number.

    Anything that is not a finite number (blank cells, text such as "-" or
    "N/A", booleans) becomes 0. Integral values are returned as int.
    """
    if value is None or isinstance(value, (bool, np.bool_)):
        return 0
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
    else:
        text = str(value).strip()
        if text == "" or "_" in text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return 0

    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def _extract_stops(header: list[Any]) -> list[str]:
    stops: list[str] = []
    for value in header[LABEL_COLUMNS:]:
        name = normalize_stop_name(value)
        if name:
            stops.append(name)
    return stops


def _extract_fare_row(cells: list[Any]) -> list[Fare]:
    values = cells[LABEL_COLUMNS:]

    # A row ends at its last populated cell
    end = len(values)
    while end > 0 and _is_blank(values[end - 1]):
        end -= 1

    return [coerce_fare(v) for v in values[:end]]


def parse_fare_sheet(
    frame: pd.DataFrame,
    *,
    strict_rows: bool = False,
    source_path: Path | None = None,
    source_mtime: float | None = None,
) -> FareMatrix:
    """
    Parse a raw worksheet into a FareMatrix.

    Args:
        frame: Worksheet read with header=None, so row 0 is the header row
        strict_rows: Also reject data rows whose length differs from the
            number of stops
        source_path: Recorded on the matrix for reference
        source_mtime: Recorded on the matrix for reference

    Returns:
        FareMatrix with stops from the header and one fare row per data row

    Raises:
        EmptyDataError: No stops in the header or no data rows
        ShapeMismatchError: Row count differs from stop count, or (strict
            mode) a row length differs from stop count
    """
    rows = frame.values.tolist()

    stops = _extract_stops(rows[0]) if rows else []
    fares = [_extract_fare_row(cells) for cells in rows[1:]]

    if not stops or not fares:
        raise EmptyDataError("No data found in worksheet")

    if len(stops) != len(fares):
        raise ShapeMismatchError(
            f"Stops and fares data mismatch in size: {len(stops)} stops, {len(fares)} fare rows"
        )

    matrix = FareMatrix(
        stops=tuple(stops),
        fares=tuple(tuple(row) for row in fares),
        source_path=source_path,
        source_mtime=source_mtime,
    )

    ragged = matrix.ragged_rows()
    if ragged:
        detail = ", ".join(f"{matrix.stops[i]!r} ({len(matrix.fares[i])})" for i in ragged)
        if strict_rows:
            raise ShapeMismatchError(
                f"Fare rows do not match the {len(stops)} stops: {detail}"
            )
        logger.warning(f"Ragged fare rows (expected {len(stops)} cells): {detail}")

    return matrix


def read_fare_sheet(excel_path: Path) -> pd.DataFrame:
    """Read the first worksheet of an Excel file without interpreting it."""
    excel_path = Path(excel_path)
    if not excel_path.exists():
        raise FileNotFoundError(str(excel_path))
    return pd.read_excel(excel_path, sheet_name=0, header=None, dtype=object)


def load_fare_matrix(excel_path: Path, *, strict_rows: bool = False) -> FareMatrix:
    """Read and parse a fare chart file."""
    excel_path = Path(excel_path)
    logger.info(f"Loading fare data from {excel_path}")
    try:
        frame = read_fare_sheet(excel_path)
        matrix = parse_fare_sheet(
            frame,
            strict_rows=strict_rows,
            source_path=excel_path,
            source_mtime=excel_path.stat().st_mtime,
        )
    except Exception as e:
        logger.error(f"Error loading fare data from {excel_path}: {e}")
        raise

    logger.info(f"Loaded fare data: {len(matrix.stops)} stops")
    return matrix
