from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from fare_lookup.config import AppConfig, DataConfig, LoaderConfig, ServerConfig
from fare_lookup.models import FareMatrix

ENV_VARS = ["FARE_DATA_FILE", "FARE_STRICT_ROWS", "API_HOST", "API_PORT", "API_DEBUG", "FARE_LOOKUP_CONFIG"]


def make_sheet(stops: list, rows: list[list], label: str = "BRT Bus Shelter") -> pd.DataFrame:
    """
    Build a raw worksheet frame (header=None layout).

    Each data row gets its stop label in column A, like the real chart.
    Shorter rows are padded with blanks by pandas.
    """
    data = [[label, *stops]]
    for i, values in enumerate(rows):
        row_label = stops[i] if i < len(stops) else f"Row {i + 1}"
        data.append([row_label, *values])
    return pd.DataFrame(data, dtype=object)


def write_sheet(frame: pd.DataFrame, path: Path) -> Path:
    frame.to_excel(path, header=False, index=False)
    return path


class CountingLoader:
    """Loader stand-in that records how many times it ran."""

    def __init__(self, matrix: FareMatrix | None = None, failures: list[Exception] | None = None):
        self.matrix = matrix
        self.failures = list(failures or [])
        self.calls = 0

    def __call__(self) -> FareMatrix:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.matrix


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so monkeypatch removes anything load_dotenv adds later
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def two_stop_matrix() -> FareMatrix:
    return FareMatrix(stops=("A", "B"), fares=((0, 5), (7, 0)))


@pytest.fixture
def two_stop_xlsx(tmp_path) -> Path:
    frame = make_sheet(["A", "B"], [[0, 5], [7, 0]])
    return write_sheet(frame, tmp_path / "fare_data.xlsx")


@pytest.fixture
def app_config(tmp_path, two_stop_xlsx) -> AppConfig:
    return AppConfig(
        data=DataConfig(fare_file=two_stop_xlsx, download_name="brt_fare_chart.xlsx"),
        loader=LoaderConfig(strict_rows=False),
        server=ServerConfig(host="127.0.0.1", port=3000, debug=False),
    )
