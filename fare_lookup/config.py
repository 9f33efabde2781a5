from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import tomllib

from dotenv import load_dotenv


DEFAULT_FARE_FILE = "data/fare_data.xlsx"
DEFAULT_DOWNLOAD_NAME = "brt_fare_chart.xlsx"


@dataclass(frozen=True)
class DataConfig:
    fare_file: Path
    download_name: str


@dataclass(frozen=True)
class LoaderConfig:
    strict_rows: bool


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int
    debug: bool


@dataclass(frozen=True)
class AppConfig:
    data: DataConfig
    loader: LoaderConfig
    server: ServerConfig


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_app_config(config_path: Path) -> AppConfig:
    config_path = Path(config_path).resolve()
    app_dir = config_path.parent

    env_path = app_dir / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    raw: dict = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            raw = tomllib.load(f)

    data = raw.get("data", {})
    loader = raw.get("loader", {})
    server = raw.get("server", {})

    fare_file = os.getenv("FARE_DATA_FILE") or str(data.get("fare_file", DEFAULT_FARE_FILE))

    return AppConfig(
        data=DataConfig(
            fare_file=(app_dir / fare_file).resolve(),
            download_name=str(data.get("download_name", DEFAULT_DOWNLOAD_NAME)),
        ),
        loader=LoaderConfig(
            strict_rows=_env_flag("FARE_STRICT_ROWS", bool(loader.get("strict_rows", False))),
        ),
        server=ServerConfig(
            host=os.getenv("API_HOST") or str(server.get("host", "0.0.0.0")),
            port=int(os.getenv("API_PORT") or server.get("port", 3000)),
            debug=_env_flag("API_DEBUG", bool(server.get("debug", False))),
        ),
    )
