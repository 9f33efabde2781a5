"""
REST API for the bus fare chart.

Endpoints:
- GET /api/stops           - Stop names in chart order
- GET /api/fare            - Fare between two stops (?from=...&to=...)
- GET /api/download-excel  - Download the fare chart file
- GET /health              - Health check

Run with: python -m fare_lookup.api
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import os
from pathlib import Path
import sys

from flask import Blueprint, Flask, current_app, jsonify, request, send_file
from flask_cors import CORS

from .config import AppConfig, load_app_config
from .errors import MissingParameterError, ShapeMismatchError, UnknownStopError
from .store import FareMatrixStore

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

bp = Blueprint("fares", __name__)


def get_store() -> FareMatrixStore:
    return current_app.extensions["fare_store"]


def _require_args(*names: str) -> dict[str, str]:
    values = {name: request.args.get(name) for name in names}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise MissingParameterError(missing)
    return values


def _load_failed():
    return jsonify({"error": "Failed to load fare data"}), 500


@bp.app_errorhandler(MissingParameterError)
def handle_missing_parameter(e: MissingParameterError):
    return jsonify({"error": "Both from and to parameters are required", "missing": e.params}), 400


@bp.app_errorhandler(UnknownStopError)
def handle_unknown_stop(e: UnknownStopError):
    return jsonify({"error": "Invalid stop name", "unknown": e.names}), 404


@bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint. Never triggers a fare data load."""
    store = get_store()
    matrix = store.matrix
    return jsonify({
        "status": "healthy",
        "service": "fare-lookup-api",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "fare_data": {
            "state": store.state.value,
            "stops": len(matrix.stops) if matrix is not None else None,
        },
    })


@bp.route("/api/stops", methods=["GET"])
def list_stops():
    """List stop names in the order they appear in the chart header."""
    try:
        stops = get_store().get_stops()
    except Exception:
        logger.exception("Failed to load fare data")
        return _load_failed()
    return jsonify(stops)


@bp.route("/api/fare", methods=["GET"])
def get_fare():
    """
    Look up the fare between two stops.

    Query parameters:
        from: Origin stop name (exact match)
        to: Destination stop name (exact match)

    Response:
    {
        "from": "Kalyani Nagar",
        "to": "Ramwadi",
        "fare": 10
    }
    """
    args = _require_args("from", "to")
    store = get_store()

    try:
        store.load()
    except Exception:
        logger.exception("Failed to load fare data")
        return _load_failed()

    try:
        fare = store.get_fare(args["from"], args["to"])
    except ShapeMismatchError as e:
        logger.error(str(e))
        return jsonify({"error": str(e)}), 500

    return jsonify({"from": args["from"], "to": args["to"], "fare": fare})


@bp.route("/api/download-excel", methods=["GET"])
def download_excel():
    """Send the fare chart file as an attachment."""
    path: Path = current_app.config["FARE_DATA_FILE"]
    try:
        return send_file(
            path,
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=current_app.config["FARE_DOWNLOAD_NAME"],
        )
    except OSError:
        logger.exception(f"Failed to send {path}")
        return jsonify({"error": "Failed to download file"}), 500


def create_app(config: AppConfig, store: FareMatrixStore | None = None) -> Flask:
    """
    Build the Flask app and the fare store it owns.

    Args:
        config: Loaded application config
        store: Pre-built store (tests); defaults to one reading
            config.data.fare_file
    """
    app = Flask(__name__)
    CORS(app)  # Enable CORS for frontend access

    if store is None:
        store = FareMatrixStore.from_path(config.data.fare_file, strict_rows=config.loader.strict_rows)

    app.config["FARE_DATA_FILE"] = config.data.fare_file
    app.config["FARE_DOWNLOAD_NAME"] = config.data.download_name
    app.extensions["fare_store"] = store
    app.register_blueprint(bp)
    return app


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config_path = Path(os.getenv("FARE_LOOKUP_CONFIG", "config.toml"))
    config = load_app_config(config_path)

    fare_file = config.data.fare_file
    if not fare_file.exists():
        logger.error(f"Excel file not found at {fare_file}")
        return 1

    app = create_app(config)
    host, port = config.server.host, config.server.port

    print(f"\n{'='*60}")
    print("FARE LOOKUP API")
    print(f"{'='*60}")
    print(f"Running on: http://localhost:{port}")
    print(f"Fare data:  {fare_file}")
    print(f"Strict rows: {config.loader.strict_rows}")
    print(f"\nEndpoints:")
    print(f"  GET  /health             - Health check")
    print(f"  GET  /api/stops          - List stops")
    print(f"  GET  /api/fare           - Fare between two stops")
    print(f"  GET  /api/download-excel - Download fare chart")
    print(f"{'='*60}\n")

    app.run(host=host, port=port, debug=config.server.debug)
    return 0


if __name__ == "__main__":
    sys.exit(main())
