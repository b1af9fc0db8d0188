"""Flask app receiving product webhooks and syncing their YMM fitments.

Run locally with:
    python -m webhook.app
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv
from flask import Flask, Response, jsonify

# Load environment variables from .env file before config is read
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from fitment.logging_config import setup_logging  # noqa: E402
from fitment.store import FitmentStore, SQLiteFitmentStore, SupabaseFitmentStore  # noqa: E402

from . import config  # noqa: E402
from .api import api  # noqa: E402

__all__ = ["create_app", "build_store"]


def build_store() -> FitmentStore:
    """Build the record store selected by STORE_BACKEND."""
    if config.STORE_BACKEND == "supabase":
        return SupabaseFitmentStore(
            config.SUPABASE_URL,
            config.SUPABASE_SERVICE_ROLE_KEY,
            table=config.YMM_TABLE,
            timeout=config.STORE_TIMEOUT,
        )
    if config.STORE_BACKEND == "sqlite":
        return SQLiteFitmentStore(config.FITMENT_DB_PATH, table=config.YMM_TABLE)
    raise ValueError(f"Unknown STORE_BACKEND: {config.STORE_BACKEND}")


def create_app(
    store: Optional[FitmentStore] = None,
    settings: Optional[Dict[str, Any]] = None,
) -> Flask:
    """Create the Flask app.

    Args:
        store: Record store to sync into (default: built from STORE_BACKEND)
        settings: Extra Flask config values, applied last
    """
    app = Flask(__name__)
    app.config.update(
        LOG_TO_FILE=config.LOG_TO_FILE,
        SYNC_MAX_WORKERS=config.SYNC_MAX_WORKERS,
        FORWARD_BASE_URL=config.FORWARD_BASE_URL,
        FORWARD_TIMEOUT=config.FORWARD_TIMEOUT,
    )
    if settings:
        app.config.update(settings)

    setup_logging(log_to_file=app.config["LOG_TO_FILE"])

    if store is None:
        store = build_store()
        store.init()
    app.config["FITMENT_STORE"] = store

    app.register_blueprint(api)

    @app.errorhandler(404)
    def not_found(_error: Exception) -> Tuple[Response, int]:
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_error: Exception) -> Tuple[Response, int]:
        return jsonify({"error": "Method not allowed"}), 405

    return app


if __name__ == "__main__":
    create_app().run(host=config.FLASK_HOST, port=config.FLASK_PORT, debug=config.FLASK_DEBUG)
