"""Tests for the product webhook relay and app wiring."""

import io
import logging
from unittest.mock import MagicMock, patch

import pytest
import requests

from fitment.store import SQLiteFitmentStore, SupabaseFitmentStore
from webhook.forwarding import ForwardingError, forward_product, update_endpoint


class TestForwardProduct:

    def test_update_endpoint(self):
        assert update_endpoint("https://ymm.example.com/") == "https://ymm.example.com/api/update-ymm"
        assert update_endpoint("https://ymm.example.com") == "https://ymm.example.com/api/update-ymm"

    def test_posts_payload_unchanged(self):
        session = MagicMock()
        session.post.return_value = MagicMock(status_code=200)
        payload = {"id": 1, "title": "Brake Pad"}

        status = forward_product(payload, "https://ymm.example.com", timeout=5, session=session)

        assert status == 200
        session.post.assert_called_once_with(
            "https://ymm.example.com/api/update-ymm", json=payload, timeout=5
        )

    def test_returns_downstream_status(self):
        session = MagicMock()
        session.post.return_value = MagicMock(status_code=500)
        assert forward_product({"id": 1}, "https://ymm.example.com", session=session) == 500

    def test_transport_error(self):
        session = MagicMock()
        session.post.side_effect = requests.Timeout("timed out")
        with pytest.raises(ForwardingError, match="timed out"):
            forward_product({"id": 1}, "https://ymm.example.com", session=session)


class TestBuildStore:
    """STORE_BACKEND selection."""

    def test_sqlite_backend(self, tmp_path):
        from webhook import app as app_module

        with patch.object(app_module.config, "STORE_BACKEND", "sqlite"), \
                patch.object(app_module.config, "FITMENT_DB_PATH", str(tmp_path / "f.db")):
            store = app_module.build_store()
        assert isinstance(store, SQLiteFitmentStore)

    def test_supabase_backend(self):
        from webhook import app as app_module

        with patch.object(app_module.config, "STORE_BACKEND", "supabase"), \
                patch.object(app_module.config, "SUPABASE_URL", "https://demo.supabase.co"), \
                patch.object(app_module.config, "SUPABASE_SERVICE_ROLE_KEY", "key"):
            store = app_module.build_store()
        assert isinstance(store, SupabaseFitmentStore)

    def test_unknown_backend(self):
        from webhook import app as app_module

        with patch.object(app_module.config, "STORE_BACKEND", "mongo"):
            with pytest.raises(ValueError):
                app_module.build_store()

    def test_create_app_initializes_default_store(self, tmp_path):
        from webhook import app as app_module

        db_path = tmp_path / "fitment.db"
        with patch.object(app_module.config, "STORE_BACKEND", "sqlite"), \
                patch.object(app_module.config, "FITMENT_DB_PATH", str(db_path)), \
                patch.object(app_module.config, "LOG_TO_FILE", False):
            flask_app = app_module.create_app()
        assert db_path.exists()
        assert flask_app.config["FITMENT_STORE"].list_for_product("1") == []


class TestAppLogging:
    """create_app configures logging for WSGI deployments too."""

    def test_create_app_configures_logger_trees(self, store):
        from webhook.app import create_app

        create_app(store=store, settings={"LOG_TO_FILE": False})

        for name in ("fitment", "webhook"):
            logger = logging.getLogger(name)
            assert logger.level == logging.INFO
            assert logger.handlers
        assert logging.getLogger("webhook.api").isEnabledFor(logging.INFO)

    def test_api_logger_name(self):
        from webhook import api as api_module
        from webhook import forwarding

        assert api_module.logger.name == "webhook.api"
        assert forwarding.logger.name == "webhook.forwarding"

    def test_payload_event_reaches_console(self, store, honda_payload):
        from fitment.logging_config import setup_logging
        from webhook.app import create_app

        app = create_app(store=store, settings={"TESTING": True, "FORWARD_BASE_URL": "", "LOG_TO_FILE": False})
        stream = io.StringIO()
        setup_logging(log_to_file=False, stream=stream)

        with app.test_client() as client:
            client.post("/api/update-ymm", json=honda_payload)

        output = stream.getvalue()
        assert "webhook.api: Product received: 42" in output
        assert "fitment.sync: Product 42: 1 inserted" in output
