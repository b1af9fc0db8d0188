"""Shared test fixtures for the webhook test suite."""

import logging

import pytest

from fitment.logging_config import LOGGER_ROOTS
from fitment.store import SQLiteFitmentStore


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers create_app attached so they do not outlive the test."""
    yield
    for name in LOGGER_ROOTS:
        logging.getLogger(name).handlers.clear()


@pytest.fixture
def store(tmp_path):
    """SQLite store on a temporary database."""
    store = SQLiteFitmentStore(str(tmp_path / "fitment.db"))
    store.init()
    return store


@pytest.fixture
def app(store):
    """Flask app wired to the temporary store, relaying in-process."""
    from webhook.app import create_app

    app = create_app(store=store, settings={"TESTING": True, "FORWARD_BASE_URL": "", "LOG_TO_FILE": False})
    return app


@pytest.fixture
def client(app):
    """Create Flask test client."""
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def subaru_payload():
    return {
        "id": 8123456789,
        "title": "Roof Rack Cross Bars",
        "body_html": (
            "<p>Heavy duty cross bars.</p>"
            "<table><thead><tr><th>Make</th><th>Model</th><th>Year</th></tr></thead>"
            "<tbody><tr><td>Subaru</td><td>Outback</td><td>2006-2009</td></tr></tbody></table>"
        ),
        "tags": "roof, rack",
        "vendor": "RackCo",
        "handle": "roof-rack-cross-bars",
        "variants": [{"sku": "RR-100"}],
        "images": [{"src": "https://cdn.example.com/rack.jpg"}],
    }


@pytest.fixture
def honda_payload():
    return {
        "id": 42,
        "title": "Brake Pad fits Honda Accord 2010",
        "body_html": "",
        "vendor": "BrakeCo",
    }
