"""Tests for the command-line interface."""

import json
import logging

import pytest

from fitment.cli import main
from fitment.logging_config import LOGGER_ROOTS


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the console handler the CLI attaches to the captured stream."""
    yield
    for name in LOGGER_ROOTS:
        logging.getLogger(name).handlers.clear()


def _write_payload(tmp_path, payload):
    path = tmp_path / "product.json"
    path.write_text(json.dumps(payload))
    return str(path)


class TestCli:

    def test_extract_only(self, tmp_path, capsys):
        path = _write_payload(tmp_path, {"id": 5, "title": "Brake Pad fits Honda Accord 2010"})
        db_path = tmp_path / "fitment.db"

        assert main(["--payload", path, "--db", str(db_path)]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["product_id"] == "5"
        assert output["source"] == "text"
        assert output["fitments"] == [{"brand": "Honda", "model": "Accord", "year": "2010"}]
        assert not db_path.exists()

    def test_sync_then_list(self, tmp_path, capsys):
        path = _write_payload(tmp_path, {"id": 5, "title": "Brake Pad fits Honda Accord 2010"})
        db_path = str(tmp_path / "fitment.db")

        assert main(["--payload", path, "--sync", "--db", db_path]) == 0
        first = json.loads(capsys.readouterr().out)
        assert first["results"][0]["action"] == "inserted"

        assert main(["--payload", path, "--sync", "--db", db_path]) == 0
        second = json.loads(capsys.readouterr().out)
        assert second["results"][0]["action"] == "updated"

        assert main(["--list", "5", "--db", db_path]) == 0
        records = json.loads(capsys.readouterr().out)
        assert len(records) == 1
        assert records[0]["make"] == "Honda"

    def test_invalid_payload(self, tmp_path, capsys):
        path = _write_payload(tmp_path, {"title": "no id"})
        assert main(["--payload", path, "--db", str(tmp_path / "x.db")]) == 1
        assert "no id" in capsys.readouterr().err

    def test_payload_required(self, tmp_path):
        assert main(["--db", str(tmp_path / "x.db")]) == 2
