"""Logging configuration for fitment extraction and sync.

Console output for humans plus a daily JSONL file for structured events
(payloads received, extraction results, per-tuple sync failures).
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

__all__ = [
    "setup_logging",
    "get_logger",
    "log_fitment_event",
    "LOG_DIR",
]

LOG_DIR = Path(__file__).parent.parent / "logs"

ROOT_LOGGER = "fitment"

# Logger trees configured by setup_logging; names under them are used as-is
LOGGER_ROOTS = (ROOT_LOGGER, "webhook")


class JSONLFileHandler(logging.Handler):
    """Writes one JSON object per log record, one file per day."""

    def __init__(self, log_dir: Path, prefix: str = "fitment"):
        super().__init__()
        self.log_dir = log_dir
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix

    def _get_log_file(self) -> Path:
        today = datetime.now().strftime("%Y%m%d")
        return self.log_dir / f"{self.prefix}_{today}.jsonl"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "timestamp": datetime.now().isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            if hasattr(record, "event_type"):
                entry["event_type"] = record.event_type
            if hasattr(record, "extra_data"):
                entry.update(record.extra_data)

            with open(self._get_log_file(), "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")
        except Exception:
            self.handleError(record)


class ColoredConsoleHandler(logging.StreamHandler):
    """Console handler that colors the level name on a TTY."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if hasattr(self.stream, "isatty") and self.stream.isatty():
            color = self.COLORS.get(record.levelname, "")
            if color:
                text = text.replace(record.levelname, f"{color}{record.levelname}{self.RESET}", 1)
        return text


def setup_logging(
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
    log_dir: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the "fitment" and "webhook" logger trees.

    Args:
        level: Console log level
        log_to_file: Whether to write the JSONL file
        log_to_console: Whether to log to stdout
        log_dir: Directory for JSONL files (default: project logs/)
        stream: Console stream (default: stdout)

    Returns:
        The configured "fitment" logger
    """
    handlers: List[logging.Handler] = []

    if log_to_console:
        console_handler = ColoredConsoleHandler(stream or sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%H:%M:%S")
        )
        handlers.append(console_handler)

    if log_to_file:
        file_handler = JSONLFileHandler(log_dir or LOG_DIR)
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    for name in LOGGER_ROOTS:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG if log_to_file else level)
        logger.handlers.clear()
        for handler in handlers:
            logger.addHandler(handler)

    return logging.getLogger(ROOT_LOGGER)


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Logger under the "fitment" tree ("sync" -> "fitment.sync").

    Names already under a configured root ("webhook.api") are kept.
    """
    if any(name == root or name.startswith(f"{root}.") for root in LOGGER_ROOTS):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def log_fitment_event(
    event_type: str,
    data: Dict[str, Any],
    level: int = logging.INFO,
    logger_name: str = ROOT_LOGGER,
) -> None:
    """Log a structured event.

    The "message" key becomes the log message; the remaining keys are
    written as fields of the JSONL entry.
    """
    logger = get_logger(logger_name)
    if not logger.isEnabledFor(level):
        return

    record = logger.makeRecord(
        logger.name,
        level,
        "(fitment)",
        0,
        data.get("message", event_type),
        (),
        None,
    )
    record.event_type = event_type
    record.extra_data = {k: v for k, v in data.items() if k != "message"}
    logger.handle(record)
