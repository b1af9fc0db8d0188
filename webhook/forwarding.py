"""Relay generic product webhooks to the fitment endpoint."""

import logging
from typing import Any, Optional

import requests  # type: ignore[import-untyped]

from fitment.logging_config import log_fitment_event

__all__ = ["ForwardingError", "update_endpoint", "forward_product"]

logger = logging.getLogger(__name__)

UPDATE_PATH = "/api/update-ymm"


class ForwardingError(Exception):
    """The relay could not deliver the payload."""


def update_endpoint(base_url: str) -> str:
    """Full URL of the fitment endpoint on a deployment."""
    return f"{base_url.rstrip('/')}{UPDATE_PATH}"


def forward_product(
    payload: Any,
    base_url: str,
    timeout: float = 15,
    session: Optional[requests.Session] = None,
) -> int:
    """POST the payload unchanged to the fitment endpoint.

    Returns:
        The HTTP status returned by the fitment endpoint

    Raises:
        ForwardingError: On connection errors or timeouts
    """
    url = update_endpoint(base_url)
    sess = session or requests.Session()
    logger.info(f"Forwarding product webhook to {url}")

    try:
        resp = sess.post(url, json=payload, timeout=timeout)
    except requests.RequestException as e:
        raise ForwardingError(f"Forward to {url} failed: {e}") from e

    log_fitment_event(
        "forward_sent",
        {
            "message": f"Update YMM status: {resp.status_code}",
            "url": url,
            "status_code": resp.status_code,
        },
        logger_name=__name__,
    )
    return resp.status_code
