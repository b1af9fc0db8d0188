"""API endpoints for product webhooks.

- POST /api/update-ymm: extract fitments from a product payload and sync them
- POST /api/webhooks/products-create, /api/webhooks/products-update: relay
  the product webhook to /api/update-ymm
"""

import logging
from typing import Any, Dict, Tuple, Union

from flask import Blueprint, Response, current_app, jsonify, request

from fitment.logging_config import log_fitment_event
from fitment.models import PayloadError, Product
from fitment.sync import sync_product

from .forwarding import ForwardingError, forward_product

__all__ = ["api", "process_product_payload"]

logger = logging.getLogger(__name__)

# Create blueprint for API
api = Blueprint("api", __name__, url_prefix="/api")


def process_product_payload(payload: Any) -> Tuple[Dict[str, Any], int]:
    """Run extraction and sync for one payload.

    Returns:
        (response body, HTTP status)
    """
    try:
        product = Product.from_payload(payload)
    except PayloadError as e:
        return {"success": False, "error": str(e)}, 400

    log_fitment_event(
        "payload_received",
        {
            "message": f"Product received: {product.id} {product.title[:80]}",
            "product_id": product.id,
            "title": product.title[:80],
        },
        logger_name=__name__,
    )

    store = current_app.config["FITMENT_STORE"]
    extraction, outcomes = sync_product(
        store, product, max_workers=current_app.config.get("SYNC_MAX_WORKERS", 1)
    )

    failed = sum(1 for o in outcomes if not o.ok)
    return {
        "success": True,
        "source": extraction.source,
        "results": [o.to_dict() for o in outcomes],
        "message": (
            f"Synced {len(outcomes) - failed} of {len(outcomes)} fitment(s) "
            f"from {extraction.source}"
        ),
    }, 200


@api.route("/update-ymm", methods=["POST"])
def update_ymm() -> Tuple[Response, int]:
    """Extract and sync the fitments of a product.

    Request JSON: the product webhook payload (id, title, body_html, tags,
    vendor, variants, images, handle).

    Response JSON:
        {
            "success": true,
            "source": "table" | "text",
            "results": [{"year": "2006", "make": "Subaru", "model": "Outback",
                         "ok": true, "action": "inserted"}, ...],
            "message": "..."
        }
    """
    payload = request.get_json(silent=True)
    try:
        body, status = process_product_payload(payload)
    except Exception as e:
        logger.exception("Update YMM failed")
        return jsonify({"success": False, "error": str(e)}), 500
    return jsonify(body), status


def _relay() -> Union[Tuple[str, int], Tuple[Response, int]]:
    payload = request.get_json(silent=True)
    if payload is None:
        return jsonify({"success": False, "error": "Missing product payload"}), 400

    base_url = current_app.config.get("FORWARD_BASE_URL")
    try:
        if base_url:
            forward_product(payload, base_url, timeout=current_app.config.get("FORWARD_TIMEOUT", 15))
        else:
            _body, status = process_product_payload(payload)
            logger.info(f"Update YMM status: {status}")
    except ForwardingError:
        logger.exception("Forward failed")
        return "error", 500
    except Exception:
        logger.exception("Product webhook failed")
        return "error", 500
    return "ok", 200


@api.route("/webhooks/products-create", methods=["POST"])
def products_create() -> Union[Tuple[str, int], Tuple[Response, int]]:
    """Product created webhook."""
    return _relay()


@api.route("/webhooks/products-update", methods=["POST"])
def products_update() -> Union[Tuple[str, int], Tuple[Response, int]]:
    """Product updated webhook."""
    return _relay()
