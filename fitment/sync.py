"""Fitment synchronizer: idempotent upsert of fitment tuples into a store.

Every tuple is synced on its own. A store failure on one tuple is recorded
in that tuple's outcome and the rest of the batch carries on; there is no
transaction across tuples.

The lookup-then-write pair is not atomic. Two deliveries of the same
webhook racing each other can both insert; a unique constraint on the
natural key at the store is the fix when that matters.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fitment.config import MUTABLE_FIELDS
from fitment.extraction import extract_fitments
from fitment.logging_config import get_logger, log_fitment_event
from fitment.models import ExtractionResult, FitmentTuple, KeyPolicy, Product, SyncOutcome
from fitment.store import FitmentStore, StoreError

__all__ = ["KeyPolicy", "key_fields_for", "sync_fitment", "sync_fitments", "sync_product"]

logger = get_logger("sync")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def key_fields_for(policy: KeyPolicy, fitment: FitmentTuple) -> Dict[str, Optional[str]]:
    """Natural-key columns (besides product_id) for a fitment under a policy."""
    values = {"make": fitment.brand, "model": fitment.model, "year": fitment.year}
    return {col: values[col] for col in policy.fields if col != "product_id"}


def sync_fitment(
    store: FitmentStore,
    product: Product,
    fitment: FitmentTuple,
    policy: KeyPolicy,
) -> SyncOutcome:
    """Insert or update the record for one fitment.

    Store failures are returned as a failed outcome rather than raised.
    """
    outcome = SyncOutcome(year=fitment.year, make=fitment.brand, model=fitment.model, ok=False)
    now = _now()
    values: Dict[str, Any] = {
        "title": product.title,
        "make": fitment.brand,
        "model": fitment.model,
        "sku": product.sku,
        "handle": product.handle,
        "image": product.image,
        "updated_at": now,
    }
    fields = {name: values[name] for name in MUTABLE_FIELDS}

    try:
        record_id = store.find(product.id, key_fields_for(policy, fitment))
        if record_id is not None:
            store.update(record_id, fields)
            outcome.action = "updated"
        else:
            record_id = store.insert({
                "product_id": product.id,
                "year": fitment.year,
                "created_at": now,
                **fields,
            })
            outcome.action = "inserted"
    except StoreError as e:
        outcome.error = str(e)
        log_fitment_event(
            "fitment_sync_failed",
            {
                "message": f"Sync failed for {product.id} {fitment.brand} {fitment.model} {fitment.year}: {e}",
                "product_id": product.id,
                "year": fitment.year,
                "error": str(e),
            },
            logger_name="sync",
        )
        return outcome

    outcome.ok = True
    outcome.record_id = record_id
    logger.debug(f"{outcome.action} {product.id} {fitment.brand}/{fitment.model}/{fitment.year}")
    return outcome


def sync_fitments(
    store: FitmentStore,
    product: Product,
    fitments: Sequence[FitmentTuple],
    policy: KeyPolicy,
    max_workers: int = 1,
) -> List[SyncOutcome]:
    """Sync a batch of fitments, one outcome per fitment.

    With max_workers > 1 the tuples are synced on a thread pool and the
    outcome order no longer follows the input order.
    """
    if max_workers <= 1 or len(fitments) <= 1:
        outcomes = [sync_fitment(store, product, f, policy) for f in fitments]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(sync_fitment, store, product, f, policy) for f in fitments]
            outcomes = [future.result() for future in futures]

    inserted = sum(1 for o in outcomes if o.action == "inserted")
    updated = sum(1 for o in outcomes if o.action == "updated")
    failed = sum(1 for o in outcomes if not o.ok)
    log_fitment_event(
        "fitment_synced",
        {
            "message": f"Product {product.id}: {inserted} inserted, {updated} updated, {failed} failed",
            "product_id": product.id,
            "policy": policy.value,
            "inserted": inserted,
            "updated": updated,
            "failed": failed,
        },
        logger_name="sync",
    )
    return outcomes


def sync_product(
    store: FitmentStore,
    product: Product,
    max_workers: int = 1,
) -> Tuple[ExtractionResult, List[SyncOutcome]]:
    """Extract a product's fitments and sync them with the matching key policy."""
    extraction = extract_fitments(product)
    log_fitment_event(
        "extraction_complete",
        {
            "message": f"Product {product.id}: {len(extraction.fitments)} fitment(s) from {extraction.source}",
            "product_id": product.id,
            "source": extraction.source,
            "count": len(extraction.fitments),
        },
        logger_name="extraction",
    )
    outcomes = sync_fitments(
        store, product, extraction.fitments, extraction.key_policy, max_workers=max_workers
    )
    return extraction, outcomes
