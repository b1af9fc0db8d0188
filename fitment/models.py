"""Data models for products and fitments."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from bs4.element import Tag

__all__ = [
    "PayloadError",
    "KeyPolicy",
    "Product",
    "FitmentTuple",
    "ResolvedTable",
    "ExtractionResult",
    "SyncOutcome",
]


class PayloadError(ValueError):
    """Raised when a webhook payload cannot be turned into a Product."""


class KeyPolicy(Enum):
    """Natural key used to decide whether a fitment record already exists.

    TABLE rows carry a reliable make/model, so records are keyed on
    (product_id, make, model, year). Free-text extraction only trusts the
    year, so YEAR_ONLY keys on (product_id, year).
    """

    TABLE = "table"
    YEAR_ONLY = "year_only"

    @property
    def fields(self) -> tuple:
        if self is KeyPolicy.TABLE:
            return ("product_id", "make", "model", "year")
        return ("product_id", "year")


def _first(items: Any) -> Dict[str, Any]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


@dataclass(frozen=True)
class Product:
    """A product as delivered by the store webhook.

    Only the fields the fitment pipeline reads are kept.
    """

    id: str
    title: str = ""
    description: str = ""
    tags: str = ""
    vendor: str = ""
    sku: str = ""
    image: str = ""
    handle: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "Product":
        """Build a Product from a raw webhook payload.

        Raises:
            PayloadError: If the payload is empty, not a mapping, or has no id.
        """
        if not isinstance(payload, Mapping) or not payload:
            raise PayloadError("Missing product payload")

        raw_id = payload.get("id")
        if raw_id in (None, ""):
            raw_id = payload.get("product_id")
        if raw_id in (None, ""):
            raise PayloadError("Product payload has no id")

        tags = payload.get("tags") or ""
        if isinstance(tags, (list, tuple)):
            tags = ", ".join(str(t) for t in tags)

        image_obj = payload.get("image")
        image = _first(payload.get("images")).get("src") or (
            image_obj.get("src") if isinstance(image_obj, dict) else ""
        )

        return cls(
            id=str(raw_id),
            title=payload.get("title") or "",
            description=payload.get("body_html") or payload.get("body") or "",
            tags=str(tags),
            vendor=payload.get("vendor") or "",
            sku=_first(payload.get("variants")).get("sku") or "",
            image=image or "",
            handle=payload.get("handle") or "",
        )


@dataclass(frozen=True)
class FitmentTuple:
    """One (brand, model, year) association; year is None when unknown."""

    brand: str
    model: str
    year: Optional[str]


@dataclass
class ResolvedTable:
    """A fitment table whose year/make/model columns were identified."""

    rows: List[Tag]
    year_index: int
    make_index: int
    model_index: int

    @property
    def min_cells(self) -> int:
        return max(self.year_index, self.make_index, self.model_index) + 1


@dataclass
class ExtractionResult:
    """Fitments found for a product and where they came from.

    source is "table" or "text"; key_policy tells the synchronizer which
    natural key identifies an existing record.
    """

    source: str
    fitments: List[FitmentTuple]
    key_policy: KeyPolicy

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "key_policy": self.key_policy.value,
            "fitments": [
                {"brand": f.brand, "model": f.model, "year": f.year} for f in self.fitments
            ],
        }


@dataclass
class SyncOutcome:
    """Result of syncing a single fitment tuple."""

    year: Optional[str]
    make: str
    model: str
    ok: bool
    action: Optional[str] = None
    error: Optional[str] = None
    record_id: Optional[Any] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "year": self.year,
            "make": self.make,
            "model": self.model,
            "ok": self.ok,
        }
        if self.action:
            data["action"] = self.action
        if self.error:
            data["error"] = self.error
        return data
