"""Year/Make/Model fitment extraction and sync for product webhooks."""

__version__ = "0.1.0"

# Re-export main components for convenient imports
from fitment.config import DB_PATH, YMM_TABLE
from fitment.extraction import extract_fitments
from fitment.freetext import extract_free_text_fitments, extract_make_model
from fitment.models import (
    ExtractionResult,
    FitmentTuple,
    KeyPolicy,
    PayloadError,
    Product,
    ResolvedTable,
    SyncOutcome,
)
from fitment.store import FitmentStore, SQLiteFitmentStore, StoreError, SupabaseFitmentStore
from fitment.sync import sync_fitments, sync_product
from fitment.tables import extract_table_fitments, extract_table_rows, locate_fitment_table
from fitment.years import collect_years, expand_years

__all__ = [
    # Version
    "__version__",
    # Config
    "DB_PATH",
    "YMM_TABLE",
    # Models
    "ExtractionResult",
    "FitmentTuple",
    "KeyPolicy",
    "PayloadError",
    "Product",
    "ResolvedTable",
    "SyncOutcome",
    # Extraction
    "expand_years",
    "collect_years",
    "locate_fitment_table",
    "extract_table_rows",
    "extract_table_fitments",
    "extract_make_model",
    "extract_free_text_fitments",
    "extract_fitments",
    # Storage and sync
    "FitmentStore",
    "SQLiteFitmentStore",
    "SupabaseFitmentStore",
    "StoreError",
    "sync_fitments",
    "sync_product",
]
