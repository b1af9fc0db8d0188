"""Choose between table and free-text extraction for a product."""

from fitment.freetext import extract_free_text_fitments
from fitment.logging_config import get_logger
from fitment.models import ExtractionResult, KeyPolicy, Product
from fitment.tables import extract_table_rows, locate_fitment_table

__all__ = ["extract_fitments"]

logger = get_logger("extraction")


def extract_fitments(product: Product) -> ExtractionResult:
    """Extract fitments from a product.

    A Year/Make/Model table in the description wins. Without one (or when
    the table has no usable rows) the free-text heuristics run over the
    title, description and tags.
    """
    resolved = locate_fitment_table(product.description)
    if resolved is not None:
        fitments = extract_table_rows(resolved)
        if fitments:
            return ExtractionResult(source="table", fitments=fitments, key_policy=KeyPolicy.TABLE)
        logger.info(f"Product {product.id}: fitment table has no usable rows, using free text")

    return ExtractionResult(
        source="text",
        fitments=extract_free_text_fitments(product),
        key_policy=KeyPolicy.YEAR_ONLY,
    )
