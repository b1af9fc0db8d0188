"""Free-text fitment extraction.

Used when a product description has no recognizable fitment table. Years
are collected from the whole text; brand and model come from the first of
an ordered list of heuristics that matches.
"""

import re
from typing import Callable, List, Optional, Tuple

from bs4 import BeautifulSoup

from fitment.config import (
    BODY_STYLE_SUFFIX_RE,
    HTML_PARSER,
    MODEL_MAX_CHARS,
    TRIGGER_PHRASES,
    YEAR_TOKEN_RE,
)
from fitment.models import FitmentTuple, Product
from fitment.years import collect_years

__all__ = [
    "MakeModel",
    "MAKE_MODEL_STRATEGIES",
    "build_search_text",
    "match_pipe_row",
    "match_trigger_phrase",
    "match_leading_words",
    "extract_make_model",
    "extract_free_text_fitments",
]

MakeModel = Tuple[str, str]
Strategy = Callable[[str], Optional[MakeModel]]

# "Subaru | Outback | 2006–2009 | 2.5L"
PIPE_ROW_RE = re.compile(
    r"\b([A-Z][a-zA-Z]+)\s*\|\s*([A-Za-z0-9\- ]{2,%d})\s*\|\s*(?:19|20)\d{2}" % MODEL_MAX_CHARS
)

# "fits Honda Accord 2010", "Compatible for Subaru Outback Wagon 2006-2009"
# The brand must be capitalized even though the trigger is case-insensitive.
TRIGGER_RE = re.compile(
    r"\b(?:%s)\s+(?-i:([A-Z][a-zA-Z]+))\s+([A-Za-z0-9\- ]{2,%d}?)\s*(?:19|20)\d{2}"
    % ("|".join(TRIGGER_PHRASES), MODEL_MAX_CHARS),
    re.IGNORECASE,
)

_WORD_RE = re.compile(r"[A-Za-z0-9][\w\-]*")


def build_search_text(product: Product) -> str:
    """Concatenate title, visible description text and tags."""
    description = product.description or ""
    if "<" in description:
        description = BeautifulSoup(description, HTML_PARSER).get_text(" ")
    return "\n".join(part for part in (product.title, description, product.tags) if part)


def _clean_model(model: str) -> str:
    """Drop trailing body-style words and dangling separators ("Accord -")."""
    model = model.strip(" -–")
    return BODY_STYLE_SUFFIX_RE.sub("", model).strip(" -–")


def match_pipe_row(text: str) -> Optional[MakeModel]:
    """Brand | Model | Year fragments."""
    match = PIPE_ROW_RE.search(text)
    if not match:
        return None
    return match.group(1).strip(), match.group(2).strip()


def match_trigger_phrase(text: str) -> Optional[MakeModel]:
    """'fits'/'for'/'compatible for'/'compatible with' Brand Model Year."""
    match = TRIGGER_RE.search(text)
    if not match:
        return None
    model = _clean_model(match.group(2))
    if not model:
        return None
    return match.group(1).strip(), model


def match_leading_words(text: str) -> Optional[MakeModel]:
    """Last resort: first word is the brand, the next one or two the model."""
    words = _WORD_RE.findall(text)
    if len(words) < 2 or not words[0][0].isalpha():
        return None

    model_words = [w for w in words[1:3] if not YEAR_TOKEN_RE.fullmatch(w)]
    if not model_words:
        return None
    return words[0], " ".join(model_words)


# Tried in order; the first strategy that returns a match wins
MAKE_MODEL_STRATEGIES: List[Tuple[str, Strategy]] = [
    ("pipe_row", match_pipe_row),
    ("trigger_phrase", match_trigger_phrase),
    ("leading_words", match_leading_words),
]


def extract_make_model(text: str, default_brand: str = "") -> MakeModel:
    """Best-guess (brand, model) for the text.

    Falls back to (default_brand, "") when no strategy matches.
    """
    if text:
        for _name, strategy in MAKE_MODEL_STRATEGIES:
            found = strategy(text)
            if found:
                return found
    return default_brand, ""


def extract_free_text_fitments(product: Product) -> List[FitmentTuple]:
    """One fitment per year mentioned in the product text.

    When no year is found a single fitment with year None is returned.
    """
    text = build_search_text(product)
    brand, model = extract_make_model(text, default_brand=product.vendor)
    brand = brand or product.vendor

    years: List[Optional[str]] = list(collect_years(text)) or [None]
    return [FitmentTuple(brand=brand, model=model, year=year) for year in years]
