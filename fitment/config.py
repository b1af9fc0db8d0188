"""Configuration and constants for fitment extraction and storage."""

import re
from typing import List, Pattern, Tuple

__all__ = [
    "YEAR_RE",
    "YEAR_TOKEN_RE",
    "YEAR_RANGE_RE",
    "RANGE_SEPARATOR_RE",
    "HEADER_KEYWORDS",
    "TRIGGER_PHRASES",
    "BODY_STYLE_SUFFIX_RE",
    "MODEL_MAX_CHARS",
    "DB_PATH",
    "YMM_TABLE",
    "MUTABLE_FIELDS",
    "HTML_PARSER",
]

# =============================================================================
# Year Patterns
# =============================================================================

# Any 4-digit year between 1900 and 2099, even when glued to other text
YEAR_RE: Pattern[str] = re.compile(r"(?:19|20)\d{2}")

# Standalone year token (word boundaries on both sides)
YEAR_TOKEN_RE: Pattern[str] = re.compile(r"\b(?:19|20)\d{2}\b")

# "2006-2009", "2006 – 2009"
YEAR_RANGE_RE: Pattern[str] = re.compile(r"((?:19|20)\d{2})\s*[-–]\s*((?:19|20)\d{2})")

# Hyphen, en-dash or the word "to"
RANGE_SEPARATOR_RE: Pattern[str] = re.compile(r"[-–]|\bto\b", re.IGNORECASE)

# =============================================================================
# Table Detection
# =============================================================================

# Column role -> keyword looked up (case-insensitive substring) in header cells
HEADER_KEYWORDS: List[Tuple[str, str]] = [
    ("year", "year"),
    ("make", "make"),
    ("model", "model"),
]

HTML_PARSER = "html.parser"

# =============================================================================
# Free-Text Heuristics
# =============================================================================

# Longest alternatives first so "compatible for" wins over "for"
TRIGGER_PHRASES: List[str] = [
    r"compatible\s+for",
    r"compatible\s+with",
    r"fits",
    r"for",
]

# Trailing body-style words stripped from a free-text model
BODY_STYLE_SUFFIX_RE: Pattern[str] = re.compile(
    r"(?:\s+(?:sedan|wagon|series|coupe|hatchback|convertible|\d\s*-?\s*(?:door|dr)))+\s*$",
    re.IGNORECASE,
)

MODEL_MAX_CHARS = 40

# =============================================================================
# Storage
# =============================================================================

DB_PATH = "data/fitment.db"
YMM_TABLE = "ymm"

# Fields rewritten on every sync of an existing record
MUTABLE_FIELDS: Tuple[str, ...] = ("title", "make", "model", "sku", "handle", "image", "updated_at")
