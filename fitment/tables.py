"""Fitment table detection and row extraction.

Product descriptions often embed a Year/Make/Model table, but column order,
header markup and cell wrappers vary from page to page. The locator scans
every table in document order and takes the first one whose header row
names all three columns; the extractor then walks its rows.
"""

import re
from typing import Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from fitment.config import HEADER_KEYWORDS, HTML_PARSER
from fitment.logging_config import get_logger
from fitment.models import FitmentTuple, ResolvedTable
from fitment.years import expand_years

__all__ = [
    "cell_text",
    "classify_header",
    "locate_fitment_table",
    "extract_table_rows",
    "extract_table_fitments",
]

logger = get_logger("tables")

_WHITESPACE_RE = re.compile(r"\s+")


def cell_text(cell: Tag) -> str:
    """Visible text of a cell, ignoring any nested markup."""
    return _WHITESPACE_RE.sub(" ", cell.get_text(" ")).strip()


def _own_rows(table: Tag) -> List[Tag]:
    """Rows belonging to this table, not to tables nested inside it."""
    return [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]


def _row_cells(row: Tag) -> List[Tag]:
    return row.find_all(["td", "th"], recursive=False)


def _header_row(table: Tag, rows: List[Tag]) -> Optional[Tag]:
    """Pick the row that should hold the column names.

    The first row of the table's own <thead>, otherwise the first row of the
    table. A <th> row further down is a section label, not a header.
    """
    for row in rows:
        thead = row.find_parent("thead")
        if thead is not None and thead.find_parent("table") is table:
            return row

    return rows[0] if rows else None


def classify_header(labels: List[str]) -> Optional[Dict[str, int]]:
    """Map the year/make/model roles to column indices.

    The first label containing each keyword wins its role. Returns None
    unless all three roles land on distinct columns.
    """
    roles: Dict[str, int] = {}
    for idx, label in enumerate(labels):
        lowered = label.lower()
        for role, keyword in HEADER_KEYWORDS:
            if role not in roles and keyword in lowered:
                roles[role] = idx

    if len(roles) != len(HEADER_KEYWORDS):
        return None
    if len(set(roles.values())) != len(roles):
        return None
    return roles


def locate_fitment_table(html: Optional[str]) -> Optional[ResolvedTable]:
    """Find the first table in the HTML with Year, Make and Model columns.

    Returns None when there is no HTML or no table resolves all three
    columns. Results are never merged across tables.
    """
    if not html or not html.strip():
        return None

    soup = BeautifulSoup(html, HTML_PARSER)
    for table_number, table in enumerate(soup.find_all("table"), start=1):
        rows = _own_rows(table)
        header = _header_row(table, rows)
        if header is None:
            continue

        roles = classify_header([cell_text(c) for c in _row_cells(header)])
        if roles is None:
            logger.debug(f"Table {table_number}: no year/make/model header, skipping")
            continue

        logger.debug(f"Table {table_number}: fitment columns {roles}")
        return ResolvedTable(
            rows=[r for r in rows if r is not header],
            year_index=roles["year"],
            make_index=roles["make"],
            model_index=roles["model"],
        )

    return None


def extract_table_rows(resolved: ResolvedTable) -> List[FitmentTuple]:
    """Turn the rows of a resolved table into fitment tuples.

    Rows missing a make or year, and rows that repeat the header labels,
    are dropped. Each year in the year cell yields its own tuple.
    """
    fitments: List[FitmentTuple] = []

    for row in resolved.rows:
        cells = _row_cells(row)
        if len(cells) < resolved.min_cells:
            continue

        make = cell_text(cells[resolved.make_index])
        model = cell_text(cells[resolved.model_index])
        year_text = cell_text(cells[resolved.year_index])

        if not make or not year_text:
            continue
        # Header echoed inside <tbody>
        if "make" in make.lower() or "year" in year_text.lower():
            continue

        for year in expand_years(year_text):
            fitments.append(FitmentTuple(brand=make, model=model, year=year))

    return fitments


def extract_table_fitments(html: Optional[str]) -> List[FitmentTuple]:
    """Locate the fitment table in the HTML and extract its rows."""
    resolved = locate_fitment_table(html)
    if resolved is None:
        return []
    return extract_table_rows(resolved)
