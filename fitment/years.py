"""Year parsing: single years, ranges and enumerated year lists."""

from typing import List, Optional

from fitment.config import RANGE_SEPARATOR_RE, YEAR_RANGE_RE, YEAR_RE, YEAR_TOKEN_RE

__all__ = ["expand_years", "collect_years"]


def expand_years(text: Optional[str]) -> List[str]:
    """Expand a year cell such as "2006-2009" into individual years.

    - "2006" -> ["2006"]
    - "2006-2009" / "2006 to 2009" -> every year from 2006 to 2009
    - "2009-2006" (reversed) -> ["2009", "2006"] as found
    - "2006, 2008, 2011" -> the listed years

    With a separator present only the first and last years are used as
    endpoints. Ranges are not capped.
    """
    if not text:
        return []

    matches = YEAR_RE.findall(text)
    if len(matches) < 2:
        return matches

    if RANGE_SEPARATOR_RE.search(text):
        start, end = int(matches[0]), int(matches[-1])
        if start <= end:
            return [str(y) for y in range(start, end + 1)]
    return matches


def collect_years(text: Optional[str]) -> List[str]:
    """Collect every year mentioned in free text, sorted and deduplicated.

    Ranges ("2006-2009", "2006 – 2009") contribute all the years they span;
    standalone year tokens contribute themselves.
    """
    if not text:
        return []

    years = set()
    for match in YEAR_RANGE_RE.finditer(text):
        start, end = int(match.group(1)), int(match.group(2))
        years.update(str(y) for y in range(start, end + 1))

    years.update(YEAR_TOKEN_RE.findall(text))
    return sorted(years)
