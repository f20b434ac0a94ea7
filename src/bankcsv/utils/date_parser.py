"""Date format detection and parsing utilities."""

import re
from datetime import date
from typing import Optional

from bankcsv.domain.entities import DateFormat

MIN_YEAR = 1900
MAX_YEAR = 2100

# Candidate formats in tie-break priority: ISO first, then US before
# day-first layouts since US exports are the common case.
DATE_FORMAT_PATTERNS: list[tuple[DateFormat, re.Pattern, str]] = [
    (DateFormat.ISO, re.compile(r"^(\d{4})-(\d{2})-(\d{2})$"), "2024-01-15"),
    (DateFormat.US, re.compile(r"^(\d{2})/(\d{2})/(\d{4})$"), "01/15/2024"),
    (DateFormat.EU, re.compile(r"^(\d{2})/(\d{2})/(\d{4})$"), "15/01/2024"),
    (DateFormat.US_DASH, re.compile(r"^(\d{2})-(\d{2})-(\d{4})$"), "01-15-2024"),
    (DateFormat.EU_DASH, re.compile(r"^(\d{2})-(\d{2})-(\d{4})$"), "15-01-2024"),
    (DateFormat.US_SHORT, re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), "1/5/2024"),
    (DateFormat.EU_SHORT, re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), "5/1/2024"),
]

_PATTERNS = {fmt: regex for fmt, regex, _ in DATE_FORMAT_PATTERNS}

# Order of the (year, month, day) groups within each pattern's match.
_FIELD_ORDER = {
    DateFormat.ISO: (0, 1, 2),
    DateFormat.US: (2, 0, 1),
    DateFormat.EU: (2, 1, 0),
    DateFormat.US_DASH: (2, 0, 1),
    DateFormat.EU_DASH: (2, 1, 0),
    DateFormat.US_SHORT: (2, 0, 1),
    DateFormat.EU_SHORT: (2, 1, 0),
}

# Formats that read the same digits with day and month swapped.
_SWAPPED = {
    DateFormat.US: DateFormat.EU,
    DateFormat.EU: DateFormat.US,
    DateFormat.US_DASH: DateFormat.EU_DASH,
    DateFormat.EU_DASH: DateFormat.US_DASH,
    DateFormat.US_SHORT: DateFormat.EU_SHORT,
    DateFormat.EU_SHORT: DateFormat.US_SHORT,
}


def parse_date(value: str, date_format: DateFormat | str) -> date:
    """Parse a date string laid out in the given format.

    Args:
        value: Raw date text
        date_format: One of the supported DateFormat values

    Returns:
        Date object

    Raises:
        ValueError: If the text does not match the format or is not a real
            calendar date
    """
    fmt = DateFormat(date_format)
    cleaned = (value or "").strip()
    match = _PATTERNS[fmt].match(cleaned)
    if match is None:
        raise ValueError(f"Invalid date format: expected {fmt.value}")

    groups = match.groups()
    y_idx, m_idx, d_idx = _FIELD_ORDER[fmt]
    year, month, day = int(groups[y_idx]), int(groups[m_idx]), int(groups[d_idx])
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValueError(f"Year {year} out of range {MIN_YEAR}-{MAX_YEAR}")
    try:
        return date(year, month, day)
    except ValueError as e:
        raise ValueError(f"Invalid date for format {fmt.value}: {e}") from e


def format_iso(value: date) -> str:
    """Return the canonical YYYY-MM-DD form of a date."""
    return value.isoformat()


def _accepts_all(date_format: DateFormat, samples: list[str]) -> bool:
    for sample in samples:
        try:
            parse_date(sample, date_format)
        except ValueError:
            return False
    return True


def _non_empty(samples: list[Optional[str]]) -> list[str]:
    return [s.strip() for s in samples if s and s.strip()]


def detect_date_format(samples: list[Optional[str]]) -> Optional[DateFormat]:
    """Pick the first candidate format that parses every non-empty sample.

    Day/month ambiguity (e.g. "01/02/2024") is broken by the candidate
    order, so callers must allow the user to override the result.

    Args:
        samples: Raw values from the date column

    Returns:
        Detected DateFormat, or None if no candidate fits every sample
    """
    values = _non_empty(samples)
    if not values:
        return None
    for fmt, _, _ in DATE_FORMAT_PATTERNS:
        if _accepts_all(fmt, values):
            return fmt
    return None


def is_ambiguous_date_sample(
    samples: list[Optional[str]], date_format: Optional[DateFormat | str]
) -> bool:
    """Return True if the day-first reading would fit the samples equally well."""
    if date_format is None:
        return False
    swapped = _SWAPPED.get(DateFormat(date_format))
    if swapped is None:
        return False
    values = _non_empty(samples)
    return bool(values) and _accepts_all(swapped, values)
