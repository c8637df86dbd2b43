"""
Value processors that turn raw regex captures into typed deal fields.

Every processor takes the primary capture and an optional secondary capture
and returns a typed value or None. None means "no usable value" and is never
an error: malformed input degrades to a missing field.
"""

import calendar
import re
from datetime import datetime

from dateutil import parser as date_parser

MIN_YEAR = 1900
MAX_YEAR = 2100

# Missing components are filled from year 1, which falls outside the accepted
# range, so a date without a year is rejected instead of borrowing today's.
_DATE_DEFAULT = datetime(1, 1, 1)

_MONEY = re.compile(
    r'^\$?\s*(\d[\d,]*(?:\.\d+)?|\.\d+)\s*(k|thousand|mm|m|million)?$',
    re.IGNORECASE,
)

_MULTIPLIERS = {
    'k': 1_000,
    'thousand': 1_000,
    'm': 1_000_000,
    'mm': 1_000_000,
    'million': 1_000_000,
}

STATUS_SYNONYMS: dict[str, str] = {
    'new': 'registered',
    'open': 'registered',
    'active': 'approved',
    'qualified': 'qualified',
    'discovery': 'discovery',
    'proposal': 'proposal',
    'negotiation': 'negotiation',
    'negotiating': 'negotiation',
    'closed won': 'closed-won',
    'closed-won': 'closed-won',
    'won': 'closed-won',
    'closed lost': 'closed-lost',
    'closed-lost': 'closed-lost',
    'lost': 'closed-lost',
    'pending': 'pending',
    'approved': 'approved',
    'rejected': 'rejected',
}

_MONTHS = {
    name.lower(): index
    for index, name in enumerate(calendar.month_name)
    if name
}
_MONTHS.update(
    {name.lower(): index for index, name in enumerate(calendar.month_abbr) if name}
)
_MONTHS['sept'] = 9

_ISO_DATE = re.compile(
    r'\b(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ](\d{1,2}):(\d{2})(?::(\d{2}))?)?\b'
)
_US_DATE = re.compile(r'\b(\d{1,2})/(\d{1,2})/(\d{4})\b')
_UK_DATE = re.compile(r'\b(\d{1,2})-(\d{1,2})-(\d{4})\b')
_TEXTUAL_DATE = re.compile(r'\b([A-Za-z]{3,9})\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})\b')
_QUARTER = re.compile(r'\bQ([1-4])\s*(\d{4})\b', re.IGNORECASE)


def clean_text(value: str, secondary: str | None = None) -> str | None:
    """Trim a free-text capture; blank captures become None."""
    cleaned = value.strip()
    return cleaned or None


def collapse_whitespace(value: str, secondary: str | None = None) -> str | None:
    """Trim and join a multi-line capture into a single line."""
    cleaned = re.sub(r'\s*\n\s*', ' ', value.strip())
    return cleaned or None


def parse_monetary_value(value: str | None, suffix: str | None = None) -> float | None:
    """
    Parse a monetary amount.

    Accepts a bare number ("1,500,000"), a dollar amount ("$1,500,000") or an
    amount with a trailing multiplier ("$75k", "50K", "2.5M", "3mm",
    "$2 million", "40 thousand"). The multiplier may also be passed
    separately as ``suffix``.

    Returns:
        The amount as a float, or None when the input is not numeric.
    """
    if not value:
        return None

    match = _MONEY.match(value.strip())
    if not match:
        return None

    number, inline_suffix = match.groups()
    try:
        amount = float(number.replace(',', ''))
    except ValueError:
        return None

    multiplier = (suffix or inline_suffix or '').strip().lower()
    return amount * _MULTIPLIERS.get(multiplier, 1)


def normalize_status(value: str, secondary: str | None = None) -> str | None:
    """Map a status capture onto the canonical status vocabulary."""
    trimmed = value.strip()
    if not trimmed:
        return None
    return STATUS_SYNONYMS.get(trimmed.lower(), trimmed)


def parse_probability(value: str, secondary: str | None = None) -> int | None:
    """Parse a percentage and clamp it to [0, 100]."""
    try:
        percent = int(value.strip())
    except (AttributeError, ValueError):
        return None
    return min(100, max(0, percent))


def _in_year_range(year: int) -> bool:
    return MIN_YEAR <= year <= MAX_YEAR


def _build_date(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
) -> datetime | None:
    if not _in_year_range(year):
        return None
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None


def _from_general_parser(value: str) -> datetime | None:
    try:
        parsed = date_parser.parse(value, default=_DATE_DEFAULT)
    except (ValueError, OverflowError):
        return None
    return parsed if _in_year_range(parsed.year) else None


def _from_iso(value: str) -> datetime | None:
    match = _ISO_DATE.search(value)
    if not match:
        return None
    year, month, day, hour, minute, second = match.groups()
    return _build_date(
        int(year), int(month), int(day),
        int(hour or 0), int(minute or 0), int(second or 0),
    )


def _from_us(value: str) -> datetime | None:
    match = _US_DATE.search(value)
    if not match:
        return None
    month, day, year = (int(part) for part in match.groups())
    return _build_date(year, month, day)


def _from_uk(value: str) -> datetime | None:
    match = _UK_DATE.search(value)
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    return _build_date(year, month, day)


def _from_textual(value: str) -> datetime | None:
    match = _TEXTUAL_DATE.search(value)
    if not match:
        return None
    month_name, day, year = match.groups()
    month = _MONTHS.get(month_name.lower())
    if month is None:
        return None
    return _build_date(int(year), month, int(day))


def _from_quarter(value: str) -> datetime | None:
    """Q<n> YYYY -> last day of the quarter's middle month."""
    match = _QUARTER.search(value)
    if not match:
        return None
    quarter, year = int(match.group(1)), int(match.group(2))
    month = (quarter - 1) * 3 + 2
    if not _in_year_range(year):
        return None
    return _build_date(year, month, calendar.monthrange(year, month)[1])


_DATE_PARSERS = (
    _from_general_parser,
    _from_iso,
    _from_us,
    _from_uk,
    _from_textual,
    _from_quarter,
)


def parse_date(value: str | None, secondary: str | None = None) -> datetime | None:
    """
    Parse a date from free text.

    Tries the general dateutil parser first, then explicit ISO, US, UK,
    textual and quarter patterns. Every candidate must fall within
    [1900, 2100].

    Returns:
        A naive or timezone-aware datetime, or None when nothing parses.
    """
    if not value or not value.strip():
        return None

    trimmed = value.strip()
    for parse in _DATE_PARSERS:
        result = parse(trimmed)
        if result is not None:
            return result
    return None
