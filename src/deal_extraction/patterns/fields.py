"""
Field extraction table.

Each FieldPattern names an output field, the ordered regexes that can fill
it (most specific first), the processor that types the capture, and the
confidence boost the field adds to a record when found. Capture group 1 is
the value; group 2, when present, is a secondary capture (the multiplier
word or letter of a monetary amount).
"""

import re
from dataclasses import dataclass
from typing import Any, Callable

from ..normalizers import (
    clean_text,
    collapse_whitespace,
    normalize_status,
    parse_date,
    parse_monetary_value,
    parse_probability,
)

Processor = Callable[[str, str | None], Any]

_FLAGS = re.IGNORECASE

# Separator between a label and its value: "Label:", "Label #", "Label -"
_SEP = r'[ \t]*[:#-][ \t]*'
# Rest of the line, starting at the first non-blank character
_LINE = r'(\S[^\n]*)'
# Multiplier word or letter; "m" in "monthly" is not one
_MULTIPLIER = r'(k|thousand|mm|m|million)\b'
# Amount with optional multiplier
_AMOUNT = rf'\$?[ \t]*(\d[\d,]*(?:\.\d{{1,2}})?)(?:[ \t]*{_MULTIPLIER})?'
# Status words: one or two words on the same line
_STATUS = r'(\w+(?:[ \t-]\w+)?)'
# First line plus continuation lines that do not start a new "Label:"
_BLOCK = r'(\S[^\n]*(?:\n(?![ \t]*[A-Za-z][A-Za-z \t]*[:#-])[ \t]*\S[^\n]*)*)'


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(pattern, _FLAGS) for pattern in patterns)


@dataclass(frozen=True)
class FieldPattern:
    """Static extraction rule for one deal field."""

    field: str
    patterns: tuple[re.Pattern[str], ...]
    processor: Processor | None = None
    confidence_boost: float = 0.0


FIELD_PATTERNS: tuple[FieldPattern, ...] = (
    FieldPattern(
        field='deal_name',
        patterns=_compile(
            rf'\bDeal(?:[ \t]+Name)?{_SEP}{_LINE}',
            rf'\bOpportunity(?:[ \t]+Name)?{_SEP}{_LINE}',
            rf'\bAccount(?:[ \t]+Name)?{_SEP}{_LINE}',
            rf'\bProject(?:[ \t]+Name)?{_SEP}{_LINE}',
        ),
        processor=clean_text,
        confidence_boost=0.2,
    ),
    FieldPattern(
        field='customer_name',
        patterns=_compile(
            rf'\bCustomer(?:[ \t]+Name)?{_SEP}{_LINE}',
            rf'\bClient(?:[ \t]+Name)?{_SEP}{_LINE}',
            rf'\bCompany(?:[ \t]+Name)?{_SEP}{_LINE}',
            rf'\bAccount{_SEP}{_LINE}',
            rf'\bEnd[ \t-]*User{_SEP}{_LINE}',
        ),
        processor=clean_text,
        confidence_boost=0.15,
    ),
    FieldPattern(
        field='deal_value',
        patterns=_compile(
            rf'\b(?:Deal[ \t]+)?Value{_SEP}{_AMOUNT}',
            rf'\b(?:Deal[ \t]+)?Amount{_SEP}{_AMOUNT}',
            rf'\b(?:Deal[ \t]+)?Size{_SEP}{_AMOUNT}',
            rf'\bPrice{_SEP}{_AMOUNT}',
            rf'\$[ \t]*(\d[\d,]*(?:\.\d{{1,2}})?)(?:[ \t]*{_MULTIPLIER})?',
            r'\b(\d{1,3}(?:,\d{3})*(?:\.\d{2})?)[ \t]*(?:USD|dollars?)\b',
        ),
        processor=parse_monetary_value,
        confidence_boost=0.2,
    ),
    FieldPattern(
        field='status',
        patterns=_compile(
            rf'\bStatus{_SEP}{_STATUS}',
            rf'\bStage{_SEP}{_STATUS}',
            rf'\bPhase{_SEP}{_STATUS}',
            rf'\bState{_SEP}{_STATUS}',
        ),
        processor=normalize_status,
        confidence_boost=0.15,
    ),
    FieldPattern(
        field='owner',
        patterns=_compile(
            rf'\bOwner{_SEP}{_LINE}',
            rf'\b(?:Sales[ \t]+)?Rep(?:resentative)?{_SEP}{_LINE}',
            rf'\bAssigned(?:[ \t]+to)?{_SEP}{_LINE}',
            rf'\b(?:Account[ \t]+)?Manager{_SEP}{_LINE}',
        ),
        processor=clean_text,
        confidence_boost=0.1,
    ),
    FieldPattern(
        field='expected_close_date',
        patterns=_compile(
            rf'\b(?:Expected[ \t]+)?Close(?:[ \t]+Date)?{_SEP}{_LINE}',
            rf'\b(?:Expected[ \t]+)?Closing(?:[ \t]+Date)?{_SEP}{_LINE}',
            rf'\bTarget[ \t]+Date{_SEP}{_LINE}',
            rf'\bDue[ \t]+Date{_SEP}{_LINE}',
            rf'\bTimeline{_SEP}{_LINE}',
        ),
        processor=parse_date,
        confidence_boost=0.1,
    ),
    FieldPattern(
        field='probability',
        patterns=_compile(
            rf'\bProbability{_SEP}(\d+)',
            rf'\b(?:Win[ \t]+)?Likelihood{_SEP}(\d+)',
            rf'\bConfidence{_SEP}(\d+)',
            r'\b(\d+)[ \t]*%[ \t]+(?:probability|likely|chance)',
        ),
        processor=parse_probability,
        confidence_boost=0.1,
    ),
    FieldPattern(
        field='decision_maker',
        patterns=_compile(
            rf'\bDecision[ \t-]*Maker{_SEP}{_LINE}',
            rf'\b(?:Key[ \t]+)?Contact{_SEP}{_LINE}',
            rf'\b(?:Primary[ \t]+)?Stakeholder{_SEP}{_LINE}',
            rf'\bChampion{_SEP}{_LINE}',
        ),
        processor=clean_text,
        confidence_boost=0.1,
    ),
    FieldPattern(
        field='description',
        patterns=_compile(
            rf'\bDescription{_SEP}{_BLOCK}',
            rf'\bNotes?{_SEP}{_BLOCK}',
            rf'\bDetails?{_SEP}{_BLOCK}',
            rf'\bSummary{_SEP}{_BLOCK}',
        ),
        processor=collapse_whitespace,
        confidence_boost=0.05,
    ),
)

FIELD_NAMES: tuple[str, ...] = tuple(pattern.field for pattern in FIELD_PATTERNS)

# =============================================================================
# Currency
# =============================================================================

CURRENCY_CODE = re.compile(r'\b(USD|EUR|GBP|CAD|AUD|JPY|CHF|INR)\b')
CURRENCY_SYMBOLS = {'€': 'EUR', '£': 'GBP', '¥': 'JPY'}
DEFAULT_CURRENCY = 'USD'

# =============================================================================
# Deal-name inference
# =============================================================================

LIST_MARKER = re.compile(r'^(?:\d+[.)]|[-•*])[ \t]*')
DEAL_LABEL = re.compile(r'^(?:Deal|Opportunity)\b(?:[ \t]+Name)?[ \t]*[:#-]*[ \t]*', _FLAGS)
LETTER_RUN = re.compile(r'[A-Za-z]{3,}')
COMPANY_NAME = re.compile(
    r'\b([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)*[ \t]+(?:Inc|Corp|LLC|Ltd|Co)\b\.?)'
)
CAPITALIZED_LINE = re.compile(
    r'^[ \t]*([A-Z][A-Za-z]+(?:[ \t]+[A-Z][A-Za-z]+){1,4})[ \t]*$',
    re.MULTILINE,
)

MAX_FIRST_LINE_NAME = 100
MAX_CAPITALIZED_NAME = 60
