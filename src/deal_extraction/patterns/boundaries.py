"""
Regex tables for deal boundary detection.

Keyword tiers mark explicit line-start headers, the numbered-entry patterns
recognise list-style deal registers, and the paragraph indicators score
free-form paragraphs. All patterns are compiled once at import.
"""

import re
from dataclasses import dataclass

_FLAGS = re.IGNORECASE | re.MULTILINE


def keyword_pattern(keyword: str) -> re.Pattern[str]:
    """Compile a line-start marker such as ``Deal:``, ``Deal #`` or ``Deal -``."""
    label = r'[ \t]+'.join(re.escape(word) for word in keyword.split())
    return re.compile(rf'^[ \t]*{label}[ \t]*[:#-]', _FLAGS)


@dataclass(frozen=True)
class KeywordTier:
    """A group of line-start markers sharing one confidence."""

    name: str
    confidence: float
    patterns: tuple[re.Pattern[str], ...]


def build_tier(name: str, confidence: float, keywords: list[str]) -> KeywordTier:
    return KeywordTier(
        name=name,
        confidence=confidence,
        patterns=tuple(keyword_pattern(keyword) for keyword in keywords),
    )


# Ordered most specific first; the first tier that matches a line wins.
KEYWORD_TIERS: tuple[KeywordTier, ...] = (
    build_tier('tier1', 0.95, ['Deal', 'Opportunity', 'Deal Name', 'Opportunity Name']),
    build_tier('tier2', 0.80, ['Account', 'Customer', 'Prospect', 'Lead', 'Project']),
    build_tier('tier3', 0.65, ['Company', 'Client', 'Partner']),
)

CUSTOM_KEYWORD_CONFIDENCE = 0.80

# =============================================================================
# Numbered lists
# =============================================================================

NUMBERED_ENTRY = re.compile(r'^[ \t]*(\d+)\.[ \t]+(\S.*)$')

_LETTER_RUN = re.compile(r'[A-Za-z]{3,}')
_CAPITALIZED_PHRASE = re.compile(r'\b[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)+\b')
COMPANY_SUFFIX = re.compile(r'\b(?:Inc|Corp|LLC|Ltd|Co)\b', re.IGNORECASE)
_MONEY_MENTION = re.compile(
    r'\$[ \t]?\d[\d,]*|\b\d+(?:\.\d+)?[ \t]*(?:k|thousand|mm|m|million)\b',
    re.IGNORECASE,
)


def looks_like_deal_entry(content: str) -> bool:
    """True when a numbered entry names a company or mentions money."""
    if not _LETTER_RUN.search(content):
        return False
    return bool(
        _CAPITALIZED_PHRASE.search(content)
        or COMPANY_SUFFIX.search(content)
        or _MONEY_MENTION.search(content)
    )


# =============================================================================
# Paragraph indicators
# =============================================================================

PARAGRAPH_BREAK = re.compile(r'\n[ \t]*\n(?:[ \t]*\n)*')

PARAGRAPH_INDICATORS: tuple[re.Pattern[str], ...] = (
    re.compile(r'\$[ \t]?\d[\d,]*'),
    re.compile(r'\b(?:value|amount|price|deal)', re.IGNORECASE),
    re.compile(r'\b(?:customer|client|account)', re.IGNORECASE),
    re.compile(r'\b(?:close|expected|timeline)', re.IGNORECASE),
    re.compile(r'\b(?:status|stage|phase)', re.IGNORECASE),
    COMPANY_SUFFIX,
)

MIN_PARAGRAPH_INDICATORS = 2


def count_paragraph_indicators(paragraph: str) -> int:
    return sum(1 for pattern in PARAGRAPH_INDICATORS if pattern.search(paragraph))
