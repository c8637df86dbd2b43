"""
Static regex tables for boundary detection and field extraction.
"""

from .boundaries import KEYWORD_TIERS, KeywordTier, looks_like_deal_entry
from .fields import FIELD_NAMES, FIELD_PATTERNS, FieldPattern

__all__ = [
    'KEYWORD_TIERS',
    'KeywordTier',
    'looks_like_deal_entry',
    'FIELD_NAMES',
    'FIELD_PATTERNS',
    'FieldPattern',
]
