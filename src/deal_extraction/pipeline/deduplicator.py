"""
Near-duplicate detection for extracted deals.

Scores every new record against each record kept so far with a weighted
similarity:
- deal name token overlap (0.4)
- customer name token overlap (0.3)
- relative value difference (0.2)
- exact status match (0.1)

Only components present on both records contribute, and the score is
normalised by the weights that did. A score at or above the threshold marks
a duplicate; the higher-confidence record is kept (ties keep the earlier).

Comparison is pairwise against the kept list, not transitive clustering:
three mutually similar records collapse to whichever wins successive
comparisons.
"""

import re
from dataclasses import dataclass, field

from ..config import ExtractionConfig
from ..logging import get_logger
from ..models.deal import ExtractedDeal

logger = get_logger(__name__)

NAME_WEIGHT = 0.4
CUSTOMER_WEIGHT = 0.3
VALUE_WEIGHT = 0.2
STATUS_WEIGHT = 0.1

# Company-suffix spellings folded onto one token before comparing names
_SUFFIX_ALIASES = {
    'corporation': 'corp',
    'incorporated': 'inc',
    'limited': 'ltd',
    'company': 'co',
}

_TOKEN_PUNCTUATION = re.compile(r'^[^\w$]+|[^\w]+$')


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class DuplicateMatch:
    """One duplicate decision: which record survived and which was discarded."""

    kept: ExtractedDeal
    discarded: ExtractedDeal
    similarity: float


@dataclass
class DeduplicationResult:
    """Kept records, discarded duplicates and the decisions that produced them."""

    unique: list[ExtractedDeal] = field(default_factory=list)
    duplicates: list[ExtractedDeal] = field(default_factory=list)
    matches: list[DuplicateMatch] = field(default_factory=list)


# =============================================================================
# Similarity
# =============================================================================


def tokenize(value: str) -> set[str]:
    """Lowercase whitespace tokens with edge punctuation removed and suffixes folded."""
    tokens = set()
    for raw in value.lower().split():
        token = _TOKEN_PUNCTUATION.sub('', raw)
        if token:
            tokens.add(_SUFFIX_ALIASES.get(token, token))
    return tokens


def token_similarity(first: str | None, second: str | None) -> float:
    """Jaccard overlap of two strings' token sets (1.0 for identical strings)."""
    if not first or not second:
        return 0.0
    if first.lower() == second.lower():
        return 1.0

    tokens_a = tokenize(first)
    tokens_b = tokenize(second)
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    return len(tokens_a & tokens_b) / len(union)


def value_similarity(first: float, second: float) -> float:
    largest = max(abs(first), abs(second))
    if largest == 0:
        return 1.0
    return max(0.0, 1.0 - abs(first - second) / largest)


def calculate_similarity(first: ExtractedDeal, second: ExtractedDeal) -> float:
    """
    Weighted similarity of two deals in [0, 1].

    Returns 0.0 when the records share no comparable field.
    """
    score = 0.0
    weights = 0.0

    if first.deal_name and second.deal_name:
        score += token_similarity(first.deal_name, second.deal_name) * NAME_WEIGHT
        weights += NAME_WEIGHT

    if first.customer_name and second.customer_name:
        score += token_similarity(first.customer_name, second.customer_name) * CUSTOMER_WEIGHT
        weights += CUSTOMER_WEIGHT

    if first.deal_value is not None and second.deal_value is not None:
        score += value_similarity(first.deal_value, second.deal_value) * VALUE_WEIGHT
        weights += VALUE_WEIGHT

    if first.status and second.status:
        score += (1.0 if first.status == second.status else 0.0) * STATUS_WEIGHT
        weights += STATUS_WEIGHT

    return score / weights if weights > 0 else 0.0


# =============================================================================
# DealDeduplicator
# =============================================================================


class DealDeduplicator:
    """Collapses near-identical deals extracted from the same document."""

    def __init__(self, threshold: float | None = None):
        """
        Initialize the deduplicator.

        Args:
            threshold: Minimum similarity for a duplicate (default: 0.85)
        """
        self.threshold = (
            threshold
            if threshold is not None
            else ExtractionConfig.DEDUPLICATION_THRESHOLD
        )

    def deduplicate(self, deals: list[ExtractedDeal]) -> DeduplicationResult:
        """
        Walk deals in order, keeping one record per near-duplicate group.

        Args:
            deals: Extracted deals in document order

        Returns:
            DeduplicationResult with kept and discarded records
        """
        result = DeduplicationResult()

        for deal in deals:
            for index, existing in enumerate(result.unique):
                similarity = calculate_similarity(deal, existing)
                if similarity < self.threshold:
                    continue

                if deal.confidence > existing.confidence:
                    kept, discarded = deal, existing
                    result.unique[index] = deal
                else:
                    kept, discarded = existing, deal

                result.duplicates.append(discarded)
                result.matches.append(
                    DuplicateMatch(kept=kept, discarded=discarded, similarity=similarity)
                )
                logger.debug(
                    'deal_dedup.duplicate_found',
                    kept=kept.deal_name,
                    discarded=discarded.deal_name,
                    similarity=round(similarity, 3),
                )
                break
            else:
                result.unique.append(deal)

        if result.duplicates:
            logger.info(
                'deal_dedup.complete',
                unique=len(result.unique),
                duplicates=len(result.duplicates),
            )

        return result
