"""
Deal field extraction.

Turns each boundary's passage into an ExtractedDeal by walking the static
field table: for every field the first matching pattern wins, its processor
types the capture, and the field's confidence boost is added to the
boundary's confidence. Records without a matched deal name fall back to name
inference; if that fails too, the boundary yields no record and a warning.

Across all boundaries, near-duplicates are collapsed and records below the
minimum confidence are dropped. The minimum-confidence filter runs strictly
after deduplication.
"""

from dataclasses import dataclass, field
from typing import Any

from ..errors import (
    MissingDealNameError,
    PartialSuccessResult,
    wrap_extraction_error,
)
from ..logging import get_logger
from ..models.boundary import Boundary
from ..models.deal import (
    ExtractedDeal,
    ExtractionMetadata,
    ExtractionOptions,
    SourceLocation,
)
from ..patterns.fields import (
    CAPITALIZED_LINE,
    COMPANY_NAME,
    CURRENCY_CODE,
    CURRENCY_SYMBOLS,
    DEAL_LABEL,
    DEFAULT_CURRENCY,
    FIELD_NAMES,
    FIELD_PATTERNS,
    LETTER_RUN,
    LIST_MARKER,
    MAX_CAPITALIZED_NAME,
    MAX_FIRST_LINE_NAME,
    FieldPattern,
)
from .deduplicator import DealDeduplicator

logger = get_logger(__name__)

FIELD_CONFIDENCE_BASE = 0.8
INFERRED_NAME_CONFIDENCE = 0.5
RAW_TEXT_LIMIT = 500


# =============================================================================
# Result Model
# =============================================================================


@dataclass
class ExtractionStatistics:
    """Informational counts describing an extraction run."""

    total_deals: int = 0
    duplicates_removed: int = 0
    average_confidence: float = 0.0
    fields_extracted: dict[str, int] = field(default_factory=dict)


@dataclass
class ExtractionResult:
    """
    Deals extracted from one document.

    outcomes records, per boundary, whether a record was produced; failed
    entries carry the typed error that became a warning.
    """

    deals: list[ExtractedDeal] = field(default_factory=list)
    duplicates: list[ExtractedDeal] = field(default_factory=list)
    statistics: ExtractionStatistics = field(default_factory=ExtractionStatistics)
    warnings: list[str] = field(default_factory=list)
    outcomes: PartialSuccessResult = field(default_factory=PartialSuccessResult)


# =============================================================================
# Helpers
# =============================================================================


def infer_deal_name(text: str) -> str | None:
    """
    Guess a deal name for a passage with no explicit name field.

    Tries, in order: the first non-blank line (list marker and Deal /
    Opportunity label removed), a capitalized phrase ending in a company
    suffix, then a standalone capitalized multi-word line.
    """
    for line in text.split('\n'):
        first_line = line.strip()
        if not first_line:
            continue
        cleaned = LIST_MARKER.sub('', first_line)
        cleaned = DEAL_LABEL.sub('', cleaned).strip()
        if len(cleaned) < MAX_FIRST_LINE_NAME and LETTER_RUN.search(cleaned):
            return cleaned
        break

    company = COMPANY_NAME.search(text)
    if company:
        return company.group(1).strip()

    capitalized = CAPITALIZED_LINE.search(text)
    if capitalized and len(capitalized.group(1)) < MAX_CAPITALIZED_NAME:
        return capitalized.group(1)

    return None


def detect_currency(text: str) -> str:
    """ISO code named or implied in the passage, USD when none is."""
    code = CURRENCY_CODE.search(text)
    if code:
        return code.group(1)
    for symbol, currency in CURRENCY_SYMBOLS.items():
        if symbol in text:
            return currency
    return DEFAULT_CURRENCY


def extract_field(text: str, field_pattern: FieldPattern) -> Any:
    """
    Apply one field's patterns in order; the first match wins.

    Returns:
        The processed value, or None when no pattern matched or the
        processor found nothing usable.
    """
    for pattern in field_pattern.patterns:
        match = pattern.search(text)
        if not match or not match.group(1):
            continue

        primary = match.group(1)
        secondary = match.group(2) if pattern.groups >= 2 else None
        if field_pattern.processor is None:
            return primary.strip() or None
        return field_pattern.processor(primary, secondary)

    return None


# =============================================================================
# DealExtractor
# =============================================================================


class DealExtractor:
    """
    Extracts structured deal records from boundary passages.

    Instances hold only their options, so one extractor can be shared across
    threads or documents.
    """

    def __init__(self, options: ExtractionOptions | None = None):
        """
        Initialize the extractor.

        Args:
            options: Extraction options (defaults from ExtractionConfig)
        """
        self.options = options or ExtractionOptions()
        wanted = set(self.options.fields_to_extract)
        self.field_patterns: tuple[FieldPattern, ...] = tuple(
            fp for fp in FIELD_PATTERNS if not wanted or fp.field in wanted
        )

    def extract_deals(self, text: str, boundaries: list[Boundary]) -> ExtractionResult:
        """
        Extract one deal per boundary, then deduplicate and filter.

        Args:
            text: The document the boundaries were detected in
            boundaries: Boundaries from DealSeparator (or any caller)

        Returns:
            ExtractionResult with kept deals, duplicates, statistics and warnings
        """
        result = ExtractionResult()
        deals: list[ExtractedDeal] = []

        logger.debug('deal_extraction.start', boundary_count=len(boundaries))

        for boundary in boundaries:
            item_id = f'boundary@{boundary.start_index}'
            start = max(0, boundary.start_index)
            end = min(len(text), boundary.end_index)
            if end <= start:
                logger.debug('deal_extraction.empty_boundary', start_index=boundary.start_index)
                continue

            try:
                deal = self.extract_deal(text[start:end], boundary)
            except MissingDealNameError as exc:
                result.warnings.append(
                    f'Could not extract deal name at index {boundary.start_index}'
                )
                result.outcomes.add_failure(exc, item_id=item_id)
                continue
            except Exception as exc:
                error = wrap_extraction_error(
                    exc, context={'start_index': boundary.start_index}
                )
                logger.warning(
                    'deal_extraction.boundary_failed',
                    start_index=boundary.start_index,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                result.warnings.append(
                    f'Extraction failed at index {boundary.start_index}'
                )
                result.outcomes.add_failure(error, item_id=item_id)
                continue

            deals.append(deal)
            result.outcomes.add_success(item_id=item_id, data={'deal_name': deal.deal_name})

        if self.options.deduplicate:
            deduped = DealDeduplicator(self.options.deduplication_threshold).deduplicate(deals)
            deals = deduped.unique
            result.duplicates = deduped.duplicates

        result.deals = [d for d in deals if d.confidence >= self.options.min_confidence]
        result.statistics = self.calculate_statistics(result.deals, result.duplicates)

        logger.info(
            'deal_extraction.complete',
            total_deals=result.statistics.total_deals,
            duplicates_removed=result.statistics.duplicates_removed,
            average_confidence=round(result.statistics.average_confidence, 2),
            warnings=len(result.warnings),
        )

        return result

    def extract_deal(self, text: str, boundary: Boundary) -> ExtractedDeal:
        """
        Extract a single deal from one boundary's passage.

        Raises:
            MissingDealNameError: No deal name matched or could be inferred
        """
        values: dict[str, Any] = {}
        field_confidences: dict[str, float] = {}
        boost_total = 0.0

        for field_pattern in self.field_patterns:
            value = extract_field(text, field_pattern)
            if value is None or value == '':
                continue
            values[field_pattern.field] = value
            field_confidences[field_pattern.field] = (
                FIELD_CONFIDENCE_BASE + field_pattern.confidence_boost
            )
            boost_total += field_pattern.confidence_boost

        if not values.get('deal_name'):
            inferred = infer_deal_name(text)
            if not inferred:
                raise MissingDealNameError(
                    'No deal name matched or inferred',
                    context={'start_index': boundary.start_index},
                )
            values['deal_name'] = inferred
            field_confidences['deal_name'] = INFERRED_NAME_CONFIDENCE

        confidence = min(1.0, max(0.0, boundary.confidence + boost_total))
        currency = detect_currency(text) if values.get('deal_value') is not None else None

        return ExtractedDeal(
            **values,
            currency=currency,
            confidence=confidence,
            field_confidences=field_confidences,
            source_location=SourceLocation(
                start_index=boundary.start_index,
                end_index=boundary.end_index,
                source_file=self.options.source_file_name,
                start_line=boundary.start_line,
                end_line=boundary.end_line,
            ),
            raw_text=text[:RAW_TEXT_LIMIT],
            extraction_metadata=ExtractionMetadata(
                method=boundary.detection_method,
                fields_extracted=len(values),
                fields_total=len(self.field_patterns),
            ),
        )

    def calculate_statistics(
        self,
        deals: list[ExtractedDeal],
        duplicates: list[ExtractedDeal],
    ) -> ExtractionStatistics:
        statistics = ExtractionStatistics(
            total_deals=len(deals),
            duplicates_removed=len(duplicates),
        )

        for deal in deals:
            for name in FIELD_NAMES:
                if getattr(deal, name) is not None:
                    statistics.fields_extracted[name] = (
                        statistics.fields_extracted.get(name, 0) + 1
                    )

        if deals:
            statistics.average_confidence = sum(d.confidence for d in deals) / len(deals)
        return statistics


def extract_deals(
    text: str,
    boundaries: list[Boundary],
    options: ExtractionOptions | None = None,
    **overrides,
) -> ExtractionResult:
    """
    Extract deals for the given boundaries.

    Args:
        text: Plain-text document
        boundaries: Boundaries to extract from
        options: Extraction options (defaults from ExtractionConfig)
        **overrides: Individual option overrides, e.g. deduplicate=False

    Returns:
        ExtractionResult
    """
    if overrides:
        base = options or ExtractionOptions()
        options = base.model_copy(update=overrides)
    return DealExtractor(options).extract_deals(text, boundaries)
