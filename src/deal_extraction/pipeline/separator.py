"""
Deal boundary detection.

Finds where individual deals start and end inside a single block of text.
Three independent strategies run over the whole document and their results
are pooled:
1. Keyword: line-start headers such as "Deal:" or "Customer:" (three tiers)
2. Pattern: numbered lists whose entries look like deals
3. Structure: blank-line paragraphs carrying at least two deal indicators

Pooled boundaries are reconciled (merged when they overlap or start within
50 characters of each other), validated, filtered by confidence and capped.
Detection is a pure function of the text and options and never raises for
malformed input.
"""

import re
from dataclasses import dataclass, field

from ..logging import get_logger
from ..models.boundary import Boundary, DetectionMethod, SeparationOptions
from ..patterns.boundaries import (
    CUSTOM_KEYWORD_CONFIDENCE,
    KEYWORD_TIERS,
    MIN_PARAGRAPH_INDICATORS,
    NUMBERED_ENTRY,
    PARAGRAPH_BREAK,
    count_paragraph_indicators,
    keyword_pattern,
    looks_like_deal_entry,
)

logger = get_logger(__name__)

PATTERN_CONFIDENCE = 0.70
STRUCTURE_CONFIDENCE = 0.50
HYBRID_CONFIDENCE_BOOST = 0.1
MERGE_PROXIMITY_CHARS = 50
MIN_BOUNDARY_CHARS = 20
MAX_BOUNDARY_CHARS = 5000
LOW_CONFIDENCE = 0.5

_REAL_TEXT = re.compile(r'[A-Za-z]{5,}')


# =============================================================================
# Result Model
# =============================================================================


@dataclass
class SeparationStatistics:
    """Informational counts describing a separation run."""

    total_boundaries: int = 0
    by_method: dict[str, int] = field(
        default_factory=lambda: {method.value: 0 for method in DetectionMethod}
    )
    average_confidence: float = 0.0
    low_confidence_count: int = 0


@dataclass
class SeparationResult:
    """Boundaries found in one document plus statistics and warnings."""

    boundaries: list[Boundary] = field(default_factory=list)
    statistics: SeparationStatistics = field(default_factory=SeparationStatistics)
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# Helpers
# =============================================================================


def _line_number(text: str, index: int) -> int:
    """1-based line number of a character offset."""
    return text.count('\n', 0, index) + 1


def _tile_end_indices(
    boundaries: list[Boundary],
    text_length: int,
    total_lines: int,
) -> list[Boundary]:
    """Re-derive each end from the next boundary's start (text end for the last)."""
    ordered = sorted(boundaries, key=lambda b: b.start_index)
    tiled: list[Boundary] = []

    for i, current in enumerate(ordered):
        following = ordered[i + 1] if i + 1 < len(ordered) else None
        if following is not None:
            end_index = following.start_index
            end_line = (
                max(following.start_line - 1, current.start_line or 1)
                if following.start_line
                else current.end_line
            )
        else:
            end_index = text_length
            end_line = total_lines
        tiled.append(current.model_copy(update={'end_index': end_index, 'end_line': end_line}))

    return tiled


# =============================================================================
# DealSeparator
# =============================================================================


class DealSeparator:
    """
    Detects candidate deal passages in free text.

    Instances hold only their options, so one separator can be shared across
    threads or documents.
    """

    def __init__(self, options: SeparationOptions | None = None):
        """
        Initialize the separator.

        Args:
            options: Detection options (defaults from ExtractionConfig)
        """
        self.options = options or SeparationOptions()
        self._custom_patterns = tuple(
            keyword_pattern(keyword)
            for keyword in self.options.custom_keywords
            if keyword.strip()
        )
        self._all_keyword_patterns = (
            *(pattern for tier in KEYWORD_TIERS for pattern in tier.patterns),
            *self._custom_patterns,
        )

    def separate_deals(self, text: str) -> SeparationResult:
        """
        Split text into deal boundaries.

        Args:
            text: Plain-text document

        Returns:
            SeparationResult with sorted boundaries, statistics and warnings
        """
        if not text or not text.strip():
            return SeparationResult()

        warnings: list[str] = []
        log = logger.bind(text_length=len(text))
        log.debug('deal_separation.start')

        pooled = [
            *self.find_keyword_boundaries(text),
            *self.find_pattern_boundaries(text),
            *self.find_structure_boundaries(text),
        ]

        if self.options.merge_overlapping:
            boundaries = self.reconcile_boundaries(pooled, text)
        else:
            boundaries = sorted(pooled, key=lambda b: (b.start_index, -b.confidence))

        boundaries = self.validate_boundaries(boundaries, text, warnings)

        boundaries = [b for b in boundaries if b.confidence >= self.options.min_confidence]

        if len(boundaries) > self.options.max_boundaries:
            found = len(boundaries)
            discarded = found - self.options.max_boundaries
            warnings.append(
                f'Truncated to {self.options.max_boundaries} boundaries '
                f'(found {found}, discarded {discarded})'
            )
            log.warning(
                'deal_separation.truncated',
                found=found,
                discarded=discarded,
            )
            boundaries = boundaries[: self.options.max_boundaries]

        statistics = self.calculate_statistics(boundaries)

        log.info(
            'deal_separation.complete',
            pooled=len(pooled),
            total_boundaries=statistics.total_boundaries,
            by_method=statistics.by_method,
        )

        return SeparationResult(
            boundaries=boundaries,
            statistics=statistics,
            warnings=warnings,
        )

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    def _keyword_confidence(self, line: str) -> float | None:
        """Confidence of the first tier whose marker starts the line."""
        for tier in KEYWORD_TIERS:
            if any(pattern.match(line) for pattern in tier.patterns):
                return tier.confidence
        if any(pattern.match(line) for pattern in self._custom_patterns):
            return CUSTOM_KEYWORD_CONFIDENCE
        return None

    def _has_keyword(self, paragraph: str) -> bool:
        return any(pattern.search(paragraph) for pattern in self._all_keyword_patterns)

    def find_keyword_boundaries(self, text: str) -> list[Boundary]:
        """One boundary per header line, each running up to the next header."""
        lines = text.split('\n')
        boundaries: list[Boundary] = []
        char_index = 0

        for line_number, line in enumerate(lines, start=1):
            confidence = self._keyword_confidence(line)
            if confidence is not None:
                boundaries.append(
                    Boundary(
                        start_index=char_index,
                        end_index=char_index,
                        confidence=confidence,
                        detection_method=DetectionMethod.KEYWORD,
                        trigger=line.strip(),
                        start_line=line_number,
                    )
                )
            char_index += len(line) + 1

        return _tile_end_indices(boundaries, len(text), len(lines))

    def find_pattern_boundaries(self, text: str) -> list[Boundary]:
        """
        Group consecutive deal-like numbered entries into list boundaries.

        A list closes on a blank line, on a numbered entry that does not look
        like a deal, on an unindented non-numbered line, or at end of text.
        Indented lines continue the current entry. An entry numbered 1 closes
        any open list and starts a new one.
        """
        lines = text.split('\n')
        boundaries: list[Boundary] = []
        char_index = 0
        list_start: int | None = None
        list_start_line = 0

        def close(end_index: int, end_line: int) -> None:
            boundaries.append(
                Boundary(
                    start_index=list_start,
                    end_index=end_index,
                    confidence=PATTERN_CONFIDENCE,
                    detection_method=DetectionMethod.PATTERN,
                    trigger='numbered_list',
                    start_line=list_start_line,
                    end_line=end_line,
                )
            )

        for line_number, line in enumerate(lines, start=1):
            match = NUMBERED_ENTRY.match(line)
            is_entry = match is not None and looks_like_deal_entry(match.group(2))

            if is_entry:
                if list_start is not None and match.group(1) == '1':
                    close(char_index - 1, line_number - 1)
                    list_start = None
                if list_start is None:
                    list_start = char_index
                    list_start_line = line_number
            elif list_start is not None:
                continuation = line.strip() and match is None and line[:1] in (' ', '\t')
                if not continuation:
                    close(char_index - 1, line_number - 1)
                    list_start = None

            char_index += len(line) + 1

        if list_start is not None:
            close(len(text), len(lines))

        return boundaries

    def find_structure_boundaries(self, text: str) -> list[Boundary]:
        """Paragraphs with at least two deal indicators and no keyword header."""
        boundaries: list[Boundary] = []
        position = 0
        breaks = [*PARAGRAPH_BREAK.finditer(text), None]

        for separator in breaks:
            end = separator.start() if separator else len(text)
            paragraph = text[position:end]
            trimmed = paragraph.strip()

            if (
                trimmed
                and count_paragraph_indicators(trimmed) >= MIN_PARAGRAPH_INDICATORS
                and not self._has_keyword(trimmed)
            ):
                start_index = position + (len(paragraph) - len(paragraph.lstrip()))
                end_index = position + len(paragraph.rstrip())
                boundaries.append(
                    Boundary(
                        start_index=start_index,
                        end_index=end_index,
                        confidence=STRUCTURE_CONFIDENCE,
                        detection_method=DetectionMethod.STRUCTURE,
                        trigger='paragraph',
                        start_line=_line_number(text, start_index),
                        end_line=_line_number(text, end_index),
                    )
                )

            if separator:
                position = separator.end()

        return boundaries

    # -------------------------------------------------------------------------
    # Reconciliation and validation
    # -------------------------------------------------------------------------

    def reconcile_boundaries(self, boundaries: list[Boundary], text: str) -> list[Boundary]:
        """
        Merge boundaries that overlap or start close together.

        The higher-confidence boundary is the base of a merge (ties keep the
        earlier one). Merging boundaries from different strategies adds
        HYBRID_CONFIDENCE_BOOST and relabels the result as hybrid.
        """
        if not boundaries:
            return []

        ordered = sorted(boundaries, key=lambda b: (b.start_index, -b.confidence))
        merged: list[Boundary] = []
        current = ordered[0]

        for candidate in ordered[1:]:
            overlaps = current.end_index > candidate.start_index
            same_start = abs(candidate.start_index - current.start_index) < MERGE_PROXIMITY_CHARS

            if not (overlaps or same_start):
                merged.append(current)
                current = candidate
                continue

            base = candidate if candidate.confidence > current.confidence else current
            update: dict = {'end_index': max(current.end_index, candidate.end_index)}
            if candidate.detection_method != current.detection_method:
                update['confidence'] = min(1.0, base.confidence + HYBRID_CONFIDENCE_BOOST)
                update['detection_method'] = DetectionMethod.HYBRID
            current = base.model_copy(update=update)

        merged.append(current)

        return _tile_end_indices(merged, len(text), text.count('\n') + 1)

    def validate_boundaries(
        self,
        boundaries: list[Boundary],
        text: str,
        warnings: list[str],
    ) -> list[Boundary]:
        """Drop boundaries that are too short or contain no real words."""
        valid: list[Boundary] = []

        for boundary in boundaries:
            length = boundary.length
            if length < MIN_BOUNDARY_CHARS:
                continue
            if not _REAL_TEXT.search(boundary.content(text)):
                continue
            if length > MAX_BOUNDARY_CHARS:
                warnings.append(
                    f'Boundary at {boundary.start_index} may contain multiple deals '
                    f'({length} chars)'
                )
            valid.append(boundary)

        return valid

    def calculate_statistics(self, boundaries: list[Boundary]) -> SeparationStatistics:
        statistics = SeparationStatistics(total_boundaries=len(boundaries))
        total_confidence = 0.0

        for boundary in boundaries:
            statistics.by_method[boundary.detection_method.value] += 1
            total_confidence += boundary.confidence
            if boundary.confidence < LOW_CONFIDENCE:
                statistics.low_confidence_count += 1

        if boundaries:
            statistics.average_confidence = total_confidence / len(boundaries)
        return statistics


def detect_boundaries(
    text: str,
    options: SeparationOptions | None = None,
    **overrides,
) -> SeparationResult:
    """
    Detect deal boundaries in a document.

    Args:
        text: Plain-text document
        options: Detection options (defaults from ExtractionConfig)
        **overrides: Individual option overrides, e.g. min_confidence=0.5

    Returns:
        SeparationResult
    """
    if overrides:
        base = options or SeparationOptions()
        options = base.model_copy(update=overrides)
    return DealSeparator(options).separate_deals(text)
