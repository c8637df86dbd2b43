"""
Boundary model and separation options.

A Boundary marks a candidate passage of the source text believed to describe
exactly one deal. Offsets are half-open ([start_index, end_index)), line
numbers are 1-based and informational only.

Boundaries are never mutated once emitted: reconciliation derives new
instances with model_copy(update=...).
"""

from enum import Enum

from pydantic import BaseModel, Field

from ..config import ExtractionConfig


class DetectionMethod(str, Enum):
    """Strategy that produced (or merged into) a boundary."""

    KEYWORD = 'keyword'
    PATTERN = 'pattern'
    STRUCTURE = 'structure'
    NLP = 'nlp'  # reserved, never produced
    HYBRID = 'hybrid'


class Boundary(BaseModel):
    """A candidate span of text believed to contain one deal description."""

    start_index: int = Field(..., description='Start character offset (inclusive)')
    end_index: int = Field(..., description='End character offset (exclusive)')
    confidence: float = Field(
        ..., description='Prior belief (0.0-1.0) that the range holds exactly one deal'
    )
    detection_method: DetectionMethod = Field(
        ..., description='Strategy that found this boundary'
    )
    trigger: str | None = Field(
        default=None, description='What matched: the header line or a method tag'
    )
    start_line: int | None = Field(default=None, description='1-based first line')
    end_line: int | None = Field(default=None, description='1-based last line')

    @property
    def length(self) -> int:
        """Number of characters covered by the boundary."""
        return self.end_index - self.start_index

    def content(self, text: str) -> str:
        """Slice of the source text covered by this boundary."""
        return text[self.start_index:self.end_index]


class SeparationOptions(BaseModel):
    """
    Options for boundary detection.

    Defaults come from ExtractionConfig (environment), which in turn default
    to min_confidence=0.3, max_boundaries=100, merge_overlapping=True.
    Values are taken as already-sane; use ExtractionConfig.validate() to
    check environment-provided settings.
    """

    min_confidence: float = Field(
        default=ExtractionConfig.MIN_BOUNDARY_CONFIDENCE,
        description='Boundaries below this confidence are dropped',
    )
    max_boundaries: int = Field(
        default=ExtractionConfig.MAX_BOUNDARIES,
        description='Maximum boundaries returned; extras are discarded with a warning',
    )
    merge_overlapping: bool = Field(
        default=ExtractionConfig.MERGE_OVERLAPPING,
        description='Reconcile overlapping / near-identical boundaries',
    )
    custom_keywords: list[str] = Field(
        default_factory=list,
        description='Extra line-start markers treated like tier-2 keywords',
    )
