"""
ExtractedDeal and extraction options.

ExtractedDeal is the structured record produced for one boundary. Every
record keeps its provenance (SourceLocation) and the first 500 characters of
its passage for audit. Field confidences are additive weights on the same
scale as the overall confidence, not calibrated probabilities.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from ..config import ExtractionConfig
from .boundary import DetectionMethod


class SourceLocation(BaseModel):
    """Where in which file a deal was found."""

    start_index: int
    end_index: int
    source_file: str | None = None
    start_line: int | None = None
    end_line: int | None = None


class ExtractionMetadata(BaseModel):
    """How a deal record was produced."""

    method: DetectionMethod
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    fields_extracted: int = 0
    fields_total: int = 0


class ExtractedDeal(BaseModel):
    """
    A single deal extracted from one boundary of the source text.

    deal_name is always populated (matched or inferred); records without a
    name are never emitted.
    """

    deal_name: str = Field(..., min_length=1, description='Deal or opportunity name')
    customer_name: str | None = Field(default=None, description='Customer / company name')
    deal_value: float | None = Field(default=None, description='Monetary value')
    currency: str | None = Field(default=None, description='3-letter currency code')
    status: str | None = Field(default=None, description='Normalized deal status')
    owner: str | None = Field(default=None, description='Deal owner / sales rep')
    expected_close_date: datetime | None = Field(
        default=None, description='Expected close date'
    )
    probability: int | None = Field(
        default=None, ge=0, le=100, description='Win probability percentage'
    )
    decision_maker: str | None = Field(default=None, description='Decision maker contact')
    description: str | None = Field(default=None, description='Free-text notes')

    confidence: float = Field(
        ..., ge=0.0, le=1.0, description='Overall extraction confidence (0.0-1.0)'
    )
    field_confidences: dict[str, float] = Field(
        default_factory=dict, description='field name -> informational confidence'
    )
    source_location: SourceLocation
    raw_text: str = Field(default='', description='First 500 characters of the passage')
    extraction_metadata: ExtractionMetadata


class ExtractionOptions(BaseModel):
    """
    Options for field extraction.

    Defaults come from ExtractionConfig (environment), which in turn default
    to min_confidence=0.3, deduplicate=True, deduplication_threshold=0.85.
    """

    min_confidence: float = Field(
        default=ExtractionConfig.MIN_DEAL_CONFIDENCE,
        description='Deals below this confidence are dropped after deduplication',
    )
    deduplicate: bool = Field(
        default=ExtractionConfig.DEDUPLICATE,
        description='Collapse near-identical deals',
    )
    deduplication_threshold: float = Field(
        default=ExtractionConfig.DEDUPLICATION_THRESHOLD,
        description='Minimum weighted similarity at which two deals are the same',
    )
    fields_to_extract: list[str] = Field(
        default_factory=list,
        description='Field names to extract (empty = all)',
    )
    source_file_name: str | None = Field(
        default=None, description='Stamped into each record\'s source_location'
    )
