"""
Deal extraction pipeline orchestrator.

Wires the two stages, boundary detection and field extraction, into a
single process() call that takes one plain-text document and returns a
DealExtractionPipelineResult describing what each stage produced.

Both stages are pure: the orchestrator adds only timing and logging context.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..logging import PipelineTimer, get_logger, logging_context
from ..models.boundary import Boundary, SeparationOptions
from ..models.deal import ExtractedDeal, ExtractionOptions
from .extractor import DealExtractor, ExtractionResult
from .separator import DealSeparator, SeparationResult

logger = get_logger(__name__)


# =============================================================================
# Result Model
# =============================================================================


@dataclass
class DealExtractionPipelineResult:
    """
    Aggregate result of processing a single document.

    Keeps each stage's full result plus merged warnings and stage timings.
    """

    source_file: str | None
    separation: SeparationResult
    extraction: ExtractionResult

    # Timing
    started_at: datetime | None = None
    completed_at: datetime | None = None
    processing_time_ms: int | None = None
    stage_timings: dict[str, float] = field(default_factory=dict)

    @property
    def boundaries(self) -> list[Boundary]:
        return self.separation.boundaries

    @property
    def deals(self) -> list[ExtractedDeal]:
        return self.extraction.deals

    @property
    def duplicates(self) -> list[ExtractedDeal]:
        return self.extraction.duplicates

    @property
    def warnings(self) -> list[str]:
        """Separation warnings followed by extraction warnings."""
        return [*self.separation.warnings, *self.extraction.warnings]


# =============================================================================
# DealExtractionPipeline
# =============================================================================


class DealExtractionPipeline:
    """
    Runs boundary detection then field extraction over one document.

    Holds no per-document state; process() may be called concurrently for
    independent documents.
    """

    def __init__(
        self,
        separation_options: SeparationOptions | None = None,
        extraction_options: ExtractionOptions | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            separation_options: Boundary detection options
            extraction_options: Field extraction options
        """
        self.separator = DealSeparator(separation_options)
        self.extraction_options = extraction_options or ExtractionOptions()

    def process(
        self,
        text: str,
        source_file_name: str | None = None,
        trace_id: str | None = None,
    ) -> DealExtractionPipelineResult:
        """
        Detect boundaries and extract deals from one document.

        Args:
            text: Plain-text document
            source_file_name: Name stamped into each record's provenance
                (overrides extraction_options.source_file_name)
            trace_id: Optional caller trace ID for log correlation

        Returns:
            DealExtractionPipelineResult
        """
        started_at = datetime.now(timezone.utc)
        timer = PipelineTimer()

        options = self.extraction_options
        if source_file_name is not None:
            options = options.model_copy(update={'source_file_name': source_file_name})
        extractor = DealExtractor(options)

        with logging_context(trace_id=trace_id, source_file=options.source_file_name):
            with timer.stage('separation'):
                separation = self.separator.separate_deals(text)

            with timer.stage('extraction'):
                extraction = extractor.extract_deals(text, separation.boundaries)

            completed_at = datetime.now(timezone.utc)
            result = DealExtractionPipelineResult(
                source_file=options.source_file_name,
                separation=separation,
                extraction=extraction,
                started_at=started_at,
                completed_at=completed_at,
                processing_time_ms=int(timer.total_ms),
                stage_timings=timer.summary()['stages'],
            )

            logger.info(
                'deal_pipeline.complete',
                boundaries=len(result.boundaries),
                deals=len(result.deals),
                duplicates=len(result.duplicates),
                warnings=len(result.warnings),
                **timer.summary(),
            )

        return result
