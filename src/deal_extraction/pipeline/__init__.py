"""
Deal extraction pipeline components: separation, extraction, deduplication,
and orchestration.
"""

from .deduplicator import (
    DealDeduplicator,
    DeduplicationResult,
    DuplicateMatch,
    calculate_similarity,
)
from .extractor import (
    DealExtractor,
    ExtractionResult,
    ExtractionStatistics,
    extract_deals,
    infer_deal_name,
)
from .pipeline import DealExtractionPipeline, DealExtractionPipelineResult
from .separator import (
    DealSeparator,
    SeparationResult,
    SeparationStatistics,
    detect_boundaries,
)

__all__ = [
    'DealDeduplicator',
    'DeduplicationResult',
    'DuplicateMatch',
    'calculate_similarity',
    'DealExtractor',
    'ExtractionResult',
    'ExtractionStatistics',
    'extract_deals',
    'infer_deal_name',
    'DealExtractionPipeline',
    'DealExtractionPipelineResult',
    'DealSeparator',
    'SeparationResult',
    'SeparationStatistics',
    'detect_boundaries',
]
