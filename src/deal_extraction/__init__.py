"""
Deal Extraction Engine

Segments unstructured business text (email threads, call transcripts,
exported notes) into candidate deal passages and extracts structured,
confidence-scored deal records from each, collapsing near-duplicates.
"""

__version__ = '0.1.0'

from .config import ExtractionConfig, extraction_config
from .errors import (
    DealExtractionEngineError,
    FieldExtractionError,
    MissingDealNameError,
    PartialSuccessResult,
)
from .logging import (
    configure_logging,
    get_logger,
    logging_context,
    PipelineTimer,
)
from .models import (
    Boundary,
    DetectionMethod,
    ExtractedDeal,
    ExtractionMetadata,
    ExtractionOptions,
    SeparationOptions,
    SourceLocation,
)
from .pipeline import (
    DealDeduplicator,
    DealExtractionPipeline,
    DealExtractionPipelineResult,
    DealExtractor,
    DealSeparator,
    ExtractionResult,
    SeparationResult,
    detect_boundaries,
    extract_deals,
)

__all__ = [
    # Version
    '__version__',
    # Config
    'ExtractionConfig',
    'extraction_config',
    # Operations
    'detect_boundaries',
    'extract_deals',
    # Components
    'DealSeparator',
    'DealExtractor',
    'DealDeduplicator',
    'DealExtractionPipeline',
    'DealExtractionPipelineResult',
    'SeparationResult',
    'ExtractionResult',
    # Models
    'Boundary',
    'DetectionMethod',
    'ExtractedDeal',
    'ExtractionMetadata',
    'ExtractionOptions',
    'SeparationOptions',
    'SourceLocation',
    # Logging
    'configure_logging',
    'get_logger',
    'logging_context',
    'PipelineTimer',
    # Errors
    'DealExtractionEngineError',
    'FieldExtractionError',
    'MissingDealNameError',
    'PartialSuccessResult',
]
