"""
Data models for the deal extraction engine.

Provides the Boundary contract produced by the separator and the
ExtractedDeal record produced by the extractor, plus their options.
"""

from .boundary import Boundary, DetectionMethod, SeparationOptions
from .deal import (
    ExtractedDeal,
    ExtractionMetadata,
    ExtractionOptions,
    SourceLocation,
)

__all__ = [
    # Boundaries
    'Boundary',
    'DetectionMethod',
    'SeparationOptions',
    # Extracted records
    'ExtractedDeal',
    'ExtractionMetadata',
    'ExtractionOptions',
    'SourceLocation',
]
