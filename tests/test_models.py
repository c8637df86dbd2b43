"""
Tests for boundary and deal models.
"""

import pytest
from pydantic import ValidationError

from deal_extraction.models import (
    Boundary,
    DetectionMethod,
    ExtractedDeal,
    ExtractionMetadata,
    SourceLocation,
)


class TestBoundary:
    """Test the Boundary model."""

    def test_length_and_content(self):
        text = 'intro Deal: Acme Corp renewal'
        boundary = Boundary(
            start_index=6,
            end_index=len(text),
            confidence=0.95,
            detection_method=DetectionMethod.KEYWORD,
        )

        assert boundary.length == len(text) - 6
        assert boundary.content(text) == 'Deal: Acme Corp renewal'

    def test_copy_does_not_mutate(self):
        """Derived boundaries leave the original untouched."""
        boundary = Boundary(
            start_index=0, end_index=10, confidence=0.5,
            detection_method=DetectionMethod.STRUCTURE,
        )
        merged = boundary.model_copy(update={'detection_method': DetectionMethod.HYBRID})

        assert boundary.detection_method == DetectionMethod.STRUCTURE
        assert merged.detection_method == DetectionMethod.HYBRID

    def test_method_serializes_as_string(self):
        boundary = Boundary(
            start_index=0, end_index=10, confidence=0.5,
            detection_method=DetectionMethod.PATTERN,
        )

        assert boundary.model_dump(mode='json')['detection_method'] == 'pattern'


class TestExtractedDeal:
    """Test the ExtractedDeal model."""

    def _deal(self, **overrides) -> ExtractedDeal:
        fields = {
            'deal_name': 'Acme Renewal',
            'confidence': 0.8,
            'source_location': SourceLocation(start_index=0, end_index=50),
            'extraction_metadata': ExtractionMetadata(method=DetectionMethod.KEYWORD),
        }
        fields.update(overrides)
        return ExtractedDeal(**fields)

    def test_minimal_deal(self):
        deal = self._deal()

        assert deal.customer_name is None
        assert deal.field_confidences == {}
        assert deal.extraction_metadata.extracted_at.tzinfo is not None

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            self._deal(deal_name='')

    def test_probability_range(self):
        with pytest.raises(ValidationError):
            self._deal(probability=101)

    def test_confidence_range(self):
        with pytest.raises(ValidationError):
            self._deal(confidence=1.2)
