"""
Tests for deal field extraction.
"""

from datetime import datetime

import pytest

from deal_extraction.errors import FieldExtractionError, MissingDealNameError
from deal_extraction.models import (
    Boundary,
    DetectionMethod,
    ExtractionOptions,
)
from deal_extraction.patterns.boundaries import looks_like_deal_entry
from deal_extraction.pipeline.extractor import (
    DealExtractor,
    detect_currency,
    extract_deals,
    infer_deal_name,
)
from deal_extraction.pipeline.separator import DealSeparator, detect_boundaries


def _whole_text_boundary(text: str, confidence: float = 0.5) -> Boundary:
    return Boundary(
        start_index=0,
        end_index=len(text),
        confidence=confidence,
        detection_method=DetectionMethod.STRUCTURE,
    )


def _duplicate_text(first_name: str, second_name: str) -> str:
    return (
        f'Deal: {first_name}\n'
        'Value: $100,000\n'
        'Status: Qualified\n'
        '\n'
        f'Deal: {second_name}\n'
        'Value: $100,000\n'
        'Status: Qualified\n'
    )


class TestFieldExtraction:
    """Test extraction of individual fields."""

    def test_all_fields(self, full_deal_text):
        """Every supported field is extracted and typed."""
        boundaries = detect_boundaries(full_deal_text).boundaries
        result = extract_deals(full_deal_text, boundaries)

        assert len(result.deals) == 1
        deal = result.deals[0]
        assert deal.deal_name == 'Acme Platform Expansion'
        assert deal.customer_name == 'Acme Corporation'
        assert deal.deal_value == 1_250_000.0
        assert deal.currency == 'USD'
        assert deal.status == 'negotiation'
        assert deal.owner == 'Jane Smith'
        assert deal.expected_close_date == datetime(2025, 3, 31)
        assert deal.probability == 75
        assert deal.decision_maker == 'John Doe, CFO'
        assert deal.description == (
            'Expansion of the analytics platform across three business units.'
        )
        assert deal.confidence == pytest.approx(1.0)
        assert deal.extraction_metadata.method == DetectionMethod.KEYWORD
        assert deal.extraction_metadata.fields_extracted == 9
        assert deal.extraction_metadata.fields_total == 9

    def test_two_deal_scenario(self, two_deal_text):
        """Two keyword deals produce two records with normalized fields."""
        boundaries = detect_boundaries(two_deal_text).boundaries
        result = extract_deals(two_deal_text, boundaries)

        assert [d.deal_name for d in result.deals] == ['Acme Corp', 'Beta Inc']
        assert [d.deal_value for d in result.deals] == [50_000.0, 75_000.0]
        assert [d.status for d in result.deals] == ['qualified', 'proposal']
        assert result.duplicates == []
        assert result.warnings == []

    def test_shorthand_amount(self):
        """k/m multipliers scale the captured amount."""
        text = 'Deal: Globex Rollout\nAmount: $75k for year one'
        result = extract_deals(text, [_whole_text_boundary(text)])

        assert result.deals[0].deal_value == 75_000.0

    def test_quarter_close_date(self):
        """Quarter close dates resolve to the middle month's last day."""
        text = 'Deal: Initech Migration\nClose Date: Q2 2025\nStatus: Discovery'
        result = extract_deals(text, [_whole_text_boundary(text)])

        assert result.deals[0].expected_close_date == datetime(2025, 5, 31)

    def test_currency_code(self):
        """An ISO code in the passage sets the currency."""
        text = 'Deal: Euro Expansion\nValue: 50,000 EUR'
        deal = extract_deals(text, [_whole_text_boundary(text)]).deals[0]

        assert deal.deal_value == 50_000.0
        assert deal.currency == 'EUR'

    def test_no_currency_without_value(self):
        """Currency is only set when a value was found."""
        text = 'Deal: Hooli Pilot\nStatus: Pending approval'
        deal = extract_deals(text, [_whole_text_boundary(text)]).deals[0]

        assert deal.deal_value is None
        assert deal.currency is None

    def test_fields_to_extract(self, full_deal_text):
        """Only the requested fields are extracted."""
        options = ExtractionOptions(fields_to_extract=['deal_name', 'deal_value'])
        deal = DealExtractor(options).extract_deals(
            full_deal_text, [_whole_text_boundary(full_deal_text)]
        ).deals[0]

        assert deal.deal_value == 1_250_000.0
        assert deal.status is None
        assert deal.owner is None
        assert deal.extraction_metadata.fields_total == 2

    def test_raw_text_truncated(self):
        """Only the first 500 characters of a passage are retained."""
        text = 'Deal: Long Notes Deal\nNotes: ' + 'detail ' * 200
        deal = extract_deals(text, [_whole_text_boundary(text)]).deals[0]

        assert len(deal.raw_text) == 500
        assert text.startswith(deal.raw_text)

    def test_source_location(self, two_deal_text):
        """Records carry their boundary offsets and source file."""
        boundaries = detect_boundaries(two_deal_text).boundaries
        result = extract_deals(two_deal_text, boundaries, source_file_name='q3.txt')

        second = result.deals[1]
        assert second.source_location.start_index == boundaries[1].start_index
        assert second.source_location.end_index == len(two_deal_text)
        assert second.source_location.source_file == 'q3.txt'
        assert second.source_location.start_line == 5


class TestMultiplierWords:
    """Test amounts written with multiplier words."""

    def test_labelled_million(self):
        text = 'Deal: Hooli Cloud Expansion\nValue: $2 million\nStatus: Proposal'
        deal = extract_deals(text, [_whole_text_boundary(text)]).deals[0]

        assert deal.deal_value == 2_000_000.0
        assert deal.currency == 'USD'

    def test_labelled_without_symbol(self):
        text = 'Deal: Initech Migration\nValue: 2 million'
        deal = extract_deals(text, [_whole_text_boundary(text)]).deals[0]

        assert deal.deal_value == 2_000_000.0

    def test_bare_dollar_million(self):
        """A dollar amount in free text keeps its multiplier word."""
        text = 'Deal: Northwind Renewal\nNotes: they expect $2.5 million over three years'
        deal = extract_deals(text, [_whole_text_boundary(text)]).deals[0]

        assert deal.deal_value == pytest.approx(2_500_000.0)

    def test_mm_shorthand(self):
        text = 'Deal: Umbrella Health Rollout\nDeal Size: 3mm'
        deal = extract_deals(text, [_whole_text_boundary(text)]).deals[0]

        assert deal.deal_value == 3_000_000.0

    def test_monthly_is_not_a_multiplier(self):
        """A word starting with m after the amount does not scale it."""
        text = 'Deal: Contoso Support\nValue: $10,000 monthly'
        deal = extract_deals(text, [_whole_text_boundary(text)]).deals[0]

        assert deal.deal_value == 10_000.0

    @pytest.mark.parametrize(
        'amount, expected',
        [
            ('$2 million', 2_000_000.0),
            ('$1.2 million', 1_200_000.0),
            ('$40 thousand', 40_000.0),
            ('$3mm', 3_000_000.0),
        ],
    )
    def test_detection_and_extraction_agree(self, amount, expected):
        """An amount that marks a list entry as a deal is also extracted at full scale."""
        entry = f'renewal worth {amount}'
        text = f'Deal: Globex Renewal\nNotes: {entry}'
        deal = extract_deals(text, [_whole_text_boundary(text)]).deals[0]

        assert looks_like_deal_entry(entry)
        assert deal.deal_value == pytest.approx(expected)

    def test_numbered_list_entry(self):
        """A detected list boundary yields the scaled amount."""
        text = '1. Hooli Cloud expansion at $1.2 million\n2. Initech Corp migration at $85k'
        boundaries = DealSeparator().find_pattern_boundaries(text)
        result = extract_deals(text, boundaries)

        assert len(boundaries) == 1
        assert result.deals[0].deal_value == pytest.approx(1_200_000.0)


class TestDealNameInference:
    """Test fallback deal names."""

    def test_first_line(self):
        """The first non-blank line is used without its list marker."""
        assert infer_deal_name('\n1. Acme Corp - $50k expansion\nmore') == (
            'Acme Corp - $50k expansion'
        )

    def test_company_name(self):
        """A capitalized phrase ending in a company suffix is used next."""
        assert infer_deal_name('$$$\nWe met Globex Corp yesterday') == 'Globex Corp'

    def test_capitalized_line(self):
        """A standalone capitalized line is the last resort."""
        text = '---\nsome notes here\nStrategic Account Review\n'

        assert infer_deal_name(text) == 'Strategic Account Review'

    def test_nothing_to_infer(self):
        assert infer_deal_name('12345\n67890') is None

    def test_inferred_name_confidence(self):
        """Inferred names get a fixed field confidence and no boost."""
        text = 'Northwind Traders renewal\nValue: $10,000'
        deal = extract_deals(text, [_whole_text_boundary(text)]).deals[0]

        assert deal.deal_name == 'Northwind Traders renewal'
        assert deal.field_confidences['deal_name'] == pytest.approx(0.5)
        assert deal.confidence == pytest.approx(0.7)


class TestFailureHandling:
    """Test per-boundary failures become warnings."""

    def test_missing_name_warns(self):
        """A boundary with no name yields no record and a warning."""
        text = '12 34 56 78 90\n$5,000 ok it is'
        result = extract_deals(text, [_whole_text_boundary(text)])

        assert result.deals == []
        assert result.warnings == ['Could not extract deal name at index 0']
        assert result.outcomes.failure_count == 1
        assert isinstance(result.outcomes.failed[0].error, MissingDealNameError)
        assert result.outcomes.to_dict()['failed_ids'] == ['boundary@0']

    def test_unexpected_error_wrapped(self, monkeypatch, two_deal_text):
        """Unexpected errors are wrapped and do not stop other boundaries."""
        boundaries = detect_boundaries(two_deal_text).boundaries
        extractor = DealExtractor()
        original = extractor.extract_deal

        def flaky(text, boundary):
            if boundary.start_index == 0:
                raise RuntimeError('boom')
            return original(text, boundary)

        monkeypatch.setattr(extractor, 'extract_deal', flaky)
        result = extractor.extract_deals(two_deal_text, boundaries)

        assert [d.deal_name for d in result.deals] == ['Beta Inc']
        assert result.warnings == ['Extraction failed at index 0']
        assert result.outcomes.partial_success
        error = result.outcomes.failed[0].error
        assert isinstance(error, FieldExtractionError)
        assert error.context['error_type'] == 'RuntimeError'

    def test_empty_boundary_skipped(self):
        """Zero-length boundaries are skipped silently."""
        text = 'Deal: Something Here'
        boundary = Boundary(
            start_index=5, end_index=5, confidence=0.9,
            detection_method=DetectionMethod.KEYWORD,
        )
        result = extract_deals(text, [boundary])

        assert result.deals == []
        assert result.warnings == []

    def test_out_of_range_offsets_clamped(self):
        """Offsets past the end of the text are clamped."""
        text = 'Deal: Clamped Deal\nValue: $5,000'
        boundary = Boundary(
            start_index=0, end_index=10_000, confidence=0.9,
            detection_method=DetectionMethod.KEYWORD,
        )
        result = extract_deals(text, [boundary])

        assert result.deals[0].deal_name == 'Clamped Deal'


class TestDedupAndFiltering:
    """Test deduplication and the confidence filter."""

    def test_near_duplicates_collapsed(self):
        """Company-suffix variants of the same deal collapse to one record."""
        text = _duplicate_text('Acme Corporation', 'Acme Corp')
        boundaries = detect_boundaries(text).boundaries
        result = extract_deals(text, boundaries)

        assert len(boundaries) == 2
        assert [d.deal_name for d in result.deals] == ['Acme Corporation']
        assert [d.deal_name for d in result.duplicates] == ['Acme Corp']
        assert result.statistics.duplicates_removed == 1

    def test_deduplicate_disabled(self):
        text = _duplicate_text('Acme Corporation', 'Acme Corp')
        boundaries = detect_boundaries(text).boundaries
        result = extract_deals(text, boundaries, deduplicate=False)

        assert len(result.deals) == 2
        assert result.duplicates == []

    def test_min_confidence_filter(self, paragraph_text):
        """Records below min_confidence are dropped."""
        boundaries = detect_boundaries(paragraph_text).boundaries
        kept = extract_deals(paragraph_text, boundaries)
        filtered = extract_deals(paragraph_text, boundaries, min_confidence=0.9)

        assert len(kept.deals) == 2
        assert 'Northwind' in kept.deals[0].deal_name
        assert kept.deals[0].deal_value == 120_000.0
        assert 'Contoso' in kept.deals[1].deal_name
        assert filtered.deals == []

    def test_statistics(self, two_deal_text):
        boundaries = detect_boundaries(two_deal_text).boundaries
        stats = extract_deals(two_deal_text, boundaries).statistics

        assert stats.total_deals == 2
        assert stats.average_confidence == pytest.approx(1.0)
        assert stats.fields_extracted['deal_name'] == 2
        assert stats.fields_extracted['deal_value'] == 2
        assert 'owner' not in stats.fields_extracted


class TestCurrencyDetection:
    """Test currency detection helpers."""

    def test_symbols(self):
        assert detect_currency('about £5,000') == 'GBP'
        assert detect_currency('roughly €12k') == 'EUR'

    def test_default(self):
        assert detect_currency('$5,000') == 'USD'
