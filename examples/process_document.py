#!/usr/bin/env python3
"""
Example: Extract deals from a plain-text document.

This script demonstrates:
1. Detecting deal boundaries in an email thread, transcript or notes export
2. Extracting structured, confidence-scored deal records
3. Reviewing duplicates and warnings

Usage:
    python examples/process_document.py                 # built-in sample
    python examples/process_document.py notes.txt       # your own file
    python examples/process_document.py notes.txt --json
"""

import argparse
import json
import sys
from pathlib import Path
from uuid import uuid4

# Add src to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from dotenv import load_dotenv

# Load environment variables
env_file = Path(__file__).parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)

from deal_extraction import (
    DealExtractionPipeline,
    ExtractionConfig,
    ExtractionOptions,
    SeparationOptions,
)


SAMPLE_DOCUMENT = """
Deal: Acme Platform Expansion
Customer: Acme Corporation
Value: $1,250,000
Status: Negotiating
Owner: Jane Smith
Close Date: Q2 2025
Probability: 75

Deal: Globex Analytics Renewal
Customer: Globex Inc
Amount: $340k
Stage: Proposal
Expected Close: March 31, 2025

Forwarded from the regional team:

1. Initech Corp - $85k migration project
2. Umbrella Health Ltd new logo, roughly $40k
3. Hooli Cloud expansion at $1.2M

Spoke with the customer at Northwind Traders Inc about the renewal.
The deal is worth $120,000 and should close next quarter.
"""


def print_deal(deal) -> None:
    value = f"{deal.deal_value:,.2f} {deal.currency}" if deal.deal_value is not None else "-"
    print(f"\n  {deal.deal_name}")
    print(f"     Customer: {deal.customer_name or '-'}")
    print(f"     Value: {value}")
    print(f"     Status: {deal.status or '-'}")
    if deal.expected_close_date:
        print(f"     Close: {deal.expected_close_date.date().isoformat()}")
    print(
        f"     Confidence: {deal.confidence:.2f} "
        f"({deal.extraction_metadata.method.value}, "
        f"lines {deal.source_location.start_line}-{deal.source_location.end_line})"
    )


def run(path: Path | None, as_json: bool, min_confidence: float | None) -> int:
    problems = ExtractionConfig.validate()
    if problems:
        for problem in problems:
            print(f"ERROR: {problem}")
        return 1

    if path is not None:
        text = path.read_text(encoding='utf-8')
        source_file = path.name
    else:
        text = SAMPLE_DOCUMENT
        source_file = 'sample.txt'

    extraction_options = ExtractionOptions()
    if min_confidence is not None:
        extraction_options = extraction_options.model_copy(
            update={'min_confidence': min_confidence}
        )

    pipeline = DealExtractionPipeline(
        separation_options=SeparationOptions(),
        extraction_options=extraction_options,
    )
    result = pipeline.process(text, source_file_name=source_file, trace_id=str(uuid4()))

    if as_json:
        payload = {
            'source_file': result.source_file,
            'deals': [deal.model_dump(mode='json') for deal in result.deals],
            'duplicates': [deal.model_dump(mode='json') for deal in result.duplicates],
            'warnings': result.warnings,
            'outcomes': result.extraction.outcomes.to_dict(),
            'processing_time_ms': result.processing_time_ms,
        }
        print(json.dumps(payload, indent=2))
        return 0

    print("=" * 60)
    print(f"Deals in {source_file}")
    print("=" * 60)
    print(f"  Boundaries: {len(result.boundaries)} {result.separation.statistics.by_method}")

    for deal in result.deals:
        print_deal(deal)

    if result.duplicates:
        print(f"\n  Duplicates removed: {len(result.duplicates)}")
    for warning in result.warnings:
        print(f"  WARNING: {warning}")

    print(f"\n  Processing time: {result.processing_time_ms}ms")
    return 0


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Extract structured deals from a plain-text document'
    )
    parser.add_argument(
        'path',
        type=Path,
        nargs='?',
        help='Text file to process (defaults to a built-in sample)'
    )
    parser.add_argument(
        '--json', '-j',
        action='store_true',
        help='Print deals as JSON'
    )
    parser.add_argument(
        '--min-confidence', '-c',
        type=float,
        help='Drop deals below this confidence'
    )

    args = parser.parse_args()

    sys.exit(run(args.path, args.json, args.min_confidence))


if __name__ == '__main__':
    main()
