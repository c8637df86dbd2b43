"""
Pytest configuration and shared fixtures.

Key fixtures:
- two_deal_text: Two keyword-headed deals
- numbered_list_text: A numbered deal register
- paragraph_text: Free-form paragraphs with deal indicators
- full_deal_text: One deal with every field populated
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

# Load environment variables
from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)


@pytest.fixture
def two_deal_text() -> str:
    """Two keyword-headed deals separated by a blank line."""
    return (
        'Deal: Acme Corp\n'
        'Value: $50,000\n'
        'Status: Qualified\n'
        '\n'
        'Deal: Beta Inc\n'
        'Value: $75,000\n'
        'Status: Proposal'
    )


@pytest.fixture
def numbered_list_text() -> str:
    """Pipeline review with a numbered list of deals."""
    return (
        'Pipeline review for this week:\n'
        '\n'
        '1. Acme Corp - $50k expansion\n'
        '2. Beta Industries renewal at $75k\n'
        '3. Gamma LLC new logo\n'
        '\n'
        'Thanks everyone.'
    )


@pytest.fixture
def paragraph_text() -> str:
    """Two free-form paragraphs describing deals, with no headers."""
    return (
        'Spoke with the customer at Northwind Traders Inc about the renewal. '
        'The deal is worth $120,000 and should close next quarter.\n'
        '\n'
        'Lunch plans for Friday are still open, reply to the thread.\n'
        '\n'
        'Contoso Ltd asked about pricing again. Current status is proposal '
        'and the amount discussed was $45,000.'
    )


@pytest.fixture
def full_deal_text() -> str:
    """A single deal with every supported field."""
    return (
        'Deal: Acme Platform Expansion\n'
        'Customer: Acme Corporation\n'
        'Value: $1,250,000\n'
        'Status: Negotiating\n'
        'Owner: Jane Smith\n'
        'Close Date: 2025-03-31\n'
        'Probability: 75\n'
        'Decision Maker: John Doe, CFO\n'
        'Description: Expansion of the analytics platform\n'
        '  across three business units.'
    )
