"""
Pytest configuration and shared fixtures.

Key fixtures:
- openai_api_key: OpenAI API key from environment (live tests skip without it)
- sample_rows: Small, realistic lead rows
- fallback_classifier: LeadClassifier with no remote client
"""

import os
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

from lead_enrichment.pipeline.classifier import LeadClassifier


@pytest.fixture
def openai_api_key() -> str:
    """Get OpenAI API key from environment."""
    key = os.getenv('OPENAI_API_KEY')
    if not key:
        pytest.skip('OPENAI_API_KEY not set')
    return key


@pytest.fixture
def sample_rows() -> list[dict[str, str]]:
    """Five lead rows covering person, business, event and sparse cases."""
    return [
        {
            'url': 'https://example.com/jane-smith',
            'snippet': 'Jane Smith, Director of Marketing at XYZ Corp, can be reached at '
            'jane.smith@xyz.com or 913-555-5678',
        },
        {
            'url': 'https://example.com/acme',
            'description': 'Acme Widgets LLC is a family company serving Kansas City since 1990.',
            'contact_phone': '816.555.0100',
        },
        {
            'url': 'https://example.com/gala',
            'snippet': 'Annual charity gala presented by our presenting sponsor.',
        },
        {
            'url': 'https://example.com/john-doe',
            'snippet': 'John Doe is the CEO and Founder of a Kansas City firm.',
            'contact_name': 'John Doe',
            'contact_title': 'CEO',
            'contact_email': 'John.Doe@Example.com',
        },
        {
            'url': 'https://example.com/blank',
            'snippet': '',
        },
    ]


@pytest.fixture
def fallback_classifier() -> LeadClassifier:
    """Classifier that always uses the local rules."""
    return LeadClassifier(openai_client=None)
