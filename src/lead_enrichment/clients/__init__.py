"""
External service clients for the lead enrichment pipeline.
"""

from .openai_client import OpenAIClient

__all__ = [
    'OpenAIClient',
]
