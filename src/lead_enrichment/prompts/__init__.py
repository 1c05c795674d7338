"""
LLM prompts for the lead enrichment pipeline.
"""

from .classify_lead import (
    CLASSIFICATION_SYSTEM_PROMPT,
    ClassificationResponse,
    build_classification_prompt,
)

__all__ = [
    'ClassificationResponse',
    'build_classification_prompt',
    'CLASSIFICATION_SYSTEM_PROMPT',
]
