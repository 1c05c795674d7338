"""
Data models for the lead enrichment pipeline.
"""

from .contact import ContactBundle
from .classification import Classification, LeadType
from .lead import EXPLICIT_CONTACT_FIELDS, LEAD_SOURCE, LeadResult, Row
from .run_config import (
    OpenAISettings,
    ProcessingSettings,
    RunConfig,
    ScoreThresholds,
    ScoringSettings,
    validate_api_key,
)

__all__ = [
    'ContactBundle',
    'Classification',
    'LeadType',
    'LeadResult',
    'Row',
    'EXPLICIT_CONTACT_FIELDS',
    'LEAD_SOURCE',
    'RunConfig',
    'OpenAISettings',
    'ProcessingSettings',
    'ScoringSettings',
    'ScoreThresholds',
    'validate_api_key',
]
