"""
Pipeline components for contact extraction, scoring, classification and batch orchestration.
"""

from .aggregator import aggregate, build_text_blob, classification_text
from .classifier import LeadClassifier, fallback_classification, parse_classification
from .orchestrator import (
    BatchOrchestrator,
    CancellationToken,
    ProgressEvent,
    RunResult,
    RunState,
    RunStatus,
)
from .patterns import (
    extract_addresses,
    extract_companies,
    extract_emails,
    extract_names,
    extract_phones,
    extract_titles,
    format_phone,
)
from .scoring import (
    ProcessingStats,
    ScoreTier,
    bucket_score,
    is_qualified,
    score,
    summarize_results,
)

__all__ = [
    # Orchestration
    'BatchOrchestrator',
    'CancellationToken',
    'ProgressEvent',
    'RunResult',
    'RunState',
    'RunStatus',
    # Aggregation
    'aggregate',
    'build_text_blob',
    'classification_text',
    # Pattern extraction
    'extract_emails',
    'extract_phones',
    'extract_names',
    'extract_titles',
    'extract_companies',
    'extract_addresses',
    'format_phone',
    # Scoring
    'score',
    'ScoreTier',
    'bucket_score',
    'is_qualified',
    'ProcessingStats',
    'summarize_results',
    # Classification
    'LeadClassifier',
    'fallback_classification',
    'parse_classification',
]
