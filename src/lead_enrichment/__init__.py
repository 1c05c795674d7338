"""
Lead Enrichment Pipeline

Enriches tabular lead records with pattern-extracted contact data, a
deterministic confidence score, and an OpenAI-powered (with rule-based
fallback) classification, under bounded concurrency with cancellation.
"""

__version__ = '0.1.0'

# Re-export key classes for convenience
from .pipeline import (
    BatchOrchestrator,
    CancellationToken,
    LeadClassifier,
    ProgressEvent,
    RunResult,
    RunStatus,
    aggregate,
    score,
)
from .models import (
    Classification,
    ContactBundle,
    LeadResult,
    LeadType,
    Row,
    RunConfig,
)
from .logging import (
    configure_logging,
    get_logger,
    logging_context,
    PipelineTimer,
)
from .errors import (
    LeadEnrichmentError,
    PipelineError,
    ValidationError,
    ClassificationError,
    RowProcessingError,
    OpenAIError,
    RowError,
)

__all__ = [
    # Version
    '__version__',
    # Orchestration
    'BatchOrchestrator',
    'CancellationToken',
    'ProgressEvent',
    'RunResult',
    'RunStatus',
    # Components
    'aggregate',
    'score',
    'LeadClassifier',
    # Models
    'Classification',
    'ContactBundle',
    'LeadResult',
    'LeadType',
    'Row',
    'RunConfig',
    # Logging
    'configure_logging',
    'get_logger',
    'logging_context',
    'PipelineTimer',
    # Errors
    'LeadEnrichmentError',
    'PipelineError',
    'ValidationError',
    'ClassificationError',
    'RowProcessingError',
    'OpenAIError',
    'RowError',
]
