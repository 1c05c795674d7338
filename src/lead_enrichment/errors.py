"""
Custom exceptions and error handling for the lead enrichment pipeline.

Provides:
- Typed exception hierarchy for different failure modes
- Error context preservation for debugging
- Per-row error records for partial-failure reporting
"""

from dataclasses import dataclass
from typing import Any


class LeadEnrichmentError(Exception):
    """Base exception for all lead enrichment errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


# =============================================================================
# Client Errors
# =============================================================================


class ClientError(LeadEnrichmentError):
    """Base class for client-related errors."""

    pass


class OpenAIError(ClientError):
    """Error from OpenAI API calls."""

    pass


class OpenAIRateLimitError(OpenAIError):
    """Rate limit exceeded on OpenAI API."""

    pass


class OpenAIModelError(OpenAIError):
    """Model refused request or returned invalid response."""

    pass


# =============================================================================
# Pipeline Errors
# =============================================================================


class PipelineError(LeadEnrichmentError):
    """Base class for pipeline-related errors."""

    pass


class ValidationError(PipelineError):
    """Input rows or configuration violate the row source contract."""

    pass


class ClassificationError(PipelineError):
    """Remote classification response could not be used."""

    pass


class RowProcessingError(PipelineError):
    """Unexpected failure while enriching a single row."""

    pass


# =============================================================================
# Row Error Records
# =============================================================================


@dataclass(frozen=True)
class RowError:
    """A failed row in a run. The row contributes no LeadResult."""

    url: str
    row_index: int
    message: str
    error_type: str = 'RowProcessingError'

    def __str__(self) -> str:
        return f"Error processing {self.url}: {self.message}"

    @classmethod
    def from_exception(cls, url: str, row_index: int, exc: BaseException) -> 'RowError':
        return cls(
            url=url,
            row_index=row_index,
            message=str(exc) or type(exc).__name__,
            error_type=type(exc).__name__,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'url': self.url,
            'row_index': self.row_index,
            'message': self.message,
            'error_type': self.error_type,
        }


# =============================================================================
# Error Handling Utilities
# =============================================================================


def wrap_openai_error(exc: Exception, context: dict[str, Any] | None = None) -> OpenAIError:
    """
    Wrap an OpenAI exception in our typed error hierarchy.

    Args:
        exc: The original exception
        context: Additional context for debugging

    Returns:
        Typed OpenAIError subclass
    """
    if isinstance(exc, OpenAIError):
        return exc

    error_str = str(exc).lower()
    ctx = dict(context or {})
    ctx['original_error'] = str(exc)
    ctx['error_type'] = type(exc).__name__

    if 'rate limit' in error_str or 'rate_limit' in error_str:
        return OpenAIRateLimitError(
            f"OpenAI rate limit exceeded: {exc}",
            context=ctx,
        )
    elif 'content policy' in error_str or 'refused' in error_str:
        return OpenAIModelError(
            f"OpenAI model refused request: {exc}",
            context=ctx,
        )
    else:
        return OpenAIError(
            f"OpenAI API error: {exc}",
            context=ctx,
        )
