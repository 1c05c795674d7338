"""
Run configuration.

An explicit, typed configuration struct supplied by the caller of a run.
Values can come from keyword arguments or from environment variables
prefixed with LEAD_ (nested sections use a double underscore, e.g.
LEAD_PROCESSING__BATCH_SIZE=25).

Validation happens here, on the caller side. The pipeline core trusts
the values it receives.
"""

from typing import Any

from pydantic import BaseModel, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import config


def validate_api_key(api_key: str) -> bool:
    """Loose shape check for an OpenAI API key."""
    return api_key.startswith('sk-') and len(api_key) >= 20


class OpenAISettings(BaseModel):
    """Remote classification model settings."""

    api_key: SecretStr = Field(default_factory=lambda: SecretStr(config.OPENAI_API_KEY))
    model: str = Field(default_factory=lambda: config.OPENAI_CHAT_MODEL)
    temperature: float = Field(
        default_factory=lambda: config.OPENAI_TEMPERATURE, ge=0.0, le=2.0
    )
    timeout_seconds: float = Field(
        default_factory=lambda: config.OPENAI_TIMEOUT_SECONDS, gt=0
    )


class ProcessingSettings(BaseModel):
    """Batching and concurrency settings."""

    batch_size: int = Field(default=10, ge=1, description='Rows per batch')
    max_concurrent: int = Field(default=3, ge=1, description='Admission window size')
    retry_attempts: int = Field(
        default=3, ge=0, description='Remote classification retries after the first call'
    )


class ScoreThresholds(BaseModel):
    """Confidence score cut-offs used by downstream consumers."""

    high_value: int = Field(default=80, ge=0, le=100)
    qualified: int = Field(default=60, ge=0, le=100)
    minimum: int = Field(default=40, ge=0, le=100)

    @model_validator(mode='after')
    def _check_ordering(self) -> 'ScoreThresholds':
        if not (self.high_value > self.qualified > self.minimum):
            raise ValueError(
                'thresholds must satisfy high_value > qualified > minimum '
                f'(got {self.high_value}, {self.qualified}, {self.minimum})'
            )
        return self


class ScoringSettings(BaseModel):
    """Scoring section."""

    thresholds: ScoreThresholds = Field(default_factory=ScoreThresholds)


class RunConfig(BaseSettings):
    """Configuration for one enrichment run."""

    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    processing: ProcessingSettings = Field(default_factory=ProcessingSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)

    model_config = SettingsConfigDict(
        env_prefix='LEAD_',
        env_nested_delimiter='__',
        extra='ignore',
    )

    @property
    def has_api_key(self) -> bool:
        return bool(self.openai.api_key.get_secret_value())

    def sanitized(self) -> dict[str, Any]:
        """Dump for logging with secrets masked."""
        data = self.model_dump()
        data['openai']['api_key'] = '***[REDACTED]***' if self.has_api_key else ''
        return data
