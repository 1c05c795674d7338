"""
OpenAI client wrapper for the lead enrichment pipeline.

Handles:
- Chat completions in JSON mode
- Retry logic with exponential backoff (attempt count set per run)
- Request timeouts
"""

import os

from openai import AsyncOpenAI
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from ..errors import wrap_openai_error
from ..logging import get_logger

logger = get_logger(__name__)

DEFAULT_CHAT_MODEL = 'gpt-4o-mini'
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_RETRY_ATTEMPTS = 3


class OpenAIClient:
    """
    Async OpenAI client for JSON-mode chat completions.

    Configuration via environment variables:
    - OPENAI_API_KEY: Required API key
    - OPENAI_CHAT_MODEL: Chat model (default: gpt-4o-mini)
    """

    def __init__(
        self,
        api_key: str | None = None,
        chat_model: str | None = None,
        temperature: float = 0.2,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
    ):
        """
        Initialize the OpenAI client.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            chat_model: Model for chat completions (defaults to OPENAI_CHAT_MODEL or gpt-4o-mini)
            temperature: Default sampling temperature
            timeout_seconds: Per-request timeout
            retry_attempts: Retries after the first failed call (0 disables retrying)
        """
        self.api_key = api_key or os.getenv('OPENAI_API_KEY')
        if not self.api_key:
            raise ValueError('OPENAI_API_KEY environment variable is required')
        if retry_attempts < 0:
            raise ValueError('retry_attempts must be >= 0')

        self.chat_model = chat_model or os.getenv('OPENAI_CHAT_MODEL', DEFAULT_CHAT_MODEL)
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds
        self.retry_attempts = retry_attempts
        self.retry_wait: wait_base = wait_exponential(multiplier=1, min=1, max=10)

        # Retries are owned by tenacity below, not by the SDK
        self._client = AsyncOpenAI(
            api_key=self.api_key,
            timeout=timeout_seconds,
            max_retries=0,
        )

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts + 1),
            wait=self.retry_wait,
            reraise=True,
        )

    async def chat_completion_json(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """
        Get a chat completion constrained to a JSON object.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Override the default chat model
            temperature: Override the default sampling temperature

        Returns:
            The assistant's raw response text (a JSON object, or '' if empty)

        Raises:
            OpenAIError: After the last retry fails
        """
        model = model or self.chat_model
        temperature = self.temperature if temperature is None else temperature

        try:
            async for attempt in self._retrying():
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.debug(
                            'openai.retry',
                            attempt=attempt.retry_state.attempt_number,
                            model=model,
                        )
                    response = await self._client.chat.completions.create(
                        model=model,
                        messages=messages,  # type: ignore
                        temperature=temperature,
                        response_format={'type': 'json_object'},
                    )
        except Exception as e:
            raise wrap_openai_error(e, context={'model': model}) from e

        return response.choices[0].message.content or ''

    async def health_check(self) -> dict[str, bool | str]:
        """
        Verify API connectivity with a minimal request.

        Returns:
            Dict with 'healthy' bool and optional 'error' message
        """
        try:
            await self._client.models.retrieve(self.chat_model)
            return {
                'healthy': True,
                'chat_model': self.chat_model,
            }
        except Exception as e:
            return {'healthy': False, 'error': str(e)}

    async def close(self):
        """Close the client connection."""
        await self._client.close()
