"""
Tests for the OpenAI client.

The retry and error tests replace the SDK client with mocks. The health
check at the end hits the actual OpenAI API and requires OPENAI_API_KEY.
Run with: pytest tests/test_openai_client.py -v
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from tenacity import wait_none

from lead_enrichment.clients.openai_client import OpenAIClient
from lead_enrichment.errors import OpenAIError, OpenAIRateLimitError

TEST_KEY = 'sk-test-0000000000000000'


def make_response(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_client(retry_attempts: int = 3, side_effect=None) -> OpenAIClient:
    """Client with the SDK replaced by a mock and no backoff between attempts."""
    client = OpenAIClient(api_key=TEST_KEY, chat_model='gpt-test', retry_attempts=retry_attempts)
    client.retry_wait = wait_none()
    client._client = MagicMock()
    client._client.chat.completions.create = AsyncMock(side_effect=side_effect)
    return client


MESSAGES = [{'role': 'user', 'content': 'Classify this lead'}]


class TestConstruction:
    """Test client configuration."""

    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv('OPENAI_API_KEY', raising=False)

        with pytest.raises(ValueError):
            OpenAIClient(api_key=None)

    def test_rejects_negative_retries(self):
        with pytest.raises(ValueError):
            OpenAIClient(api_key=TEST_KEY, retry_attempts=-1)

    def test_settings(self):
        client = OpenAIClient(
            api_key=TEST_KEY,
            chat_model='gpt-test',
            temperature=0.7,
            timeout_seconds=12,
            retry_attempts=5,
        )

        assert client.chat_model == 'gpt-test'
        assert client.temperature == 0.7
        assert client.timeout_seconds == 12
        assert client.retry_attempts == 5


class TestChatCompletionJson:
    """Test JSON-mode completions with mocked transport."""

    @pytest.mark.asyncio
    async def test_returns_content(self):
        client = make_client(side_effect=[make_response('{"type": "person"}')])

        content = await client.chat_completion_json(MESSAGES)

        assert content == '{"type": "person"}'
        kwargs = client._client.chat.completions.create.await_args.kwargs
        assert kwargs['model'] == 'gpt-test'
        assert kwargs['messages'] == MESSAGES
        assert kwargs['response_format'] == {'type': 'json_object'}
        assert kwargs['temperature'] == 0.2

    @pytest.mark.asyncio
    async def test_overrides(self):
        client = make_client(side_effect=[make_response('{}')])

        await client.chat_completion_json(MESSAGES, model='gpt-other', temperature=0.0)

        kwargs = client._client.chat.completions.create.await_args.kwargs
        assert kwargs['model'] == 'gpt-other'
        assert kwargs['temperature'] == 0.0

    @pytest.mark.asyncio
    async def test_empty_content(self):
        client = make_client(side_effect=[make_response(None)])
        assert await client.chat_completion_json(MESSAGES) == ''

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        client = make_client(
            retry_attempts=2,
            side_effect=[
                RuntimeError('server error'),
                RuntimeError('server error'),
                make_response('{"quality": 5}'),
            ],
        )

        content = await client.chat_completion_json(MESSAGES)

        assert content == '{"quality": 5}'
        assert client._client.chat.completions.create.await_count == 3

    @pytest.mark.asyncio
    async def test_attempts_are_retries_plus_one(self):
        client = make_client(retry_attempts=1, side_effect=RuntimeError('server error'))

        with pytest.raises(OpenAIError):
            await client.chat_completion_json(MESSAGES)

        assert client._client.chat.completions.create.await_count == 2

    @pytest.mark.asyncio
    async def test_zero_retries_single_attempt(self):
        client = make_client(retry_attempts=0, side_effect=RuntimeError('Rate limit reached'))

        with pytest.raises(OpenAIRateLimitError) as exc_info:
            await client.chat_completion_json(MESSAGES)

        assert exc_info.value.context['model'] == 'gpt-test'
        assert client._client.chat.completions.create.await_count == 1


class TestHealthCheck:
    """Test health reporting."""

    @pytest.mark.asyncio
    async def test_unhealthy_reports_error(self):
        client = make_client()
        client._client.models.retrieve = AsyncMock(side_effect=RuntimeError('unreachable'))

        result = await client.health_check()

        assert result == {'healthy': False, 'error': 'unreachable'}

    @pytest.mark.asyncio
    async def test_health_check_live(self, openai_api_key: str):
        """Verify we can connect to OpenAI API."""
        client = OpenAIClient(api_key=openai_api_key)
        try:
            result = await client.health_check()
            assert result['healthy'] is True
            assert 'chat_model' in result
            print(f"\nOpenAI Health Check: {result}")
        finally:
            await client.close()
