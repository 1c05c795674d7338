"""
Tests for lead classification.

The remote client is mocked throughout; these tests never hit the API.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from lead_enrichment.errors import ClassificationError, OpenAIError
from lead_enrichment.models.classification import Classification, LeadType
from lead_enrichment.models.contact import ContactBundle
from lead_enrichment.pipeline.classifier import (
    EVENT_SKIP_REASON,
    FALLBACK_REASONING,
    LeadClassifier,
    fallback_classification,
    parse_classification,
)


def make_client(return_value=None, side_effect=None) -> MagicMock:
    """Stand-in for OpenAIClient with a mocked chat_completion_json."""
    client = MagicMock()
    client.chat_completion_json = AsyncMock(return_value=return_value, side_effect=side_effect)
    return client


class TestFallbackClassification:
    """Test the rule-based fallback."""

    def test_event_page_skipped(self):
        result = fallback_classification(
            'Annual charity gala presented by our sponsor',
            ContactBundle(names=['Jane Smith'], titles=['CEO']),
        )

        assert result.type == LeadType.EVENT
        assert result.quality == 0
        assert result.is_person is False
        assert result.skip_reason == EVENT_SKIP_REASON

    def test_senior_person_with_email(self):
        bundle = ContactBundle(names=['Jane Smith'], titles=['CEO'], emails=['jane@xyz.com'])

        result = fallback_classification('Jane Smith CEO', bundle)

        assert result.type == LeadType.PERSON
        assert result.is_person is True
        # base 5 + email 2 + senior person 2
        assert result.quality == 9
        assert result.needs_contact_search is False
        assert result.reasoning == FALLBACK_REASONING

    def test_quality_capped_at_ten(self):
        bundle = ContactBundle(
            names=['Jane Smith'],
            titles=['Founder'],
            emails=['jane@xyz.com'],
            phones=['(913) 555-1234'],
        )

        result = fallback_classification('Jane Smith Founder', bundle)

        assert result.quality == 10

    def test_person_from_text_role(self):
        """A name plus a senior role in the text is enough without a title."""
        result = fallback_classification(
            'John Doe is president of the board', ContactBundle(names=['John Doe'])
        )

        assert result.type == LeadType.PERSON
        assert result.quality == 5

    def test_business_without_email_needs_contact_search(self):
        bundle = ContactBundle(companies=['Acme Widgets LLC'], phones=['(816) 555-0100'])

        result = fallback_classification('Acme Widgets LLC serves the metro', bundle)

        assert result.type == LeadType.BUSINESS
        assert result.is_person is False
        assert result.needs_contact_search is True
        assert result.quality == 6

    def test_business_with_email_does_not_need_search(self):
        bundle = ContactBundle(companies=['Acme Inc'], emails=['info@acme.com'])

        result = fallback_classification('Acme Inc', bundle)

        assert result.type == LeadType.BUSINESS
        assert result.needs_contact_search is False

    def test_unknown(self):
        result = fallback_classification('hello world', ContactBundle())

        assert result.type == LeadType.UNKNOWN
        assert result.quality == 5
        assert result.skip_reason is None


class TestParseClassification:
    """Test remote response parsing."""

    def test_camel_case_fields(self):
        content = json.dumps(
            {
                'type': 'person',
                'isPerson': True,
                'quality': 8,
                'needsContactSearch': False,
                'skipReason': None,
                'reasoning': 'Local CEO',
            }
        )

        result = parse_classification(content)

        assert result == Classification(
            type=LeadType.PERSON,
            is_person=True,
            quality=8,
            needs_contact_search=False,
            skip_reason=None,
            reasoning='Local CEO',
        )

    def test_snake_case_fields(self):
        result = parse_classification('{"type": "business", "needs_contact_search": true}')

        assert result.type == LeadType.BUSINESS
        assert result.needs_contact_search is True

    def test_missing_fields_take_defaults(self):
        for content in ('', '{}'):
            result = parse_classification(content)
            assert result.type == LeadType.UNKNOWN
            assert result.is_person is False
            assert result.quality == 0
            assert result.needs_contact_search is False
            assert result.skip_reason is None

    def test_unknown_type_becomes_unknown(self):
        assert parse_classification('{"type": "robot"}').type == LeadType.UNKNOWN
        assert parse_classification('{"type": " Event "}').type == LeadType.EVENT

    @pytest.mark.parametrize('raw,expected', [(15, 10), (-3, 0), (7.6, 8), ('4', 4), (None, 0)])
    def test_quality_clamped(self, raw, expected):
        assert parse_classification(json.dumps({'quality': raw})).quality == expected

    def test_null_flags_are_false(self):
        result = parse_classification('{"isPerson": null, "needsContactSearch": null}')

        assert result.is_person is False
        assert result.needs_contact_search is False

    @pytest.mark.parametrize(
        'content',
        [
            'not json',
            '[1, 2]',
            '"person"',
            '{"quality": true}',
            '{"quality": "high"}',
            '{"quality": Infinity}',
            '{"quality": NaN}',
        ],
    )
    def test_invalid_bodies_raise(self, content: str):
        with pytest.raises(ClassificationError):
            parse_classification(content)


class TestLeadClassifier:
    """Test the remote classifier and its fallback."""

    @pytest.mark.asyncio
    async def test_no_client_uses_fallback(self, fallback_classifier: LeadClassifier):
        result = await fallback_classifier.classify(
            'https://example.com', 'hello world', ContactBundle()
        )

        assert fallback_classifier.remote_enabled is False
        assert result.reasoning == FALLBACK_REASONING

    @pytest.mark.asyncio
    async def test_remote_response_used(self):
        client = make_client(
            return_value='{"type": "business", "isPerson": false, "quality": 6, '
            '"needsContactSearch": true, "reasoning": "Local firm"}'
        )
        classifier = LeadClassifier(client, model='gpt-test', temperature=0.5)

        result = await classifier.classify(
            'https://example.com/acme', 'Acme Widgets LLC', ContactBundle(companies=['Acme Widgets LLC'])
        )

        assert result.type == LeadType.BUSINESS
        assert result.quality == 6
        assert result.needs_contact_search is True
        assert result.reasoning == 'Local firm'

        kwargs = client.chat_completion_json.await_args.kwargs
        assert kwargs['model'] == 'gpt-test'
        assert kwargs['temperature'] == 0.5

    @pytest.mark.asyncio
    async def test_prompt_sends_presence_not_contact_values(self):
        client = make_client(return_value='{"type": "person"}')
        classifier = LeadClassifier(client)
        bundle = ContactBundle(
            names=['Jane Smith'],
            titles=['CEO'],
            emails=['jane.smith@xyz.com'],
            phones=['(913) 555-5678'],
        )

        await classifier.classify('https://example.com/jane', 'Jane Smith CEO', bundle)

        messages = client.chat_completion_json.await_args.kwargs['messages']
        user_content = messages[1]['content']
        assert messages[0]['role'] == 'system'
        assert 'https://example.com/jane' in user_content
        assert 'Emails: Found' in user_content
        assert 'Phones: Found' in user_content
        assert 'jane.smith@xyz.com' not in user_content
        assert '555-5678' not in user_content

    @pytest.mark.asyncio
    async def test_empty_lists_render_as_none(self):
        client = make_client(return_value='{}')
        classifier = LeadClassifier(client)

        result = await classifier.classify('https://example.com', 'text', ContactBundle())

        user_content = client.chat_completion_json.await_args.kwargs['messages'][1]['content']
        assert 'Emails: None' in user_content
        assert 'Names: None' in user_content
        # Empty object is a valid response, not a failure
        assert result.type == LeadType.UNKNOWN
        assert result.reasoning is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'side_effect',
        [
            OpenAIError('API error'),
            asyncio.TimeoutError(),
            RuntimeError('connection reset'),
        ],
    )
    async def test_remote_failure_falls_back(self, side_effect):
        classifier = LeadClassifier(make_client(side_effect=side_effect))
        bundle = ContactBundle(names=['Jane Smith'], titles=['CEO'])

        result = await classifier.classify('https://example.com', 'Jane Smith CEO', bundle)

        assert result == fallback_classification('Jane Smith CEO', bundle)

    @pytest.mark.asyncio
    async def test_unparseable_response_falls_back(self):
        classifier = LeadClassifier(make_client(return_value='Sure! Here is the JSON'))

        result = await classifier.classify('https://example.com', 'hello', ContactBundle())

        assert result.reasoning == FALLBACK_REASONING
        assert result.type == LeadType.UNKNOWN
