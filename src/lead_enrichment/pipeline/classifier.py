"""
Lead classification.

LeadClassifier asks the remote model for a {type, quality, flags} judgment
and falls back to fixed local rules whenever the remote call cannot be used.
classify() never raises for transport, timeout or parse failures.
"""

import json

from pydantic import ValidationError as PydanticValidationError

from ..clients.openai_client import OpenAIClient
from ..errors import ClassificationError, OpenAIError, wrap_openai_error
from ..logging import get_logger
from ..models.classification import Classification, LeadType
from ..models.contact import ContactBundle
from ..prompts.classify_lead import ClassificationResponse, build_classification_prompt

logger = get_logger(__name__)

EVENT_TERMS = ('event', 'sponsor', 'conference', 'gala')
PERSON_TEXT_TERMS = ('ceo', 'president', 'founder')
BUSINESS_TEXT_TERMS = ('company', 'corporation', 'llc')
SENIOR_TITLE_TERMS = ('ceo', 'president', 'founder', 'owner', 'executive')

BASE_QUALITY = 5
EMAIL_QUALITY_BONUS = 2
PHONE_QUALITY_BONUS = 1
SENIOR_PERSON_QUALITY_BONUS = 2
MAX_QUALITY = 10

EVENT_SKIP_REASON = 'Event or sponsor page'
FALLBACK_REASONING = 'Classified using fallback rules'


def fallback_classification(text: str, bundle: ContactBundle) -> Classification:
    """
    Rule-based classification used when the remote model is unavailable.

    Event/sponsor pages are skipped with quality 0. Otherwise a lead is a
    person when a name was found alongside a title (or a senior role in the
    text), a business when a company was found or the text names a legal
    entity, and unknown otherwise.
    """
    lower_text = text.lower()

    if any(term in lower_text for term in EVENT_TERMS):
        return Classification(
            type=LeadType.EVENT,
            is_person=False,
            quality=0,
            needs_contact_search=False,
            skip_reason=EVENT_SKIP_REASON,
        )

    is_person = bool(bundle.names) and (
        bool(bundle.titles) or any(term in lower_text for term in PERSON_TEXT_TERMS)
    )
    is_business = bool(bundle.companies) or any(
        term in lower_text for term in BUSINESS_TEXT_TERMS
    )

    quality = BASE_QUALITY
    if bundle.emails:
        quality += EMAIL_QUALITY_BONUS
    if bundle.phones:
        quality += PHONE_QUALITY_BONUS
    if is_person and any(
        term in title.lower() for title in bundle.titles for term in SENIOR_TITLE_TERMS
    ):
        quality += SENIOR_PERSON_QUALITY_BONUS

    if is_person:
        lead_type = LeadType.PERSON
    elif is_business:
        lead_type = LeadType.BUSINESS
    else:
        lead_type = LeadType.UNKNOWN

    return Classification(
        type=lead_type,
        is_person=is_person,
        quality=min(quality, MAX_QUALITY),
        needs_contact_search=is_business and not bundle.emails,
        reasoning=FALLBACK_REASONING,
    )


def parse_classification(content: str) -> Classification:
    """
    Parse a remote response body into a Classification.

    Raises:
        ClassificationError: If the body is not a JSON object of the expected shape
    """
    try:
        payload = json.loads(content or '{}')
    except json.JSONDecodeError as e:
        raise ClassificationError(
            'Classification response is not valid JSON',
            context={'error': str(e)},
        ) from e

    if not isinstance(payload, dict):
        raise ClassificationError(
            'Classification response is not a JSON object',
            context={'payload_type': type(payload).__name__},
        )

    try:
        return ClassificationResponse.model_validate(payload).to_classification()
    except (PydanticValidationError, ValueError, TypeError) as e:
        raise ClassificationError(
            'Classification response has invalid fields',
            context={'error': str(e)},
        ) from e


class LeadClassifier:
    """
    Classifies leads via OpenAI with a deterministic local fallback.

    When constructed without a client every lead goes straight to the
    fallback rules.
    """

    def __init__(
        self,
        openai_client: OpenAIClient | None = None,
        model: str | None = None,
        temperature: float | None = None,
    ):
        """
        Initialize the classifier.

        Args:
            openai_client: Configured OpenAI client, or None for fallback-only
            model: Chat model override for classification requests
            temperature: Sampling temperature override
        """
        self.openai = openai_client
        self.model = model
        self.temperature = temperature

    @property
    def remote_enabled(self) -> bool:
        return self.openai is not None

    async def classify(
        self,
        url: str,
        text: str,
        bundle: ContactBundle,
    ) -> Classification:
        """
        Classify one lead.

        Args:
            url: Lead URL
            text: Row text used for classification
            bundle: Aggregated contact data for the row

        Returns:
            Classification from the remote model, or from the fallback rules
        """
        if self.openai is None:
            return fallback_classification(text, bundle)

        messages = build_classification_prompt(url=url, text=text, bundle=bundle)

        try:
            content = await self.openai.chat_completion_json(
                messages=messages,
                model=self.model,
                temperature=self.temperature,
            )
            return parse_classification(content)
        except (OpenAIError, ClassificationError) as e:
            logger.warning(
                'classifier.remote_failed',
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
        except Exception as e:
            wrapped = wrap_openai_error(e, context={'url': url})
            logger.warning(
                'classifier.remote_failed',
                url=url,
                error=str(wrapped),
                error_type=type(e).__name__,
            )

        return fallback_classification(text, bundle)
