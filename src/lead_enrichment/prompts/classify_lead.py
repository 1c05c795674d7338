"""
Lead classification prompt and response model.

The remote model returns a JSON object. Field names follow the camelCase
contract the prompt asks for; snake_case is accepted too. Any field the
model leaves out takes its default.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ..models.classification import Classification, LeadType
from ..models.contact import ContactBundle

# Prompt budget
MAX_PROMPT_KEYWORDS = 10
MAX_EXCERPT_CHARS = 1000

TARGET_REGION = 'Kansas City'


# =============================================================================
# Response Model
# =============================================================================


class ClassificationResponse(BaseModel):
    """Remote classifier response."""

    type: LeadType = Field(default=LeadType.UNKNOWN)
    is_person: bool = Field(
        default=False, validation_alias=AliasChoices('isPerson', 'is_person')
    )
    quality: int = Field(default=0)
    needs_contact_search: bool = Field(
        default=False,
        validation_alias=AliasChoices('needsContactSearch', 'needs_contact_search'),
    )
    skip_reason: str | None = Field(
        default=None, validation_alias=AliasChoices('skipReason', 'skip_reason')
    )
    reasoning: str | None = Field(default=None)

    @field_validator('type', mode='before')
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            if value in {t.value for t in LeadType}:
                return value
        return LeadType.UNKNOWN

    @field_validator('quality', mode='before')
    @classmethod
    def _clamp_quality(cls, value: Any) -> Any:
        if value is None:
            return 0
        if isinstance(value, bool):
            raise ValueError('quality must be a number')
        try:
            return max(0, min(10, int(round(float(value)))))
        except OverflowError as e:
            raise ValueError('quality must be a finite number') from e

    @field_validator('is_person', 'needs_contact_search', mode='before')
    @classmethod
    def _null_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    def to_classification(self) -> Classification:
        return Classification(
            type=self.type,
            is_person=self.is_person,
            quality=self.quality,
            needs_contact_search=self.needs_contact_search,
            skip_reason=self.skip_reason,
            reasoning=self.reasoning,
        )


# =============================================================================
# Prompt Templates
# =============================================================================

CLASSIFICATION_SYSTEM_PROMPT = f"""You classify sponsorship and partnership leads for a professional sports organization in the {TARGET_REGION} area.

Classify each lead as exactly one of:
- person: an individual's profile
- business: a company or organization
- event: an event page or sponsor listing
- unknown: none of the above can be determined

Rate quality 0-10 for partnership potential:
- 8-10: CEOs, presidents, founders and business owners in the {TARGET_REGION} area
- 5-7: directors, managers and established businesses
- 1-4: generic profiles with no clear business connection
- 0: leads to skip, such as event pages, sponsor listings and job postings

Flag businesses that have no usable contact and need a contact person search.
Respond with a single JSON object only."""

CLASSIFICATION_USER_PROMPT_TEMPLATE = """Analyze this lead:

URL: {url}

Extracted information:
- Names: {names}
- Titles: {titles}
- Companies: {companies}
- Emails: {emails}
- Phones: {phones}
- Keywords: {keywords}

Content preview:
{excerpt}

Return a JSON object with:
{{
  "type": "person|business|event|unknown",
  "isPerson": boolean,
  "quality": 0-10,
  "needsContactSearch": boolean,
  "skipReason": string or null,
  "reasoning": string
}}"""


def _listing(values: list[str]) -> str:
    return ', '.join(values) or 'None'


def build_classification_prompt(
    url: str,
    text: str,
    bundle: ContactBundle,
) -> list[dict[str, str]]:
    """
    Build the classification prompt messages for OpenAI.

    Email and phone values are never sent, only whether any were found.

    Args:
        url: Lead URL
        text: Row text used for classification
        bundle: Aggregated contact data for the row

    Returns:
        List of message dicts for OpenAI chat completion
    """
    user_prompt = CLASSIFICATION_USER_PROMPT_TEMPLATE.format(
        url=url,
        names=_listing(bundle.names),
        titles=_listing(bundle.titles),
        companies=_listing(bundle.companies),
        emails='Found' if bundle.emails else 'None',
        phones='Found' if bundle.phones else 'None',
        keywords=_listing(bundle.keywords[:MAX_PROMPT_KEYWORDS]),
        excerpt=text[:MAX_EXCERPT_CHARS],
    )

    return [
        {'role': 'system', 'content': CLASSIFICATION_SYSTEM_PROMPT},
        {'role': 'user', 'content': user_prompt},
    ]
