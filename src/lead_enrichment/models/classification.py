"""
Classification model.

Both the remote classifier and the rule-based fallback produce this shape.
Quality (0-10) is independent of the 0-100 confidence score and the two are
never combined.
"""

from enum import Enum

from pydantic import BaseModel, Field


class LeadType(str, Enum):
    """Nature of a lead."""

    PERSON = 'person'
    BUSINESS = 'business'
    EVENT = 'event'
    UNKNOWN = 'unknown'


class Classification(BaseModel):
    """Lead type and partnership-quality judgment for one row."""

    type: LeadType = Field(default=LeadType.UNKNOWN, description='Lead type')
    is_person: bool = Field(default=False, description='True for an individual profile')
    quality: int = Field(default=0, ge=0, le=10, description='Partnership quality 0-10')
    needs_contact_search: bool = Field(
        default=False, description='Business without a usable contact email'
    )
    skip_reason: str | None = Field(default=None, description='Why the lead should be skipped')
    reasoning: str | None = Field(default=None, description='Brief explanation')

    model_config = {'frozen': True}
