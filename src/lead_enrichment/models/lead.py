"""
Row and LeadResult models.

A Row is one input record: an ordered mapping of column name to optional text.
A LeadResult is the durable, immutable output record for one successfully
processed row.
"""

from datetime import datetime
from typing import Any, Literal, Mapping

from pydantic import BaseModel, Field

from .classification import Classification, LeadType
from .contact import ContactBundle

# One input record. Must carry a non-empty 'url' and at least one of
# 'snippet' / 'description'.
Row = Mapping[str, str | None]

# Explicit structured contact fields a row may expose directly, mapped to
# the ContactBundle list each one is promoted into
EXPLICIT_CONTACT_FIELDS = {
    'contact_name': 'names',
    'contact_title': 'titles',
    'contact_email': 'emails',
    'contact_phone': 'phones',
    'company_name': 'companies',
    'contact_address': 'addresses',
}

LEAD_SOURCE = 'csv-import'

# Length of the text excerpt kept on a LeadResult
EXCERPT_LENGTH = 500


class LeadResult(BaseModel):
    """Enriched record combining extraction, scoring and classification."""

    url: str = Field(..., description='Row URL')
    row_index: int = Field(..., ge=0, description='Position of the row in the input')

    # Contact fields (first of each extracted list)
    matched_keywords: list[str] = Field(default_factory=list)
    contact_name: str = ''
    contact_title: str = ''
    contact_email: str = ''
    contact_phone: str = ''
    company_name: str = ''
    contact_address: str = ''
    additional_info: str = Field(default='', description='Truncated text excerpt')

    # Classification
    classification: LeadType = LeadType.UNKNOWN
    is_person_profile: bool = False
    quality: int = Field(default=0, ge=0, le=10)
    needs_contact_search: bool = False
    skip_reason: str | None = None
    reasoning: str | None = None

    # Scoring
    confidence_score: int = Field(default=0, ge=0, le=100)

    # Provenance
    processed_at: datetime = Field(default_factory=lambda: datetime.now(tz=None))
    source: Literal['csv-import'] = LEAD_SOURCE

    model_config = {'frozen': True}

    @classmethod
    def from_parts(
        cls,
        url: str,
        row_index: int,
        bundle: ContactBundle,
        text: str,
        classification: Classification,
        confidence_score: int,
    ) -> 'LeadResult':
        """Assemble a LeadResult from one row's pipeline outputs."""
        first = bundle.first
        return cls(
            url=url,
            row_index=row_index,
            matched_keywords=list(bundle.keywords),
            contact_name=first(bundle.names),
            contact_title=first(bundle.titles),
            contact_email=first(bundle.emails),
            contact_phone=first(bundle.phones),
            company_name=first(bundle.companies),
            contact_address=first(bundle.addresses),
            additional_info=text[:EXCERPT_LENGTH],
            classification=classification.type,
            is_person_profile=classification.is_person,
            quality=classification.quality,
            needs_contact_search=classification.needs_contact_search,
            skip_reason=classification.skip_reason,
            reasoning=classification.reasoning,
            confidence_score=confidence_score,
        )

    def to_record(self) -> dict[str, Any]:
        """Flatten to a dict of plain strings/numbers for tabular export."""
        return {
            'url': self.url,
            'row_index': self.row_index,
            'matched_keywords': ', '.join(self.matched_keywords),
            'contact_name': self.contact_name,
            'contact_title': self.contact_title,
            'contact_email': self.contact_email,
            'contact_phone': self.contact_phone,
            'company_name': self.company_name,
            'contact_address': self.contact_address,
            'additional_info': self.additional_info,
            'classification': self.classification.value,
            'is_person_profile': self.is_person_profile,
            'quality': self.quality,
            'confidence_score': self.confidence_score,
            'needs_contact_search': self.needs_contact_search,
            'skip_reason': self.skip_reason or '',
            'processed_at': self.processed_at.isoformat(),
            'source': self.source,
        }

