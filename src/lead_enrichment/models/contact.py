"""
Contact bundle model.

A ContactBundle is the aggregated extraction result for one row. It is built
fresh per row by the aggregator and consumed immediately by scoring and
classification.
"""

from pydantic import BaseModel, Field


class ContactBundle(BaseModel):
    """
    Ordered-unique lists of contact entities recovered from one row.

    Explicit row fields (contact_email, contact_name, ...) always sit at
    index 0 of their list when present.
    """

    names: list[str] = Field(default_factory=list, description='Person names')
    titles: list[str] = Field(default_factory=list, description='Job titles / roles')
    emails: list[str] = Field(default_factory=list, description='Email addresses')
    phones: list[str] = Field(
        default_factory=list, description='Phone numbers, canonical (AAA) PPP-NNNN where possible'
    )
    companies: list[str] = Field(default_factory=list, description='Company name fragments')
    addresses: list[str] = Field(default_factory=list, description='Street addresses')
    keywords: list[str] = Field(
        default_factory=list, description='Lowercased, deduplicated keywords'
    )

    @property
    def is_empty(self) -> bool:
        """True if nothing at all was recovered."""
        return not any(
            (
                self.names,
                self.titles,
                self.emails,
                self.phones,
                self.companies,
                self.addresses,
                self.keywords,
            )
        )

    @staticmethod
    def first(values: list[str]) -> str:
        """First entry of a bundle list, or '' if the list is empty."""
        return values[0] if values else ''
