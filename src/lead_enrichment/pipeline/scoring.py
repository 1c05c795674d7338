"""
Confidence scoring.

score() is a pure, additive function from a ContactBundle to an integer in
[0, 100]. Score tiers and run statistics are for downstream consumers that
bucket results; the pipeline itself never looks at thresholds.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from ..errors import RowError
from ..models.contact import ContactBundle
from ..models.lead import LeadResult
from ..models.run_config import ScoreThresholds

MAX_SCORE = 100

# Points per signal
EMAIL_POINTS = 30
PHONE_POINTS = 25
NAME_AND_TITLE_POINTS = 20
NAME_POINTS = 10
COMPANY_POINTS = 5
ADDRESS_POINTS = 8
KEYWORD_RICHNESS_POINTS = 5
SENIORITY_POINTS = 10
SPONSORSHIP_POINTS = 2

KEYWORD_RICHNESS_MIN = 3

SENIORITY_TERMS = ('ceo', 'president', 'founder', 'owner', 'executive', 'director')
SPONSORSHIP_TERMS = ('sponsor', 'presenting sponsor', 'partner')


def _contains_any(values: Iterable[str], terms: Iterable[str]) -> bool:
    terms = tuple(terms)
    return any(term in value.lower() for value in values for term in terms)


def score(bundle: ContactBundle) -> int:
    """
    Confidence that usable contact data was recovered, 0-100.

    Deterministic and side-effect free. The sum is clamped at 100.
    """
    total = 0

    # High value indicators
    if bundle.emails:
        total += EMAIL_POINTS
    if bundle.phones:
        total += PHONE_POINTS
    if bundle.names and bundle.titles:
        total += NAME_AND_TITLE_POINTS

    # Medium value indicators
    if bundle.names:
        total += NAME_POINTS
    if bundle.companies:
        total += COMPANY_POINTS
    if bundle.addresses:
        total += ADDRESS_POINTS
    if len(bundle.keywords) > KEYWORD_RICHNESS_MIN:
        total += KEYWORD_RICHNESS_POINTS

    # Keyword quality bonuses
    if _contains_any(bundle.keywords, SENIORITY_TERMS) or _contains_any(
        bundle.titles, SENIORITY_TERMS
    ):
        total += SENIORITY_POINTS
    if _contains_any(bundle.keywords, SPONSORSHIP_TERMS):
        total += SPONSORSHIP_POINTS

    return min(total, MAX_SCORE)


# =============================================================================
# Downstream bucketing
# =============================================================================


class ScoreTier(str, Enum):
    """Confidence score bucket."""

    HIGH_VALUE = 'high_value'
    QUALIFIED = 'qualified'
    MINIMUM = 'minimum'
    REJECTED = 'rejected'


def bucket_score(confidence_score: int, thresholds: ScoreThresholds) -> ScoreTier:
    """Place a confidence score into its tier."""
    if confidence_score >= thresholds.high_value:
        return ScoreTier.HIGH_VALUE
    if confidence_score >= thresholds.qualified:
        return ScoreTier.QUALIFIED
    if confidence_score >= thresholds.minimum:
        return ScoreTier.MINIMUM
    return ScoreTier.REJECTED


def is_qualified(result: LeadResult, thresholds: ScoreThresholds) -> bool:
    """A lead is kept for export once it clears the minimum threshold."""
    return result.confidence_score >= thresholds.minimum


@dataclass
class ProcessingStats:
    """Summary counts for a run."""

    total: int
    processed: int
    qualified: int
    rejected: int
    errors: int
    tiers: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'total': self.total,
            'processed': self.processed,
            'qualified': self.qualified,
            'rejected': self.rejected,
            'errors': self.errors,
            'tiers': dict(self.tiers),
        }


def summarize_results(
    results: list[LeadResult],
    errors: list[RowError],
    thresholds: ScoreThresholds,
    total: int | None = None,
) -> ProcessingStats:
    """
    Count results per tier.

    Args:
        results: LeadResults from a run
        errors: Row errors from the same run
        thresholds: Tier cut-offs
        total: Input row count (defaults to results + errors)

    Returns:
        ProcessingStats
    """
    tiers = {tier.value: 0 for tier in ScoreTier}
    for result in results:
        tiers[bucket_score(result.confidence_score, thresholds).value] += 1

    qualified = sum(1 for result in results if is_qualified(result, thresholds))

    return ProcessingStats(
        total=total if total is not None else len(results) + len(errors),
        processed=len(results),
        qualified=qualified,
        rejected=len(results) - qualified,
        errors=len(errors),
        tiers=tiers,
    )
