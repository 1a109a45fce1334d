"""
Citation Penalty Ladder

Maps a citizen's citation ordinal to the penalty it carries. Citations never
expire: the ordinal is the all-time count of the citizen's citations,
including the one being processed.

Ladder (version 1):
- 1st citation: $400 fine + 48 hour civic standards course
- 2nd citation: $400 fine + 48 hour course + 2 days of civic work
- 3rd citation: 8 days in jail + criminal record
- nth citation (n > 3): 15 + 5*(n-3) days in jail + criminal record
"""

from dataclasses import dataclass, asdict
from decimal import Decimal
from enum import Enum
from typing import Dict


LADDER_VERSION = 1

# Ordinal at which citations start producing criminal records
CRIMINAL_RECORD_THRESHOLD = 3


class PenaltyTier(str, Enum):
    """Rung of the penalty ladder"""
    FIRST_CITATION = "FIRST_CITATION"
    SECOND_CITATION = "SECOND_CITATION"
    THIRD_CITATION = "THIRD_CITATION"
    REPEAT_OFFENDER = "REPEAT_OFFENDER"


@dataclass(frozen=True)
class PenaltyRule:
    """Sanctions attached to one tier"""
    fine_amount: Decimal
    civic_course_hours: int
    civic_work_days: int
    jail_days: int
    jail_days_per_extra_citation: int
    creates_criminal_record: bool
    description: str

    def jail_days_for(self, citation_number: int) -> int:
        extra = max(0, citation_number - CRIMINAL_RECORD_THRESHOLD)
        return self.jail_days + self.jail_days_per_extra_citation * extra


PENALTY_LADDER: Dict[PenaltyTier, PenaltyRule] = {
    PenaltyTier.FIRST_CITATION: PenaltyRule(
        fine_amount=Decimal("400.00"),
        civic_course_hours=48,
        civic_work_days=0,
        jail_days=0,
        jail_days_per_extra_citation=0,
        creates_criminal_record=False,
        description="First citation: $400 fine + 48 hour civic standards course",
    ),
    PenaltyTier.SECOND_CITATION: PenaltyRule(
        fine_amount=Decimal("400.00"),
        civic_course_hours=48,
        civic_work_days=2,
        jail_days=0,
        jail_days_per_extra_citation=0,
        creates_criminal_record=False,
        description="Second citation: $400 fine + 48 hour civic standards course + 2 days of civic work",
    ),
    PenaltyTier.THIRD_CITATION: PenaltyRule(
        fine_amount=Decimal("0.00"),
        civic_course_hours=0,
        civic_work_days=0,
        jail_days=8,
        jail_days_per_extra_citation=0,
        creates_criminal_record=True,
        description="Third citation: 8 days in jail + criminal record",
    ),
    PenaltyTier.REPEAT_OFFENDER: PenaltyRule(
        fine_amount=Decimal("0.00"),
        civic_course_hours=0,
        civic_work_days=0,
        jail_days=15,
        jail_days_per_extra_citation=5,
        creates_criminal_record=True,
        description="Repeated citations ({citation_number}): {jail_days} days in jail + criminal record",
    ),
}

_TIER_BY_ORDINAL: Dict[int, PenaltyTier] = {
    1: PenaltyTier.FIRST_CITATION,
    2: PenaltyTier.SECOND_CITATION,
    3: PenaltyTier.THIRD_CITATION,
}


@dataclass(frozen=True)
class PenaltyOutcome:
    """Penalty for one citation, derived from the ladder (never persisted)"""
    citation_number: int
    tier: PenaltyTier
    fine_amount: Decimal
    civic_course_hours: int
    civic_work_days: int
    jail_days: int
    creates_criminal_record: bool
    penalty_description: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data['tier'] = self.tier.value
        data['fine_amount'] = float(self.fine_amount)
        return data


def tier_for(citation_number: int) -> PenaltyTier:
    """Ladder tier for a 1-based citation ordinal"""
    return _TIER_BY_ORDINAL.get(citation_number, PenaltyTier.REPEAT_OFFENDER)


def calculate_penalty(prior_citation_count: int) -> PenaltyOutcome:
    """
    Calculate the penalty for a citizen's next citation

    Args:
        prior_citation_count: Citations the citizen already has (all-time)

    Returns:
        PenaltyOutcome for citation number prior_citation_count + 1

    Raises:
        TypeError: count is not an int
        ValueError: count is negative
    """
    if isinstance(prior_citation_count, bool) or not isinstance(prior_citation_count, int):
        raise TypeError(
            f"prior_citation_count must be an int, got {type(prior_citation_count).__name__}"
        )
    if prior_citation_count < 0:
        raise ValueError(f"prior_citation_count must be >= 0, got {prior_citation_count}")

    citation_number = prior_citation_count + 1
    tier = tier_for(citation_number)
    rule = PENALTY_LADDER[tier]
    jail_days = rule.jail_days_for(citation_number)

    return PenaltyOutcome(
        citation_number=citation_number,
        tier=tier,
        fine_amount=rule.fine_amount,
        civic_course_hours=rule.civic_course_hours,
        civic_work_days=rule.civic_work_days,
        jail_days=jail_days,
        creates_criminal_record=rule.creates_criminal_record,
        penalty_description=rule.description.format(
            citation_number=citation_number,
            jail_days=jail_days,
        ),
    )
