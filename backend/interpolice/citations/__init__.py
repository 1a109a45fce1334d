"""
Citation Penalty Escalation (minor infractions)

Components:
- penalty_calculator: fixed penalty ladder (citation ordinal -> sanctions)
- CitationCoordinator: atomic citation + automatic criminal record filing
- queries: read-side and administrative citation data access

Usage:
    from interpolice.citations import init_citation_coordinator

    coordinator = init_citation_coordinator(SessionLocal)
    result = coordinator.file_citation(citizen_id=3, description="Loud music after hours")

    if result.criminal_record_created:
        ...
"""

# Penalty ladder
from .penalty_calculator import (
    LADDER_VERSION,
    CRIMINAL_RECORD_THRESHOLD,
    PenaltyTier,
    PenaltyRule,
    PenaltyOutcome,
    PENALTY_LADDER,
    tier_for,
    calculate_penalty,
)

# Citation queries
from .queries import (
    CitationRecord,
    PenaltySummary,
    count_citations,
    get_citation,
    list_citizen_citations,
    list_citations,
    search_citations,
    update_citation,
    delete_citation,
    penalty_summary,
    citation_statistics,
    top_offenders,
)

# Filing coordinator
from .coordinator import (
    AutomaticRecord,
    CitationFilingResult,
    CitationCoordinator,
    init_citation_coordinator,
    get_citation_coordinator,
)


__all__ = [
    # Penalty ladder
    "LADDER_VERSION",
    "CRIMINAL_RECORD_THRESHOLD",
    "PenaltyTier",
    "PenaltyRule",
    "PenaltyOutcome",
    "PENALTY_LADDER",
    "tier_for",
    "calculate_penalty",

    # Citation queries
    "CitationRecord",
    "PenaltySummary",
    "count_citations",
    "get_citation",
    "list_citizen_citations",
    "list_citations",
    "search_citations",
    "update_citation",
    "delete_citation",
    "penalty_summary",
    "citation_statistics",
    "top_offenders",

    # Filing coordinator
    "AutomaticRecord",
    "CitationFilingResult",
    "CitationCoordinator",
    "init_citation_coordinator",
    "get_citation_coordinator",
]
