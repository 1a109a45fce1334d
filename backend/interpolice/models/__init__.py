"""
Pydantic Models Package

Request and response bodies for the Interpolice API.
Import from here for convenience.
"""

# Citation models
from .citation import (
    CitationCreateRequest,
    CitationUpdateRequest,
    CitationResponse,
    PenaltyDetails,
    AutomaticActions,
    CitationFilingResponse,
    CitationCountResponse,
    CitationDeletedResponse,
    CurrentPenaltyStatus,
    PenaltyWarnings,
    PenaltySummaryResponse,
    MonthlyCitationStats,
    GeneralCitationStats,
    CitationStatsResponse,
    TopOffenderResponse,
)

# Citizen models
from .citizen import (
    CitizenCreateRequest,
    CitizenUpdateRequest,
    CitizenResponse,
    PlanetResponse,
    StatusResponse,
    CitizenStatsResponse,
)

# Criminal record models
from .record import (
    RecordCreateRequest,
    RecordUpdateRequest,
    RecordResponse,
    RecordCountResponse,
    RecordStatsResponse,
    DangerousLocationResponse,
)

# Auth models
from .auth import (
    RoleName,
    LoginRequest,
    TokenResponse,
    UserCreateRequest,
    UserResponse,
    RoleResponse,
)


__all__ = [
    # Citation
    "CitationCreateRequest",
    "CitationUpdateRequest",
    "CitationResponse",
    "PenaltyDetails",
    "AutomaticActions",
    "CitationFilingResponse",
    "CitationCountResponse",
    "CitationDeletedResponse",
    "CurrentPenaltyStatus",
    "PenaltyWarnings",
    "PenaltySummaryResponse",
    "MonthlyCitationStats",
    "GeneralCitationStats",
    "CitationStatsResponse",
    "TopOffenderResponse",

    # Citizen
    "CitizenCreateRequest",
    "CitizenUpdateRequest",
    "CitizenResponse",
    "PlanetResponse",
    "StatusResponse",
    "CitizenStatsResponse",

    # Criminal record
    "RecordCreateRequest",
    "RecordUpdateRequest",
    "RecordResponse",
    "RecordCountResponse",
    "RecordStatsResponse",
    "DangerousLocationResponse",

    # Auth
    "RoleName",
    "LoginRequest",
    "TokenResponse",
    "UserCreateRequest",
    "UserResponse",
    "RoleResponse",
]
