"""
Citation Models

Request and response bodies for citation filing, administration and
reporting.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CitationCreateRequest(BaseModel):
    """Request to file a citation (fine is assigned by the penalty ladder)"""
    description: str = Field(..., min_length=1, max_length=2000)

    class Config:
        json_schema_extra = {
            "example": {
                "description": "Loud music after hours"
            }
        }


class CitationUpdateRequest(BaseModel):
    """Administrative override of a citation (does not re-escalate)"""
    citizen_id: Optional[int] = Field(None, gt=0)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    fine_amount: Optional[float] = Field(None, ge=0)


class CitationResponse(BaseModel):
    """Persisted citation"""
    id: int
    citizen_id: int
    citizen_name: Optional[str] = None
    citizen_last_name: Optional[str] = None
    date: datetime
    description: str
    fine_amount: float


class PenaltyDetails(BaseModel):
    """Every field of a penalty outcome"""
    citation_number: int
    tier: str
    fine_amount: float
    civic_course_hours: int
    civic_work_days: int
    jail_days: int
    creates_criminal_record: bool
    penalty_description: str


class AutomaticActions(BaseModel):
    """Side effects performed while filing a citation"""
    criminal_record_created: bool
    criminal_record_id: Optional[int] = None
    warning: Optional[str] = None


class CitationFilingResponse(BaseModel):
    """Result of filing a citation"""
    citation: CitationResponse
    penalty_details: PenaltyDetails
    automatic_actions: AutomaticActions

    class Config:
        json_schema_extra = {
            "example": {
                "citation": {
                    "id": 12,
                    "citizen_id": 3,
                    "citizen_name": "Marta",
                    "citizen_last_name": "Rojas",
                    "date": "2026-10-18T21:04:00",
                    "description": "Loud music after hours",
                    "fine_amount": 0.0
                },
                "penalty_details": {
                    "citation_number": 3,
                    "tier": "THIRD_CITATION",
                    "fine_amount": 0.0,
                    "civic_course_hours": 0,
                    "civic_work_days": 0,
                    "jail_days": 8,
                    "creates_criminal_record": True,
                    "penalty_description": "Third citation: 8 days in jail + criminal record"
                },
                "automatic_actions": {
                    "criminal_record_created": True,
                    "criminal_record_id": 7,
                    "warning": "A criminal record was created automatically for accumulated citations"
                }
            }
        }


class CitationCountResponse(BaseModel):
    """Number of citations a citizen has"""
    citizen_id: int
    total_citations: int


class CitationDeletedResponse(BaseModel):
    """Deleted citation acknowledgement"""
    id: int
    citizen_id: int
    citizen_name: Optional[str] = None
    deleted: bool = True
    warning: str


class CurrentPenaltyStatus(BaseModel):
    total_citations: int
    total_fines: float


class PenaltyWarnings(BaseModel):
    approaching_criminal_record: Optional[str] = None
    escalation_notice: Optional[str] = None


class PenaltySummaryResponse(BaseModel):
    """Citizen's citation history and what the next citation carries"""
    citizen_id: int
    current_status: CurrentPenaltyStatus
    next_citation_penalty: PenaltyDetails
    warnings: PenaltyWarnings


class MonthlyCitationStats(BaseModel):
    month: str
    citations_count: int
    month_fines_total: float


class GeneralCitationStats(BaseModel):
    total_citations: int
    total_citizens_with_citations: int
    total_fines_amount: float
    average_fine_amount: float
    min_fine_amount: float
    max_fine_amount: float


class CitationStatsResponse(BaseModel):
    """Aggregate citation statistics"""
    general: GeneralCitationStats
    by_month: List[MonthlyCitationStats]


class TopOffenderResponse(BaseModel):
    """Citizen ranked by citation count"""
    id: int
    full_name: str
    last_name: Optional[str] = None
    qr_code: str
    total_citations: int
    total_fines: float
    last_citation_date: Optional[datetime] = None
