"""
Citation Routes - Minor infraction filing and administration

Endpoints:
- GET    /api/citizens/{citizen_id}/citations                  - Citizen's citations
- GET    /api/citizens/{citizen_id}/citations/count            - Citation count
- GET    /api/citizens/{citizen_id}/citations/penalty-summary  - Totals + next penalty
- GET    /api/citizens/{citizen_id}/citations/{citation_id}    - Specific citation
- POST   /api/citizens/{citizen_id}/citations                  - File citation (automatic penalty)
- PUT    /api/citizens/{citizen_id}/citations/{citation_id}    - Administrative override
- DELETE /api/citizens/{citizen_id}/citations/{citation_id}    - Delete citation
- GET    /api/citations/search                                 - Search citations
- GET    /api/citations/all                                    - Filtered listing
- GET    /api/citations/stats                                  - Statistics
- GET    /api/citations/top-offenders                          - Most cited citizens
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from interpolice.auth import ALL_ROLES, SUPERVISOR_ROLES, CurrentUser, require_roles
from interpolice.citations import (
    CitationCoordinator,
    CitationRecord,
    PenaltyOutcome,
    get_citation_coordinator,
    get_citation,
    list_citizen_citations,
    list_citations,
    search_citations,
    update_citation,
    delete_citation,
    count_citations,
    penalty_summary,
    citation_statistics,
    top_offenders,
)
from interpolice.citizens import citizen_exists
from interpolice.database.database import get_db
from interpolice.errors import NotFoundError
from interpolice.models import (
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
    CitationStatsResponse,
    TopOffenderResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/citizens/{citizen_id}/citations", tags=["citations"])
search_router = APIRouter(prefix="/api/citations", tags=["citations"])

CRIMINAL_RECORD_WARNING = (
    "ATTENTION: a criminal record was created automatically for accumulated minor citations"
)


def get_coordinator() -> CitationCoordinator:
    """Coordinator dependency (overridable in tests)"""
    return get_citation_coordinator()


def to_citation_response(citation: CitationRecord) -> CitationResponse:
    return CitationResponse(
        id=citation.id,
        citizen_id=citation.citizen_id,
        citizen_name=citation.citizen_name,
        citizen_last_name=citation.citizen_last_name,
        date=citation.date,
        description=citation.description,
        fine_amount=float(citation.fine_amount),
    )


def to_penalty_details(penalty: PenaltyOutcome) -> PenaltyDetails:
    return PenaltyDetails(**penalty.to_dict())


def _require_citizen(db: Session, citizen_id: int):
    if not citizen_exists(db, citizen_id):
        raise HTTPException(status_code=404, detail=f"Citizen {citizen_id} does not exist")


def _require_citation_of(db: Session, citizen_id: int, citation_id: int) -> CitationRecord:
    citation = get_citation(db, citation_id)
    if citation is None or citation.citizen_id != citizen_id:
        raise HTTPException(status_code=404, detail="Citation not found")
    return citation


# ============================================
# Citizen-scoped Endpoints
# ============================================

@router.get("", response_model=List[CitationResponse])
async def get_citizen_citations(
    citizen_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    """Get all citations of a citizen, newest first"""
    _require_citizen(db, citizen_id)
    return [to_citation_response(c) for c in list_citizen_citations(db, citizen_id)]


@router.get("/count", response_model=CitationCountResponse)
async def get_citation_count(
    citizen_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    """Get the all-time number of citations of a citizen"""
    _require_citizen(db, citizen_id)
    return CitationCountResponse(citizen_id=citizen_id, total_citations=count_citations(db, citizen_id))


@router.get("/penalty-summary", response_model=PenaltySummaryResponse)
async def get_penalty_summary(
    citizen_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    """
    Get a citizen's penalty summary

    Includes totals, the penalty the next citation would carry and
    escalation warnings.
    """
    try:
        summary = penalty_summary(db, citizen_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    total = summary.total_citations
    return PenaltySummaryResponse(
        citizen_id=citizen_id,
        current_status=CurrentPenaltyStatus(
            total_citations=total,
            total_fines=float(summary.total_fines),
        ),
        next_citation_penalty=to_penalty_details(summary.next_penalty),
        warnings=PenaltyWarnings(
            approaching_criminal_record=(
                "WARNING: the next citation will result in a criminal record"
                if summary.next_penalty.creates_criminal_record else None
            ),
            escalation_notice=(
                f"The citizen has {total} previous citation(s)" if total > 0 else None
            ),
        ),
    )


@router.get("/{citation_id}", response_model=CitationResponse)
async def get_citizen_citation(
    citizen_id: int,
    citation_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    """Get a specific citation"""
    return to_citation_response(_require_citation_of(db, citizen_id, citation_id))


@router.post("", response_model=CitationFilingResponse, status_code=201)
def file_citation(
    citizen_id: int,
    request: CitationCreateRequest,
    response: Response,
    coordinator: CitationCoordinator = Depends(get_coordinator),
    user: CurrentUser = Depends(require_roles('Admin', 'PoliceOfficer'))
):
    """
    File a citation with automatic penalty

    The fine comes from the penalty ladder. From the third citation on, a
    criminal record is created in the same transaction and the response
    status is 202.
    """
    try:
        result = coordinator.file_citation(citizen_id, request.description)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        detail = {"message": "Internal server error while filing the citation"}
        if user.is_admin:
            detail["error"] = str(e)
        raise HTTPException(status_code=500, detail=detail)

    if result.criminal_record_created:
        response.status_code = 202

    return CitationFilingResponse(
        citation=to_citation_response(result.citation),
        penalty_details=to_penalty_details(result.penalty),
        automatic_actions=AutomaticActions(
            criminal_record_created=result.criminal_record_created,
            criminal_record_id=result.criminal_record.id if result.criminal_record else None,
            warning=CRIMINAL_RECORD_WARNING if result.criminal_record_created else None,
        ),
    )


@router.put("/{citation_id}", response_model=CitationResponse)
async def override_citation(
    citizen_id: int,
    citation_id: int,
    request: CitationUpdateRequest,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles('Admin'))
):
    """Administrative override (penalties are not recalculated)"""
    _require_citation_of(db, citizen_id, citation_id)

    try:
        updated = update_citation(db, citation_id, request.model_dump(exclude_unset=True))
    except NotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()

    return to_citation_response(updated)


@router.delete("/{citation_id}", response_model=CitationDeletedResponse)
async def remove_citation(
    citizen_id: int,
    citation_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles('Admin'))
):
    """Delete a citation"""
    _require_citation_of(db, citizen_id, citation_id)

    deleted = delete_citation(db, citation_id)
    db.commit()

    return CitationDeletedResponse(
        id=deleted.id,
        citizen_id=deleted.citizen_id,
        citizen_name=deleted.citizen_name,
        warning="NOTE: deleting citations changes the citizen's penalty history",
    )


# ============================================
# Search & Reporting Endpoints
# ============================================

@search_router.get("/search", response_model=List[CitationResponse])
async def search(
    term: Optional[str] = Query(None, description="Matches description or citizen name"),
    citizen_name: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    """Search citations (term or citizen_name required)"""
    try:
        results = search_citations(db, term=term, citizen_name=citizen_name, limit=limit, offset=offset)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [to_citation_response(c) for c in results]


@search_router.get("/all", response_model=List[CitationResponse])
async def get_all_citations(
    keyword: Optional[str] = Query(None, description="Filter by description keyword"),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    fine_amount_min: Optional[float] = Query(None, ge=0),
    fine_amount_max: Optional[float] = Query(None, ge=0),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*SUPERVISOR_ROLES))
):
    """Get all citations with optional filters"""
    citations = list_citations(
        db,
        keyword=keyword,
        date_from=date_from,
        date_to=date_to,
        fine_amount_min=fine_amount_min,
        fine_amount_max=fine_amount_max,
        limit=limit,
        offset=offset,
    )
    return [to_citation_response(c) for c in citations]


@search_router.get("/stats", response_model=CitationStatsResponse)
async def get_citation_stats(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*SUPERVISOR_ROLES))
):
    """Get general and monthly citation statistics"""
    return CitationStatsResponse(**citation_statistics(db))


@search_router.get("/top-offenders", response_model=List[TopOffenderResponse])
async def get_top_offenders(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*SUPERVISOR_ROLES))
):
    """Get the citizens with the most citations"""
    return [TopOffenderResponse(**row) for row in top_offenders(db, limit)]
