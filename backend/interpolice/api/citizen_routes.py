"""
Citizen Routes - Identity registry endpoints

Endpoints:
- GET    /api/citizens            - List citizens
- GET    /api/citizens/search     - Search by name/nickname
- GET    /api/citizens/stats      - Registry statistics
- GET    /api/citizens/planets    - Planets
- GET    /api/citizens/statuses   - Citizen statuses
- GET    /api/citizens/{id}       - Specific citizen
- POST   /api/citizens            - Register citizen
- PUT    /api/citizens/{id}       - Update citizen
- DELETE /api/citizens/{id}       - Delete citizen
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from interpolice.auth import ALL_ROLES, SUPERVISOR_ROLES, CurrentUser, require_roles
from interpolice.citizens import (
    get_citizen,
    list_citizens,
    search_citizens,
    create_citizen,
    update_citizen,
    delete_citizen,
    citizen_statistics,
    list_planets,
    list_statuses,
    to_citizen_response,
)
from interpolice.database.database import get_db
from interpolice.models import (
    CitizenCreateRequest,
    CitizenUpdateRequest,
    CitizenResponse,
    PlanetResponse,
    StatusResponse,
    CitizenStatsResponse,
)


router = APIRouter(prefix="/api/citizens", tags=["citizens"])


@router.get("", response_model=List[CitizenResponse])
async def get_citizens(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    """Get paginated list of citizens"""
    return [to_citizen_response(c) for c in list_citizens(db, limit, offset)]


@router.get("/search", response_model=List[CitizenResponse])
async def search(
    term: Optional[str] = Query(None, description="Matches names and nickname"),
    status_id: Optional[int] = Query(None, gt=0),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    """Search citizens"""
    if not term and status_id is None:
        raise HTTPException(status_code=400, detail="At least one search criterion (term or status_id) is required")
    return [to_citizen_response(c) for c in search_citizens(db, term, status_id, limit, offset)]


@router.get("/stats", response_model=CitizenStatsResponse)
async def get_stats(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*SUPERVISOR_ROLES))
):
    """Get registry statistics by status"""
    return CitizenStatsResponse(**citizen_statistics(db))


@router.get("/planets", response_model=List[PlanetResponse])
async def get_planets(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    return [PlanetResponse(id=p.id, planet_name=p.planet_name) for p in list_planets(db)]


@router.get("/statuses", response_model=List[StatusResponse])
async def get_statuses(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    return [
        StatusResponse(id=s.id, status_name=s.status_name, description=s.description)
        for s in list_statuses(db)
    ]


@router.get("/{citizen_id}", response_model=CitizenResponse)
async def get_one(
    citizen_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    """Get a specific citizen"""
    return to_citizen_response(get_citizen(db, citizen_id))


@router.post("", response_model=CitizenResponse, status_code=201)
async def register(
    request: CitizenCreateRequest,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles('Admin', 'CourtClerk', 'PoliceOfficer'))
):
    """Register a citizen"""
    citizen = create_citizen(db, request)
    db.commit()
    return to_citizen_response(citizen)


@router.put("/{citizen_id}", response_model=CitizenResponse)
async def update(
    citizen_id: int,
    request: CitizenUpdateRequest,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles('Admin', 'CourtClerk'))
):
    """Update a citizen"""
    citizen = update_citizen(db, citizen_id, request)
    db.commit()
    return to_citizen_response(citizen)


@router.delete("/{citizen_id}")
async def delete(
    citizen_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles('Admin'))
):
    """Delete a citizen together with their citations and records"""
    citizen = delete_citizen(db, citizen_id)
    db.commit()
    return {"id": citizen_id, "full_name": citizen.full_name, "deleted": True}
