"""
Criminal Record Routes

Endpoints:
- GET    /api/citizens/{citizen_id}/records              - Citizen's records
- GET    /api/citizens/{citizen_id}/records/count        - Record count
- GET    /api/citizens/{citizen_id}/records/{record_id}  - Specific record
- POST   /api/citizens/{citizen_id}/records              - Direct entry
- PUT    /api/citizens/{citizen_id}/records/{record_id}  - Update record
- DELETE /api/citizens/{citizen_id}/records/{record_id}  - Delete record
- GET    /api/records/search                             - Search records
- GET    /api/records/all                                - Filtered listing
- GET    /api/records/stats                              - Statistics
- GET    /api/records/dangerous-locations                - Planets by crime count
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from interpolice.auth import ALL_ROLES, SUPERVISOR_ROLES, CurrentUser, require_roles
from interpolice.citizens import citizen_exists
from interpolice.database.database import get_db
from interpolice.errors import NotFoundError
from interpolice.models import (
    RecordCreateRequest,
    RecordUpdateRequest,
    RecordResponse,
    RecordCountResponse,
    RecordStatsResponse,
    DangerousLocationResponse,
)
from interpolice.records import (
    CriminalRecordEntry,
    count_records,
    get_record,
    list_citizen_records,
    list_records,
    search_records,
    create_record,
    update_record,
    delete_record,
    record_statistics,
    dangerous_locations,
)


router = APIRouter(prefix="/api/citizens/{citizen_id}/records", tags=["records"])
search_router = APIRouter(prefix="/api/records", tags=["records"])


def to_record_response(record: CriminalRecordEntry) -> RecordResponse:
    return RecordResponse(
        id=record.id,
        citizen_id=record.citizen_id,
        citizen_name=record.citizen_name,
        citizen_last_name=record.citizen_last_name,
        date=record.date,
        time=record.time,
        location=record.location,
        location_name=record.location_name,
        description=record.description,
        crime_type=record.crime_type,
    )


def _require_record_of(db: Session, citizen_id: int, record_id: int) -> CriminalRecordEntry:
    record = get_record(db, record_id)
    if record is None or record.citizen_id != citizen_id:
        raise HTTPException(status_code=404, detail="Criminal record not found")
    return record


@router.get("", response_model=List[RecordResponse])
async def get_citizen_records(
    citizen_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    """Get all criminal records of a citizen, newest first"""
    if not citizen_exists(db, citizen_id):
        raise HTTPException(status_code=404, detail=f"Citizen {citizen_id} does not exist")
    return [to_record_response(r) for r in list_citizen_records(db, citizen_id)]


@router.get("/count", response_model=RecordCountResponse)
async def get_record_count(
    citizen_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    if not citizen_exists(db, citizen_id):
        raise HTTPException(status_code=404, detail=f"Citizen {citizen_id} does not exist")
    return RecordCountResponse(citizen_id=citizen_id, total_records=count_records(db, citizen_id))


@router.get("/{record_id}", response_model=RecordResponse)
async def get_citizen_record(
    citizen_id: int,
    record_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    return to_record_response(_require_record_of(db, citizen_id, record_id))


@router.post("", response_model=RecordResponse, status_code=201)
async def enter_record(
    citizen_id: int,
    request: RecordCreateRequest,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles('Admin', 'CourtClerk'))
):
    """Direct administrative entry of a criminal record"""
    record = create_record(
        db,
        citizen_id=citizen_id,
        record_date=request.date,
        record_time=request.time,
        location=request.location,
        description=request.description,
        crime_type=request.crime_type,
    )
    db.commit()
    return to_record_response(record)


@router.put("/{record_id}", response_model=RecordResponse)
async def amend_record(
    citizen_id: int,
    record_id: int,
    request: RecordUpdateRequest,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles('Admin'))
):
    _require_record_of(db, citizen_id, record_id)

    try:
        record = update_record(db, record_id, request.model_dump(exclude_unset=True))
    except NotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()

    return to_record_response(record)


@router.delete("/{record_id}")
async def remove_record(
    citizen_id: int,
    record_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles('Admin'))
):
    _require_record_of(db, citizen_id, record_id)

    deleted = delete_record(db, record_id)
    db.commit()

    return {"id": deleted.id, "citizen_id": deleted.citizen_id, "deleted": True}


@search_router.get("/search", response_model=List[RecordResponse])
async def search(
    term: Optional[str] = Query(None),
    citizen_name: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*ALL_ROLES))
):
    """Search records (term or citizen_name required)"""
    try:
        results = search_records(db, term=term, citizen_name=citizen_name, limit=limit, offset=offset)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [to_record_response(r) for r in results]


@search_router.get("/all", response_model=List[RecordResponse])
async def get_all_records(
    crime_type: Optional[str] = Query(None),
    location: Optional[int] = Query(None, gt=0),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*SUPERVISOR_ROLES))
):
    records = list_records(
        db,
        crime_type=crime_type,
        location=location,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        offset=offset,
    )
    return [to_record_response(r) for r in records]


@search_router.get("/stats", response_model=RecordStatsResponse)
async def get_record_stats(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*SUPERVISOR_ROLES))
):
    return RecordStatsResponse(**record_statistics(db))


@search_router.get("/dangerous-locations", response_model=List[DangerousLocationResponse])
async def get_dangerous_locations(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_roles(*SUPERVISOR_ROLES))
):
    return [DangerousLocationResponse(**row) for row in dangerous_locations(db, limit)]
