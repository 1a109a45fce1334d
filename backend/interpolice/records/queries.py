"""
Criminal Record Queries

Direct administrative entry and reporting for criminal records. Records
created by citation escalation are written by CitationCoordinator and read
back through the same functions.
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from interpolice.citizens.registry import citizen_exists, planet_exists
from interpolice.config import get_config
from interpolice.database.models import Citizen, CriminalRecord, Planet
from interpolice.errors import NotFoundError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CriminalRecordEntry:
    """Persisted criminal record joined with citizen and planet names"""
    id: int
    citizen_id: int
    citizen_name: Optional[str]
    citizen_last_name: Optional[str]
    date: date
    time: time
    location: int
    location_name: Optional[str]
    description: str
    crime_type: str

    @classmethod
    def from_row(cls, record: CriminalRecord) -> "CriminalRecordEntry":
        citizen = record.citizen
        return cls(
            id=record.id,
            citizen_id=record.citizen_id,
            citizen_name=citizen.full_name if citizen else None,
            citizen_last_name=citizen.last_name if citizen else None,
            date=record.date,
            time=record.time,
            location=record.location,
            location_name=record.planet.planet_name if record.planet else None,
            description=record.description,
            crime_type=record.crime_type,
        )


def count_records(db: Session, citizen_id: int) -> int:
    return db.query(func.count(CriminalRecord.id))\
        .filter(CriminalRecord.citizen_id == citizen_id)\
        .scalar() or 0


def get_record(db: Session, record_id: int) -> Optional[CriminalRecordEntry]:
    record = db.get(CriminalRecord, record_id)
    return CriminalRecordEntry.from_row(record) if record else None


def list_citizen_records(db: Session, citizen_id: int) -> List[CriminalRecordEntry]:
    """All records of a citizen, newest first"""
    records = db.query(CriminalRecord)\
        .filter(CriminalRecord.citizen_id == citizen_id)\
        .order_by(CriminalRecord.date.desc(), CriminalRecord.time.desc(), CriminalRecord.id.desc())\
        .all()
    return [CriminalRecordEntry.from_row(r) for r in records]


def list_records(
    db: Session,
    crime_type: Optional[str] = None,
    location: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    limit: Optional[int] = None,
    offset: int = 0
) -> List[CriminalRecordEntry]:
    query = db.query(CriminalRecord)

    if crime_type:
        query = query.filter(CriminalRecord.crime_type.ilike(f"%{crime_type}%"))
    if location is not None:
        query = query.filter(CriminalRecord.location == location)
    if date_from is not None:
        query = query.filter(CriminalRecord.date >= date_from)
    if date_to is not None:
        query = query.filter(CriminalRecord.date <= date_to)

    query = query.order_by(CriminalRecord.date.desc(), CriminalRecord.id.desc())
    if limit is not None:
        query = query.limit(limit).offset(offset)

    return [CriminalRecordEntry.from_row(r) for r in query.all()]


def search_records(
    db: Session,
    term: Optional[str] = None,
    citizen_name: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0
) -> List[CriminalRecordEntry]:
    """Search by description/crime type/citizen name"""
    if not term and not citizen_name:
        raise ValueError("At least one search criterion (term or citizen_name) is required")

    query = db.query(CriminalRecord).join(Citizen, CriminalRecord.citizen_id == Citizen.id)

    if term:
        pattern = f"%{term}%"
        query = query.filter(or_(
            CriminalRecord.description.ilike(pattern),
            CriminalRecord.crime_type.ilike(pattern),
            Citizen.full_name.ilike(pattern),
            Citizen.last_name.ilike(pattern),
        ))
    if citizen_name:
        pattern = f"%{citizen_name}%"
        query = query.filter(or_(
            Citizen.full_name.ilike(pattern),
            Citizen.last_name.ilike(pattern),
        ))

    query = query.order_by(CriminalRecord.date.desc(), CriminalRecord.id.desc())
    if limit is not None:
        query = query.limit(limit).offset(offset)

    return [CriminalRecordEntry.from_row(r) for r in query.all()]


def create_record(
    db: Session,
    citizen_id: int,
    record_date: date,
    record_time: time,
    location: int,
    description: str,
    crime_type: Optional[str] = None
) -> CriminalRecordEntry:
    """Direct entry of a criminal record (caller commits)"""
    if not citizen_exists(db, citizen_id):
        raise NotFoundError("Citizen", citizen_id)
    if not planet_exists(db, location):
        raise NotFoundError("Planet", location)

    record = CriminalRecord(
        citizen_id=citizen_id,
        date=record_date,
        time=record_time,
        location=location,
        description=description,
        crime_type=crime_type or get_config().get(
            'interpolice.jurisdiction.manualRecordCrimeType', 'Minor offense'
        ),
    )
    db.add(record)
    db.flush()
    db.refresh(record)

    logger.info("Criminal record %s entered for citizen %s", record.id, citizen_id)
    return CriminalRecordEntry.from_row(record)


def update_record(db: Session, record_id: int, changes: Dict[str, Any]) -> CriminalRecordEntry:
    """Partial update (caller commits)"""
    record = db.get(CriminalRecord, record_id)
    if record is None:
        raise NotFoundError("Criminal record", record_id)

    if changes.get('citizen_id') is not None and not citizen_exists(db, changes['citizen_id']):
        raise NotFoundError("Citizen", changes['citizen_id'])
    if changes.get('location') is not None and not planet_exists(db, changes['location']):
        raise NotFoundError("Planet", changes['location'])

    for field_name, value in changes.items():
        if value is not None:
            setattr(record, field_name, value)

    db.flush()
    db.refresh(record)
    return CriminalRecordEntry.from_row(record)


def delete_record(db: Session, record_id: int) -> CriminalRecordEntry:
    """Delete a record and return what was deleted (caller commits)"""
    record = db.get(CriminalRecord, record_id)
    if record is None:
        raise NotFoundError("Criminal record", record_id)

    snapshot = CriminalRecordEntry.from_row(record)
    db.delete(record)
    db.flush()

    logger.warning("Criminal record %s of citizen %s deleted", record_id, snapshot.citizen_id)
    return snapshot


def record_statistics(db: Session) -> Dict[str, Any]:
    total, citizens = db.query(
        func.count(CriminalRecord.id),
        func.count(func.distinct(CriminalRecord.citizen_id)),
    ).one()

    by_type = dict(
        db.query(CriminalRecord.crime_type, func.count(CriminalRecord.id))
        .group_by(CriminalRecord.crime_type)
        .all()
    )

    auto_type = get_config().get(
        'interpolice.jurisdiction.autoRecordCrimeType', 'Accumulated minor citations'
    )

    return {
        'total_records': total or 0,
        'total_citizens_with_records': citizens or 0,
        'by_crime_type': by_type,
        'automatic_records': by_type.get(auto_type, 0),
    }


def dangerous_locations(db: Session, limit: int = 10) -> List[Dict[str, Any]]:
    """Planets with the most recorded crimes"""
    total_crimes = func.count(CriminalRecord.id).label('total_crimes')

    rows = db.query(
        CriminalRecord.location,
        Planet.planet_name,
        total_crimes,
        func.count(func.distinct(CriminalRecord.citizen_id)).label('unique_criminals'),
    )\
        .join(Planet, CriminalRecord.location == Planet.id)\
        .group_by(CriminalRecord.location, Planet.planet_name)\
        .order_by(total_crimes.desc())\
        .limit(limit)\
        .all()

    return [
        {
            'location': row.location,
            'location_name': row.planet_name,
            'total_crimes': row.total_crimes,
            'unique_criminals': row.unique_criminals,
        }
        for row in rows
    ]
