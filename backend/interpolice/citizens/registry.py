"""
Citizen Registry

Data access for citizens and their reference data (planets, statuses).
The citation coordinator only relies on citizen_exists(); everything else
backs the registry endpoints.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from interpolice.database.models import Citizen, Planet, Status
from interpolice.errors import ConflictError, NotFoundError
from interpolice.models.citizen import (
    CitizenCreateRequest,
    CitizenUpdateRequest,
    CitizenResponse,
)


logger = logging.getLogger(__name__)


def citizen_exists(db: Session, citizen_id: int) -> bool:
    """Check whether a citizen with this identifier exists"""
    return db.query(Citizen.id).filter(Citizen.id == citizen_id).first() is not None


def planet_exists(db: Session, planet_id: int) -> bool:
    return db.get(Planet, planet_id) is not None


def status_exists(db: Session, status_id: int) -> bool:
    return db.get(Status, status_id) is not None


def to_citizen_response(citizen: Citizen) -> CitizenResponse:
    return CitizenResponse(
        id=citizen.id,
        full_name=citizen.full_name,
        last_name=citizen.last_name,
        nick_name=citizen.nick_name,
        birth_date=citizen.birth_date,
        origin_planet=citizen.origin_planet,
        origin_planet_name=citizen.origin.planet_name if citizen.origin else None,
        residence_planet=citizen.residence_planet,
        residence_planet_name=citizen.residence.planet_name if citizen.residence else None,
        avatar_url=citizen.avatar_url or "",
        qr_code=citizen.qr_code,
        status_id=citizen.status_id,
        status_name=citizen.status.status_name if citizen.status else None,
    )


def get_citizen(db: Session, citizen_id: int) -> Citizen:
    """Fetch a citizen or raise NotFoundError"""
    citizen = db.get(Citizen, citizen_id)
    if citizen is None:
        raise NotFoundError("Citizen", citizen_id)
    return citizen


def list_citizens(db: Session, limit: int = 50, offset: int = 0) -> List[Citizen]:
    return db.query(Citizen)\
        .order_by(Citizen.full_name, Citizen.id)\
        .limit(limit)\
        .offset(offset)\
        .all()


def search_citizens(
    db: Session,
    term: Optional[str] = None,
    status_id: Optional[int] = None,
    limit: int = 50,
    offset: int = 0
) -> List[Citizen]:
    """Search by full name, last name or nickname, optionally by status"""
    query = db.query(Citizen)

    if term:
        pattern = f"%{term}%"
        query = query.filter(or_(
            Citizen.full_name.ilike(pattern),
            Citizen.last_name.ilike(pattern),
            Citizen.nick_name.ilike(pattern),
        ))
    if status_id is not None:
        query = query.filter(Citizen.status_id == status_id)

    return query.order_by(Citizen.full_name, Citizen.id)\
        .limit(limit)\
        .offset(offset)\
        .all()


def _check_references(db: Session, origin_planet=None, residence_planet=None, status_id=None):
    for planet_id in (origin_planet, residence_planet):
        if planet_id is not None and not planet_exists(db, planet_id):
            raise NotFoundError("Planet", planet_id)
    if status_id is not None and not status_exists(db, status_id):
        raise NotFoundError("Status", status_id)


def _check_unique(db: Session, nick_name=None, qr_code=None, exclude_id=None):
    if nick_name:
        query = db.query(Citizen.id).filter(Citizen.nick_name == nick_name)
        if exclude_id is not None:
            query = query.filter(Citizen.id != exclude_id)
        if query.first():
            raise ConflictError(f"Nickname '{nick_name}' is already registered")
    if qr_code:
        query = db.query(Citizen.id).filter(Citizen.qr_code == qr_code)
        if exclude_id is not None:
            query = query.filter(Citizen.id != exclude_id)
        if query.first():
            raise ConflictError(f"QR code '{qr_code}' is already registered")


def create_citizen(db: Session, data: CitizenCreateRequest) -> Citizen:
    """Register a citizen (caller commits)"""
    _check_references(db, data.origin_planet, data.residence_planet, data.status_id)
    _check_unique(db, data.nick_name, data.qr_code)

    citizen = Citizen(**data.model_dump())
    db.add(citizen)
    db.flush()

    logger.info("Citizen registered: %s (%s)", citizen.id, citizen.full_name)
    return citizen


def update_citizen(db: Session, citizen_id: int, data: CitizenUpdateRequest) -> Citizen:
    """Apply a partial update (caller commits)"""
    citizen = get_citizen(db, citizen_id)
    changes = data.model_dump(exclude_unset=True)

    _check_references(
        db,
        changes.get('origin_planet'),
        changes.get('residence_planet'),
        changes.get('status_id'),
    )
    _check_unique(db, changes.get('nick_name'), changes.get('qr_code'), exclude_id=citizen_id)

    for field_name, value in changes.items():
        setattr(citizen, field_name, value)
    db.flush()
    db.refresh(citizen)
    return citizen


def delete_citizen(db: Session, citizen_id: int) -> Citizen:
    """Delete a citizen; their citations and records cascade (caller commits)"""
    citizen = get_citizen(db, citizen_id)
    db.delete(citizen)
    db.flush()

    logger.warning("Citizen deleted: %s", citizen_id)
    return citizen


def citizen_statistics(db: Session) -> Dict:
    rows = db.query(Status.status_name, func.count(Citizen.id))\
        .outerjoin(Citizen, Citizen.status_id == Status.id)\
        .group_by(Status.status_name)\
        .all()

    by_status = {name: count for name, count in rows}
    return {
        'total_citizens': sum(by_status.values()),
        'by_status': by_status,
    }


def list_planets(db: Session) -> List[Planet]:
    return db.query(Planet).order_by(Planet.id).all()


def list_statuses(db: Session) -> List[Status]:
    return db.query(Status).order_by(Status.id).all()
