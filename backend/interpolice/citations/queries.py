"""
Citation Queries

Read-side and administrative data access for citations. Filing a new
citation goes through CitationCoordinator; nothing here re-runs the penalty
ladder except penalty_summary(), which only previews the next outcome.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Dict, Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from interpolice.citizens.registry import citizen_exists
from interpolice.database.models import Citation, Citizen
from interpolice.errors import NotFoundError

from .penalty_calculator import PenaltyOutcome, calculate_penalty


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CitationRecord:
    """Persisted citation joined with its citizen's name"""
    id: int
    citizen_id: int
    citizen_name: Optional[str]
    citizen_last_name: Optional[str]
    citizen_qr_code: Optional[str]
    date: datetime
    description: str
    fine_amount: Decimal

    @classmethod
    def from_row(cls, citation: Citation) -> "CitationRecord":
        citizen = citation.citizen
        return cls(
            id=citation.id,
            citizen_id=citation.citizen_id,
            citizen_name=citizen.full_name if citizen else None,
            citizen_last_name=citizen.last_name if citizen else None,
            citizen_qr_code=citizen.qr_code if citizen else None,
            date=citation.date,
            description=citation.description,
            fine_amount=Decimal(citation.fine_amount).quantize(Decimal("0.01")),
        )


@dataclass(frozen=True)
class PenaltySummary:
    """Citation history of a citizen plus the next citation's outcome"""
    citizen_id: int
    total_citations: int
    total_fines: Decimal
    next_penalty: PenaltyOutcome


def count_citations(db: Session, citizen_id: int) -> int:
    """All-time number of citations for a citizen"""
    return db.query(func.count(Citation.id))\
        .filter(Citation.citizen_id == citizen_id)\
        .scalar() or 0


def get_citation(db: Session, citation_id: int) -> Optional[CitationRecord]:
    """Fetch a citation by id"""
    citation = db.get(Citation, citation_id)
    return CitationRecord.from_row(citation) if citation else None


def list_citizen_citations(db: Session, citizen_id: int) -> List[CitationRecord]:
    """All citations of a citizen, newest first"""
    citations = db.query(Citation)\
        .filter(Citation.citizen_id == citizen_id)\
        .order_by(Citation.date.desc(), Citation.id.desc())\
        .all()
    return [CitationRecord.from_row(c) for c in citations]


def list_citations(
    db: Session,
    keyword: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    fine_amount_min: Optional[float] = None,
    fine_amount_max: Optional[float] = None,
    limit: Optional[int] = None,
    offset: int = 0
) -> List[CitationRecord]:
    """All citations matching the given filters, newest first"""
    query = db.query(Citation)

    if keyword:
        query = query.filter(Citation.description.ilike(f"%{keyword}%"))
    if date_from is not None:
        query = query.filter(Citation.date >= date_from)
    if date_to is not None:
        query = query.filter(Citation.date <= date_to)
    if fine_amount_min is not None:
        query = query.filter(Citation.fine_amount >= fine_amount_min)
    if fine_amount_max is not None:
        query = query.filter(Citation.fine_amount <= fine_amount_max)

    query = query.order_by(Citation.date.desc(), Citation.id.desc())
    if limit is not None:
        query = query.limit(limit).offset(offset)

    return [CitationRecord.from_row(c) for c in query.all()]


def search_citations(
    db: Session,
    term: Optional[str] = None,
    citizen_name: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0
) -> List[CitationRecord]:
    """
    Search citations by a general term and/or citizen name

    term matches the description or the citizen's names; citizen_name
    matches the citizen's names only.
    """
    if not term and not citizen_name:
        raise ValueError("At least one search criterion (term or citizen_name) is required")

    query = db.query(Citation).join(Citizen, Citation.citizen_id == Citizen.id)

    if term:
        pattern = f"%{term}%"
        query = query.filter(or_(
            Citation.description.ilike(pattern),
            Citizen.full_name.ilike(pattern),
            Citizen.last_name.ilike(pattern),
        ))
    if citizen_name:
        pattern = f"%{citizen_name}%"
        query = query.filter(or_(
            Citizen.full_name.ilike(pattern),
            Citizen.last_name.ilike(pattern),
        ))

    query = query.order_by(Citation.date.desc(), Citation.id.desc())
    if limit is not None:
        query = query.limit(limit).offset(offset)

    return [CitationRecord.from_row(c) for c in query.all()]


def update_citation(
    db: Session,
    citation_id: int,
    changes: Dict[str, Any]
) -> CitationRecord:
    """
    Administrative override of a citation (caller commits)

    Does not recompute the penalty ladder or touch criminal records.
    """
    citation = db.get(Citation, citation_id)
    if citation is None:
        raise NotFoundError("Citation", citation_id)

    new_citizen_id = changes.get('citizen_id')
    if new_citizen_id is not None and not citizen_exists(db, new_citizen_id):
        raise NotFoundError("Citizen", new_citizen_id)

    for field_name in ('citizen_id', 'description', 'fine_amount'):
        if changes.get(field_name) is not None:
            value = changes[field_name]
            if field_name == 'fine_amount':
                value = Decimal(str(value)).quantize(Decimal("0.01"))
            setattr(citation, field_name, value)

    db.flush()
    db.refresh(citation)

    logger.info("Citation %s updated by administrative override", citation_id)
    return CitationRecord.from_row(citation)


def delete_citation(db: Session, citation_id: int) -> CitationRecord:
    """Delete a citation and return what was deleted (caller commits)"""
    citation = db.get(Citation, citation_id)
    if citation is None:
        raise NotFoundError("Citation", citation_id)

    snapshot = CitationRecord.from_row(citation)
    db.delete(citation)
    db.flush()

    logger.warning(
        "Citation %s of citizen %s deleted; the citizen's penalty history changes",
        citation_id, snapshot.citizen_id
    )
    return snapshot


def penalty_summary(db: Session, citizen_id: int) -> PenaltySummary:
    """Current citation totals and the outcome the next citation would carry"""
    if not citizen_exists(db, citizen_id):
        raise NotFoundError("Citizen", citizen_id)

    total = count_citations(db, citizen_id)
    total_fines = db.query(func.coalesce(func.sum(Citation.fine_amount), 0))\
        .filter(Citation.citizen_id == citizen_id)\
        .scalar()

    return PenaltySummary(
        citizen_id=citizen_id,
        total_citations=total,
        total_fines=Decimal(total_fines or 0).quantize(Decimal("0.01")),
        next_penalty=calculate_penalty(total),
    )


def citation_statistics(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    General and monthly citation statistics

    Monthly buckets cover the last 12 months, newest first.
    """
    now = now or datetime.now()

    total, citizens, fine_sum, fine_avg, fine_min, fine_max = db.query(
        func.count(Citation.id),
        func.count(func.distinct(Citation.citizen_id)),
        func.sum(Citation.fine_amount),
        func.avg(Citation.fine_amount),
        func.min(Citation.fine_amount),
        func.max(Citation.fine_amount),
    ).one()

    general = {
        'total_citations': total or 0,
        'total_citizens_with_citations': citizens or 0,
        'total_fines_amount': float(fine_sum or 0),
        'average_fine_amount': round(float(fine_avg or 0), 2),
        'min_fine_amount': float(fine_min or 0),
        'max_fine_amount': float(fine_max or 0),
    }

    # Bucketed in Python so the query stays portable across dialects
    recent = db.query(Citation.date, Citation.fine_amount)\
        .filter(Citation.date >= now - timedelta(days=365))\
        .order_by(Citation.date.desc())\
        .all()

    months: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    for cited_at, fine in recent:
        key = cited_at.strftime("%Y-%m")
        bucket = months.setdefault(key, {'month': key, 'citations_count': 0, 'month_fines_total': 0.0})
        bucket['citations_count'] += 1
        bucket['month_fines_total'] += float(fine or 0)

    return {'general': general, 'by_month': list(months.values())}


def top_offenders(db: Session, limit: int = 10) -> List[Dict[str, Any]]:
    """Citizens with the most citations, ties broken by total fines"""
    total_citations = func.count(Citation.id).label('total_citations')
    total_fines = func.coalesce(func.sum(Citation.fine_amount), 0).label('total_fines')

    rows = db.query(
        Citizen.id,
        Citizen.full_name,
        Citizen.last_name,
        Citizen.qr_code,
        total_citations,
        total_fines,
        func.max(Citation.date).label('last_citation_date'),
    )\
        .join(Citation, Citation.citizen_id == Citizen.id)\
        .group_by(Citizen.id, Citizen.full_name, Citizen.last_name, Citizen.qr_code)\
        .order_by(total_citations.desc(), total_fines.desc())\
        .limit(limit)\
        .all()

    return [
        {
            'id': row.id,
            'full_name': row.full_name,
            'last_name': row.last_name,
            'qr_code': row.qr_code,
            'total_citations': row.total_citations,
            'total_fines': float(row.total_fines or 0),
            'last_citation_date': row.last_citation_date,
        }
        for row in rows
    ]
