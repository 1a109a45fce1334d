"""
Citation Filing Coordinator

Files a citation and, when the penalty ladder demands it, the criminal
record that goes with it, as one unit of work:

1. Confirm the citizen exists (NotFoundError, no transaction opened)
2. Inside a write-locked transaction, count the citizen's citations
3. Calculate the penalty for count + 1
4. Insert the citation and, if flagged, one criminal record
5. Commit; any failure rolls both rows back
6. Re-read the persisted citation and return it with the penalty

Concurrent filings for the same citizen are serialized on step 2-5: the
citizen row is locked with SELECT ... FOR UPDATE on server databases, and
SQLite transactions take the database write lock at BEGIN. Without this
two requests could read the same count and both skip the threshold.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session, sessionmaker

from interpolice.citizens.registry import citizen_exists
from interpolice.config import get_config
from interpolice.database.database import SessionLocal, transaction_scope
from interpolice.database.models import Citation, Citizen, CriminalRecord
from interpolice.errors import NotFoundError

from .penalty_calculator import PenaltyOutcome, calculate_penalty
from .queries import CitationRecord, count_citations, get_citation


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutomaticRecord:
    """Criminal record created by citation escalation"""
    id: int
    citizen_id: int
    description: str
    crime_type: str
    location: int


@dataclass(frozen=True)
class CitationFilingResult:
    """Outcome of a successful filing"""
    citation: CitationRecord
    penalty: PenaltyOutcome
    criminal_record_created: bool
    criminal_record: Optional[AutomaticRecord] = None


class CitationCoordinator:
    """
    Coordinate citation filing and automatic criminal record creation

    Holds no per-request state: every call opens its own session from the
    factory and releases it before returning.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        default_location_id: Optional[int] = None,
        crime_type: Optional[str] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Initialize coordinator

        Args:
            session_factory: Session factory (default: SessionLocal)
            default_location_id: Planet id for automatic records
                (default: interpolice.jurisdiction.defaultLocationId)
            crime_type: Crime type label for automatic records
                (default: interpolice.jurisdiction.autoRecordCrimeType)
            clock: Wall-clock source for citation and record timestamps
        """
        jurisdiction = get_config().get_jurisdiction_config()

        self.session_factory = session_factory or SessionLocal
        self.default_location_id = (
            default_location_id
            if default_location_id is not None
            else jurisdiction.get('defaultLocationId', 1)
        )
        self.crime_type = crime_type or jurisdiction.get(
            'autoRecordCrimeType', 'Accumulated minor citations'
        )
        self.clock = clock

    def file_citation(self, citizen_id: int, description: str) -> CitationFilingResult:
        """
        File a citation with its automatic penalty

        Args:
            citizen_id: Citizen being cited
            description: Free-text description of the infraction

        Returns:
            CitationFilingResult with the persisted citation and penalty

        Raises:
            NotFoundError: citizen does not exist (nothing written)
            Exception: any storage error, after the transaction rolled back
        """
        with self.session_factory() as db:
            if not citizen_exists(db, citizen_id):
                raise NotFoundError("Citizen", citizen_id)

        try:
            with transaction_scope(self.session_factory, write_lock=True) as db:
                citation_id, penalty, record = self._write_citation(db, citizen_id, description)
        except NotFoundError:
            raise
        except BaseException:
            logger.exception(
                "Citation filing for citizen %s rolled back", citizen_id
            )
            raise

        with self.session_factory() as db:
            citation = get_citation(db, citation_id)

        logger.info(
            "Citation %s filed for citizen %s (#%d, %s)",
            citation_id, citizen_id, penalty.citation_number, penalty.tier.value
        )
        if record is not None:
            logger.warning(
                "Criminal record %s created for citizen %s after %d citations",
                record.id, citizen_id, penalty.citation_number
            )

        return CitationFilingResult(
            citation=citation,
            penalty=penalty,
            criminal_record_created=record is not None,
            criminal_record=record,
        )

    def _write_citation(self, db: Session, citizen_id: int, description: str):
        """Count, calculate and insert inside the caller's transaction"""
        locked = db.query(Citizen.id)\
            .filter(Citizen.id == citizen_id)\
            .with_for_update()\
            .first()
        if locked is None:
            # Deleted between the existence check and the lock
            raise NotFoundError("Citizen", citizen_id)

        prior = count_citations(db, citizen_id)
        penalty = calculate_penalty(prior)
        now = self.clock()

        citation = Citation(
            citizen_id=citizen_id,
            date=now,
            description=description,
            fine_amount=penalty.fine_amount,
        )
        db.add(citation)
        db.flush()

        record = None
        if penalty.creates_criminal_record:
            row = self._build_criminal_record(citizen_id, description, penalty, now)
            db.add(row)
            db.flush()
            record = AutomaticRecord(
                id=row.id,
                citizen_id=row.citizen_id,
                description=row.description,
                crime_type=row.crime_type,
                location=row.location,
            )

        return citation.id, penalty, record

    def _build_criminal_record(
        self,
        citizen_id: int,
        description: str,
        penalty: PenaltyOutcome,
        now: datetime
    ) -> CriminalRecord:
        return CriminalRecord(
            citizen_id=citizen_id,
            date=now.date(),
            time=now.time().replace(microsecond=0),
            location=self.default_location_id,
            description=(
                f"Automatic record for accumulating {penalty.citation_number} minor "
                f"citations. Latest infraction: {description}"
            ),
            crime_type=self.crime_type,
        )


# Global instance
_coordinator: Optional[CitationCoordinator] = None


def init_citation_coordinator(session_factory: Optional[sessionmaker] = None, **kwargs) -> CitationCoordinator:
    """Initialize global citation coordinator"""
    global _coordinator
    _coordinator = CitationCoordinator(session_factory, **kwargs)
    return _coordinator


def get_citation_coordinator() -> CitationCoordinator:
    """Get global citation coordinator (created on first use)"""
    global _coordinator
    if _coordinator is None:
        _coordinator = CitationCoordinator()
    return _coordinator
