"""
Citation Coordinator Tests

Tests for atomic citation filing: penalty assignment, automatic criminal
records, rollback on failure and resource release.
"""

import asyncio
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import event, func

from interpolice.citations import CitationCoordinator, PenaltyTier, init_citation_coordinator
from interpolice.database.database import transaction_scope
from interpolice.database.models import Citation, CriminalRecord
from interpolice.errors import NotFoundError

from conftest import FIXED_NOW, add_citizen


def count_rows(session_factory, model, citizen_id=None):
    with session_factory() as db:
        query = db.query(func.count(model.id))
        if citizen_id is not None:
            query = query.filter(model.citizen_id == citizen_id)
        return query.scalar()


def records_of(session_factory, citizen_id):
    with session_factory() as db:
        return db.query(CriminalRecord)\
            .filter(CriminalRecord.citizen_id == citizen_id)\
            .order_by(CriminalRecord.id)\
            .all()


# ============================================
# Filing
# ============================================

class TestFiling:
    """Test file_citation() outcomes"""

    def test_first_citation(self, coordinator, session_factory, citizen_id):
        result = coordinator.file_citation(citizen_id, "Jaywalking")

        assert result.penalty.citation_number == 1
        assert result.penalty.tier == PenaltyTier.FIRST_CITATION
        assert result.criminal_record_created is False
        assert result.criminal_record is None

        assert result.citation.id is not None
        assert result.citation.citizen_id == citizen_id
        assert result.citation.description == "Jaywalking"
        assert result.citation.fine_amount == Decimal("400.00")
        assert result.citation.date == FIXED_NOW
        assert result.citation.citizen_name == "Marta"

        assert count_rows(session_factory, Citation, citizen_id) == 1
        assert count_rows(session_factory, CriminalRecord, citizen_id) == 0

    def test_second_citation(self, coordinator, session_factory, citizen_id):
        coordinator.file_citation(citizen_id, "Jaywalking")
        result = coordinator.file_citation(citizen_id, "Littering")

        assert result.penalty.citation_number == 2
        assert result.penalty.civic_work_days == 2
        assert result.citation.fine_amount == Decimal("400.00")
        assert result.criminal_record_created is False
        assert count_rows(session_factory, CriminalRecord, citizen_id) == 0

    def test_third_citation_creates_record(self, coordinator, session_factory, citizen_id):
        coordinator.file_citation(citizen_id, "Jaywalking")
        coordinator.file_citation(citizen_id, "Littering")
        result = coordinator.file_citation(citizen_id, "Loud music after hours")

        assert result.penalty.citation_number == 3
        assert result.penalty.jail_days == 8
        assert result.citation.fine_amount == Decimal("0.00")
        assert result.criminal_record_created is True

        records = records_of(session_factory, citizen_id)
        assert len(records) == 1
        record = records[0]
        assert result.criminal_record.id == record.id
        assert record.crime_type == "Accumulated minor citations"
        assert record.location == 1
        assert record.description == (
            "Automatic record for accumulating 3 minor citations. "
            "Latest infraction: Loud music after hours"
        )
        assert record.date == FIXED_NOW.date()
        assert record.time == FIXED_NOW.time().replace(microsecond=0)

    def test_each_escalated_citation_adds_one_record(self, coordinator, session_factory, citizen_id):
        for i in range(6):
            coordinator.file_citation(citizen_id, f"Infraction {i}")

        assert count_rows(session_factory, Citation, citizen_id) == 6
        assert count_rows(session_factory, CriminalRecord, citizen_id) == 4

    def test_citizens_are_counted_independently(self, coordinator, session_factory, citizen_id):
        other_id = add_citizen(session_factory, full_name="Lio", last_name="Vega")
        coordinator.file_citation(citizen_id, "Jaywalking")
        coordinator.file_citation(citizen_id, "Littering")

        result = coordinator.file_citation(other_id, "Jaywalking")

        assert result.penalty.citation_number == 1
        assert result.criminal_record_created is False

    def test_configured_location_and_crime_type(self, session_factory, citizen_id):
        coordinator = CitationCoordinator(
            session_factory,
            default_location_id=2,
            crime_type="Habitual offender",
            clock=lambda: FIXED_NOW,
        )
        for i in range(3):
            result = coordinator.file_citation(citizen_id, f"Infraction {i}")

        assert result.criminal_record.location == 2
        assert result.criminal_record.crime_type == "Habitual offender"

    def test_clock_sets_citation_date(self, session_factory, citizen_id):
        moment = datetime(2025, 1, 2, 3, 4, 5)
        coordinator = CitationCoordinator(session_factory, clock=lambda: moment)

        result = coordinator.file_citation(citizen_id, "Jaywalking")

        assert result.citation.date == moment


# ============================================
# Failure Handling
# ============================================

class TestFailureHandling:
    """Nothing is persisted when filing fails"""

    def test_unknown_citizen(self, coordinator, session_factory):
        with pytest.raises(NotFoundError) as exc_info:
            coordinator.file_citation(9999, "Jaywalking")

        assert "9999" in str(exc_info.value)
        assert count_rows(session_factory, Citation) == 0
        assert count_rows(session_factory, CriminalRecord) == 0

    def test_record_failure_rolls_back_citation(self, coordinator, session_factory, citizen_id):
        coordinator.file_citation(citizen_id, "Jaywalking")
        coordinator.file_citation(citizen_id, "Littering")

        def fail_insert(mapper, connection, target):
            raise RuntimeError("simulated record insert failure")

        event.listen(CriminalRecord, "before_insert", fail_insert)
        try:
            with pytest.raises(RuntimeError, match="simulated record insert failure"):
                coordinator.file_citation(citizen_id, "Loud music after hours")
        finally:
            event.remove(CriminalRecord, "before_insert", fail_insert)

        assert count_rows(session_factory, Citation, citizen_id) == 2
        assert count_rows(session_factory, CriminalRecord, citizen_id) == 0

    def test_filing_after_failure_uses_committed_count(self, coordinator, session_factory, citizen_id):
        coordinator.file_citation(citizen_id, "Jaywalking")
        coordinator.file_citation(citizen_id, "Littering")

        def fail_insert(mapper, connection, target):
            raise RuntimeError("simulated record insert failure")

        event.listen(CriminalRecord, "before_insert", fail_insert)
        try:
            with pytest.raises(RuntimeError):
                coordinator.file_citation(citizen_id, "Loud music after hours")
        finally:
            event.remove(CriminalRecord, "before_insert", fail_insert)

        result = coordinator.file_citation(citizen_id, "Loud music after hours")

        assert result.penalty.citation_number == 3
        assert result.criminal_record_created is True

    def test_connections_released(self, engine, coordinator, citizen_id):
        coordinator.file_citation(citizen_id, "Jaywalking")
        with pytest.raises(NotFoundError):
            coordinator.file_citation(9999, "Jaywalking")

        assert engine.pool.checkedout() == 0


# ============================================
# Transaction Scope
# ============================================

class TestTransactionScope:
    """Commit, rollback and release of transaction_scope()"""

    def test_commit_on_success(self, session_factory, citizen_id):
        with transaction_scope(session_factory, write_lock=True) as db:
            db.add(Citation(
                citizen_id=citizen_id,
                date=FIXED_NOW,
                description="Jaywalking",
                fine_amount=Decimal("400.00"),
            ))

        assert count_rows(session_factory, Citation, citizen_id) == 1

    def test_rollback_on_cancellation(self, engine, session_factory, citizen_id):
        with pytest.raises(asyncio.CancelledError):
            with transaction_scope(session_factory, write_lock=True) as db:
                db.add(Citation(
                    citizen_id=citizen_id,
                    date=FIXED_NOW,
                    description="Jaywalking",
                    fine_amount=Decimal("400.00"),
                ))
                db.flush()
                raise asyncio.CancelledError()

        assert count_rows(session_factory, Citation, citizen_id) == 0
        assert engine.pool.checkedout() == 0

    def test_write_lock_released_after_rollback(self, session_factory, citizen_id):
        with pytest.raises(ValueError):
            with transaction_scope(session_factory, write_lock=True):
                raise ValueError("abort")

        # A second writer can take the lock immediately
        with transaction_scope(session_factory, write_lock=True) as db:
            db.add(Citation(
                citizen_id=citizen_id,
                date=FIXED_NOW,
                description="Jaywalking",
                fine_amount=Decimal("400.00"),
            ))

        assert count_rows(session_factory, Citation, citizen_id) == 1


# ============================================
# Scenario
# ============================================

class TestLoudMusicScenario:
    """A citizen with two prior citations is cited for loud music"""

    def test_third_citation_scenario(self, coordinator, session_factory):
        citizen_id = add_citizen(session_factory, full_name="Ana", last_name="Perez")
        coordinator.file_citation(citizen_id, "Littering")
        coordinator.file_citation(citizen_id, "Jaywalking")

        result = coordinator.file_citation(citizen_id, "Loud music after hours")

        assert result.penalty.tier == PenaltyTier.THIRD_CITATION
        assert result.penalty.fine_amount == Decimal("0.00")
        assert result.penalty.jail_days == 8
        assert result.criminal_record_created is True
        assert "Loud music after hours" in result.criminal_record.description
        assert "3 minor citations" in result.criminal_record.description

        assert count_rows(session_factory, Citation, citizen_id) == 3
        assert count_rows(session_factory, CriminalRecord, citizen_id) == 1


# ============================================
# Global Instance
# ============================================

class TestGlobalCoordinator:

    def test_init_uses_configured_defaults(self, session_factory):
        coordinator = init_citation_coordinator(session_factory)

        assert coordinator.session_factory is session_factory
        assert coordinator.default_location_id == 1
        assert coordinator.crime_type == "Accumulated minor citations"
