"""
Database Tests

Tests for the SQLite engine setup, ORM models, reference data and
cascading deletes.
"""

from datetime import date, datetime, time
from decimal import Decimal

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from interpolice.database.database import create_session_factory, init_db, reset_db
from interpolice.database.models import (
    Citation,
    Citizen,
    CriminalRecord,
    Planet,
    REFERENCE_ROLES,
    Role,
    Status,
    seed_reference_data,
)

from conftest import FIXED_NOW


# ============================================
# Engine Setup
# ============================================

class TestEngine:

    def test_foreign_keys_enabled(self, engine):
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_wal_journal(self, engine):
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"

    def test_foreign_key_violation(self, db):
        db.add(Citation(citizen_id=9999, date=FIXED_NOW, description="Orphan", fine_amount=Decimal("400.00")))

        with pytest.raises(IntegrityError):
            db.flush()


# ============================================
# Reference Data
# ============================================

class TestReferenceData:

    def test_seeded(self, db):
        assert db.query(Planet).count() == 2
        assert db.query(Status).count() == 3
        assert {r.id: r.role_name for r in db.query(Role).all()} == REFERENCE_ROLES

    def test_seed_is_idempotent(self, engine, db):
        init_db(engine)
        seed_reference_data(db)
        db.commit()

        assert db.query(Planet).count() == 2
        assert db.query(Role).count() == len(REFERENCE_ROLES)

    def test_reset_clears_data(self, engine, citizen_id):
        reset_db(engine)

        with create_session_factory(engine)() as db:
            assert db.query(Citizen).count() == 0
            assert db.query(Status).count() == 3


# ============================================
# Models
# ============================================

class TestModels:

    def test_citation_round_trip(self, db, citizen_id):
        db.add(Citation(citizen_id=citizen_id, date=FIXED_NOW, description="Jaywalking", fine_amount=Decimal("400.00")))
        db.commit()

        citation = db.query(Citation).one()
        assert citation.date == FIXED_NOW
        assert Decimal(citation.fine_amount) == Decimal("400.00")
        assert citation.citizen.full_name == "Marta"

    def test_record_defaults(self, db, citizen_id):
        db.add(CriminalRecord(
            citizen_id=citizen_id,
            date=date(2026, 9, 1),
            time=time(22, 15),
            location=1,
            description="Armed robbery",
            crime_type="Robbery",
        ))
        db.commit()

        record = db.query(CriminalRecord).one()
        assert isinstance(record.created_at, datetime)
        assert record.planet.planet_name == "Earth"

    def test_qr_code_unique(self, db, citizen_id):
        db.add(Citizen(
            full_name="Copy",
            birth_date=date(1990, 1, 1),
            origin_planet=1,
            residence_planet=1,
            qr_code="QR-Marta-Rojas",
            status_id=2,
        ))

        with pytest.raises(IntegrityError):
            db.flush()

    def test_citizen_delete_cascades(self, db, citizen_id):
        db.add(Citation(citizen_id=citizen_id, date=FIXED_NOW, description="Jaywalking", fine_amount=Decimal("400.00")))
        db.add(CriminalRecord(
            citizen_id=citizen_id,
            date=date(2026, 9, 1),
            time=time(22, 15),
            location=1,
            description="Armed robbery",
            crime_type="Robbery",
        ))
        db.commit()

        db.execute(text("DELETE FROM citizens WHERE id = :id"), {"id": citizen_id})
        db.commit()

        assert db.query(Citation).count() == 0
        assert db.query(CriminalRecord).count() == 0
