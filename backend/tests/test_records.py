"""
Criminal Record Tests

Tests for direct record entry, updates, search and reporting, including
records created by citation escalation.
"""

from datetime import date, time

import pytest

from interpolice.citations import CitationCoordinator
from interpolice.errors import NotFoundError
from interpolice.records import (
    count_records,
    create_record,
    dangerous_locations,
    delete_record,
    get_record,
    list_citizen_records,
    list_records,
    record_statistics,
    search_records,
    update_record,
)

from conftest import FIXED_NOW, add_citizen


@pytest.fixture
def robbery(db, citizen_id):
    record = create_record(
        db,
        citizen_id=citizen_id,
        record_date=date(2026, 9, 1),
        record_time=time(22, 15),
        location=2,
        description="Armed robbery at the spaceport",
        crime_type="Robbery",
    )
    db.commit()
    return record


# ============================================
# Direct Entry
# ============================================

class TestDirectEntry:

    def test_create(self, db, citizen_id, robbery):
        assert robbery.id is not None
        assert robbery.citizen_name == "Marta"
        assert robbery.location_name == "Mars"
        assert robbery.crime_type == "Robbery"
        assert count_records(db, citizen_id) == 1

    def test_default_crime_type(self, db, citizen_id):
        record = create_record(db, citizen_id, date(2026, 9, 2), time(9, 0), 1, "Public disturbance")

        assert record.crime_type == "Minor offense"

    def test_unknown_citizen(self, db):
        with pytest.raises(NotFoundError):
            create_record(db, 9999, date(2026, 9, 2), time(9, 0), 1, "Public disturbance")

    def test_unknown_location(self, db, citizen_id):
        with pytest.raises(NotFoundError):
            create_record(db, citizen_id, date(2026, 9, 2), time(9, 0), 42, "Public disturbance")

    def test_update(self, db, robbery):
        updated = update_record(db, robbery.id, {"crime_type": "Aggravated robbery", "location": 1})
        db.commit()

        assert updated.crime_type == "Aggravated robbery"
        assert updated.location_name == "Earth"
        assert updated.description == robbery.description

    def test_update_unknown_location(self, db, robbery):
        with pytest.raises(NotFoundError):
            update_record(db, robbery.id, {"location": 42})

    def test_delete(self, db, citizen_id, robbery):
        deleted = delete_record(db, robbery.id)
        db.commit()

        assert deleted.id == robbery.id
        assert get_record(db, robbery.id) is None
        assert count_records(db, citizen_id) == 0

    def test_delete_missing(self, db):
        with pytest.raises(NotFoundError):
            delete_record(db, 9999)


# ============================================
# Queries
# ============================================

class TestQueries:

    def test_citizen_records_newest_first(self, db, citizen_id, robbery):
        create_record(db, citizen_id, date(2026, 9, 5), time(8, 0), 1, "Vandalism", "Vandalism")
        db.commit()

        records = list_citizen_records(db, citizen_id)

        assert [r.crime_type for r in records] == ["Vandalism", "Robbery"]

    def test_list_filters(self, db, citizen_id, robbery):
        create_record(db, citizen_id, date(2026, 9, 5), time(8, 0), 1, "Vandalism", "Vandalism")
        db.commit()

        assert len(list_records(db)) == 2
        assert len(list_records(db, crime_type="rob")) == 1
        assert len(list_records(db, location=1)) == 1
        assert len(list_records(db, date_from=date(2026, 9, 3))) == 1
        assert len(list_records(db, date_to=date(2026, 9, 3))) == 1

    def test_search(self, db, robbery):
        assert len(search_records(db, term="spaceport")) == 1
        assert len(search_records(db, citizen_name="Rojas")) == 1
        assert search_records(db, term="arson") == []

    def test_search_requires_criterion(self, db):
        with pytest.raises(ValueError):
            search_records(db)


# ============================================
# Reporting
# ============================================

class TestReporting:

    def test_statistics_count_automatic_records(self, db, session_factory, citizen_id, robbery):
        coordinator = CitationCoordinator(session_factory, clock=lambda: FIXED_NOW)
        for i in range(4):
            coordinator.file_citation(citizen_id, f"Infraction {i}")
        db.expire_all()

        stats = record_statistics(db)

        assert stats["total_records"] == 3
        assert stats["total_citizens_with_records"] == 1
        assert stats["by_crime_type"] == {"Robbery": 1, "Accumulated minor citations": 2}
        assert stats["automatic_records"] == 2

    def test_dangerous_locations(self, db, session_factory, citizen_id, robbery):
        other_id = add_citizen(session_factory, full_name="Lio", last_name="Vega")
        create_record(db, other_id, date(2026, 9, 3), time(1, 0), 2, "Smuggling", "Smuggling")
        create_record(db, citizen_id, date(2026, 9, 4), time(2, 0), 1, "Vandalism", "Vandalism")
        db.commit()

        locations = dangerous_locations(db)

        assert locations[0] == {
            "location": 2,
            "location_name": "Mars",
            "total_crimes": 2,
            "unique_criminals": 2,
        }
        assert locations[1]["location"] == 1
