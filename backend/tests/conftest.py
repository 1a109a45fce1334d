"""
Shared test fixtures

Every test gets its own file-backed SQLite database under tmp_path, so
write-locked transactions and multiple pooled connections behave as in
production.
"""

import os
from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from interpolice.api.citation_routes import get_coordinator  # noqa: E402
from interpolice.auth import init_auth_service  # noqa: E402
from interpolice.citations import CitationCoordinator  # noqa: E402
from interpolice.database.database import (  # noqa: E402
    create_db_engine,
    create_session_factory,
    get_db,
    init_db,
    transaction_scope,
)
from interpolice.database.models import Citizen  # noqa: E402
from interpolice.main import app  # noqa: E402


FIXED_NOW = datetime(2026, 10, 1, 22, 15, 30, 123456)


# ============================================
# Database Fixtures
# ============================================

@pytest.fixture
def engine(tmp_path):
    """Fresh database with tables and reference data"""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'interpolice_test.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture(name="db")
def db_fixture(session_factory):
    """Session for tests that never run the coordinator concurrently"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def add_citizen(session_factory, full_name="Marta", last_name="Rojas", nick_name=None, qr_code=None):
    """Insert a citizen in its own committed transaction and return its id"""
    with transaction_scope(session_factory) as db:
        citizen = Citizen(
            full_name=full_name,
            last_name=last_name,
            nick_name=nick_name,
            birth_date=date(1990, 4, 12),
            origin_planet=1,
            residence_planet=2,
            qr_code=qr_code or f"QR-{full_name}-{last_name}",
            status_id=2,
        )
        db.add(citizen)
        db.flush()
        return citizen.id


@pytest.fixture
def citizen_id(session_factory):
    return add_citizen(session_factory)


@pytest.fixture
def coordinator(session_factory):
    """Coordinator with a fixed clock"""
    return CitationCoordinator(session_factory, clock=lambda: FIXED_NOW)


# ============================================
# API Fixtures
# ============================================

@pytest.fixture
def auth_service():
    return init_auth_service(secret="test-secret", bcrypt_rounds=4)


@pytest.fixture
def client(session_factory, coordinator, auth_service):
    """TestClient bound to the test database and coordinator"""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_coordinator] = lambda: coordinator
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(session_factory, auth_service):
    """Factory returning Bearer headers for a user with the given role"""
    tokens = {}

    def _headers(role: str) -> dict:
        if role not in tokens:
            with transaction_scope(session_factory) as db:
                user = auth_service.create_user(
                    db,
                    username=f"{role.lower()}-user",
                    password="correct-horse",
                    email=f"{role.lower()}@interpolice.test",
                    role_name=role,
                )
                tokens[role] = auth_service.create_token(user)
        return {"Authorization": f"Bearer {tokens[role]}"}

    return _headers
