"""
Database Package

SQLAlchemy engine, sessions and ORM models.
"""

from .database import (
    Base,
    engine,
    SessionLocal,
    get_db,
    create_db_engine,
    create_session_factory,
    transaction_scope,
    init_db,
    reset_db,
)

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_db",
    "create_db_engine",
    "create_session_factory",
    "transaction_scope",
    "init_db",
    "reset_db",
]
