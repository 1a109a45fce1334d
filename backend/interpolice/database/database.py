"""
Database Configuration and Session Management

This module provides the SQLAlchemy engine, session factory, scoped
transaction helper and database initialization utilities.
"""

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from interpolice.config import get_config


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent.parent / "data"

# Execution option that makes a SQLite transaction start with BEGIN IMMEDIATE
WRITE_LOCK_OPTION = "interpolice_write_lock"

# Base class for ORM models
Base = declarative_base()


def _default_database_url() -> str:
    DATA_DIR.mkdir(exist_ok=True)
    return f"sqlite:///{DATA_DIR}/interpolice.db"


def _install_sqlite_hooks(engine: Engine):
    """
    Take over transaction control from pysqlite.

    pysqlite does not emit BEGIN before SELECT, so a count followed by an
    insert would not share a transaction. With these hooks every ORM
    transaction starts with an explicit BEGIN, and a write-locked one with
    BEGIN IMMEDIATE, which serializes writers at the database level.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get(WRITE_LOCK_OPTION):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def create_db_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create an engine for the given URL (default: $DATABASE_URL or local SQLite)

    SQLite engines get foreign keys enabled and explicit transaction control.
    """
    db_config = get_config().get_database_config()
    url = database_url or os.getenv("DATABASE_URL") or _default_database_url()
    if echo is None:
        echo = bool(db_config.get('echo', False))

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={
                "check_same_thread": False,
                "timeout": db_config.get('sqliteBusyTimeout', 30),
            },
            echo=echo,
        )
        _install_sqlite_hooks(engine)
    else:
        engine = create_engine(url, pool_pre_ping=True, echo=echo)

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to an engine"""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


# Application engine and session factory
engine = create_db_engine()
SessionLocal = create_session_factory(engine)


def get_db():
    """
    Dependency for FastAPI - provides database session

    Usage in FastAPI endpoint:
        @router.get("/api/citizens")
        def list_citizens(db: Session = Depends(get_db)):
            return db.query(Citizen).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction_scope(
    session_factory: Optional[Callable[[], Session]] = None,
    write_lock: bool = False
) -> Iterator[Session]:
    """
    Provide a session wrapped in a single transaction.

    Commits when the block exits normally. Any exception, including task
    cancellation and KeyboardInterrupt, rolls the transaction back before it
    propagates. The session is closed (and its connection returned to the
    pool) on every exit path.

    Args:
        session_factory: Factory to open the session from (default: SessionLocal)
        write_lock: Acquire the database write lock when the transaction begins
    """
    session = (session_factory or SessionLocal)()
    try:
        if write_lock:
            session.connection(execution_options={WRITE_LOCK_OPTION: True})
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind: Optional[Engine] = None):
    """
    Initialize database - create all tables and reference data

    Called on application startup to ensure all tables exist.
    """
    # Import all models to ensure they're registered with Base
    from interpolice.database import models

    target = bind or engine
    Base.metadata.create_all(bind=target)

    with transaction_scope(create_session_factory(target)) as session:
        models.seed_reference_data(session)

    logger.info("Database initialized at %s", target.url)


def reset_db(bind: Optional[Engine] = None):
    """
    Reset database - drop and recreate all tables

    WARNING: This will delete all data!
    Only use during development/testing.
    """
    from interpolice.database import models  # noqa: F401

    target = bind or engine
    Base.metadata.drop_all(bind=target)
    init_db(target)

    logger.warning("Database reset complete - all data deleted")
