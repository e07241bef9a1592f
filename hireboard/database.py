"""
Database connection, session management, and resilience layer for the applicant store.

Supports both SQLite (local development, tests) and PostgreSQL (hosted deployment).
Sessions are rolled back on transient database errors.
"""
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings

logger = logging.getLogger("hireboard.database")

Base = declarative_base()


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def create_app_engine(database_url: str = None):
    """
    Create a SQLAlchemy engine appropriate for the database backend.

    SQLite file: WAL mode, busy_timeout, check_same_thread=False
    SQLite memory: one shared connection (StaticPool) so every session sees the same data
    PostgreSQL: connection pooling with pre-ping
    """
    url = database_url or settings.store.database_url

    if _is_memory_sqlite(url):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        logger.debug("Created in-memory SQLite engine")
    elif _is_sqlite(url):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
        )

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

        logger.info("Created SQLite engine with WAL mode")
    else:
        store = settings.store
        engine = create_engine(
            url,
            pool_size=store.db_pool_size,
            max_overflow=store.db_max_overflow,
            pool_timeout=store.db_pool_timeout,
            pool_pre_ping=True,
            pool_recycle=store.db_pool_recycle,
        )
        logger.info("Created PostgreSQL engine with connection pooling")

    return engine


engine = create_app_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _is_transient_error(exc: Exception) -> bool:
    """Check if an exception is a transient/retryable database error."""
    if isinstance(exc, IntegrityError):
        return False
    return isinstance(exc, (OperationalError, DBAPIError))


def get_db():
    """FastAPI dependency that yields a database session with transient error handling."""
    db = SessionLocal()
    try:
        yield db
    except Exception as exc:
        if _is_transient_error(exc):
            db.rollback()
            logger.warning("Rolled back session due to transient error: %s", exc)
        raise
    finally:
        db.close()


@contextmanager
def get_resilient_session():
    """
    Context manager for database sessions outside of FastAPI endpoints.

    Usage:
        with get_resilient_session() as db:
            db.query(...)
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as exc:
        db.rollback()
        if _is_transient_error(exc):
            logger.warning("Resilient session rolled back due to transient error: %s", exc)
        raise
    finally:
        db.close()


def init_db(bind=None):
    """Create all tables from model metadata if they do not exist yet."""
    from . import models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine, checkfirst=True)
