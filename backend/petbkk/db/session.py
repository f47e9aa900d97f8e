from contextlib import contextmanager
from datetime import timezone

from sqlalchemy import create_engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from petbkk.core.config import get_database_url
from petbkk.core.exceptions import StorageError
from petbkk.core.logging_config import get_logger

logger = get_logger(__name__)

# Create Base class for models
Base = declarative_base()

# Internal lazy globals
_engine = None
_SessionLocal = None
_database_url = None


def _build_engine(database_url: str):
    try:
        url = make_url(database_url)
    except ArgumentError as e:
        raise StorageError(f"Invalid DATABASE_URL: {e}") from e

    if url.drivername.startswith("postgres"):
        return create_engine(
            database_url,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,  # Detects and refreshes stale connections
            pool_recycle=3600,
            connect_args={"application_name": "petbkk", "connect_timeout": 10},
            echo=False,
        )

    if url.drivername.startswith("sqlite") and url.database in (None, "", ":memory:"):
        # One shared in-memory database for the whole process so DDL
        # survives across sessions (tests create tables, then open new ones).
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    if url.drivername.startswith("sqlite"):
        return create_engine(
            database_url, echo=False, connect_args={"check_same_thread": False}
        )

    return create_engine(database_url, echo=False)


def get_engine(database_url: str = None):
    """Return a cached SQLAlchemy engine, creating it from DATABASE_URL on
    first call. This allows tests to set DATABASE_URL before the engine is
    constructed. A changed URL disposes the old engine."""
    global _engine, _SessionLocal, _database_url

    database_url = database_url or get_database_url()
    if _engine is None or _database_url != database_url:
        if _engine is not None:
            _engine.dispose()
        _engine = _build_engine(database_url)
        _SessionLocal = None
        _database_url = database_url
        logger.info(
            "Database engine created",
            extra={"context": {"dialect": _engine.dialect.name}},
        )
    return _engine


def get_sessionmaker(database_url: str = None):
    """Return a cached sessionmaker bound to the lazy engine."""
    global _SessionLocal
    engine = get_engine(database_url)
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )
    return _SessionLocal


def SessionLocal():
    """Calling SessionLocal() returns a new Session bound to the lazy engine."""
    return get_sessionmaker()()


@contextmanager
def session_scope(session_factory=None):
    """Provide a transactional scope around a series of operations.

    Commits on success and rolls back on any failure. Database errors are
    re-raised as StorageError so callers never see driver exceptions.
    """
    session = (session_factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(
            "Database operation failed",
            extra={"context": {"error": str(e), "error_type": type(e).__name__}},
        )
        raise StorageError(f"Database operation failed: {e}") from e
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_tables(engine=None):
    """Create all tables in database using the lazy engine."""
    # Ensure models are registered on Base.metadata
    from petbkk.db import base  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())


def drop_tables(engine=None):
    from petbkk.db import base  # noqa: F401

    Base.metadata.drop_all(bind=engine or get_engine())


def ensure_utc(value):
    """SQLite drops tzinfo on DateTime columns; stored values are UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
