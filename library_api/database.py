"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Library API.

We use SYNCHRONOUS SQLAlchemy with psycopg2 against PostgreSQL in
production. SQLAlchemy is also the storage abstraction: the same ORM code
runs against SQLite, which is what the test suite uses.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives → create a new session
2. Service functions receive the session explicitly and do all their work in it
3. Services commit once at the end of a workflow, or roll back on failure
4. Close session when request ends

This is implemented using FastAPI's dependency injection.
"""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from library_api.config import get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# Key parameters:
# - pool_size / max_overflow: connection pool sizing (not valid for SQLite)
# - pool_pre_ping: Test connection health before using
# - echo: Log all SQL statements in debug mode

def build_engine_options(database_url: str) -> dict[str, Any]:
    """
    Engine keyword arguments appropriate for the database backend.

    SQLite engines use a different pool class that rejects the sizing
    arguments, and need check_same_thread disabled because FastAPI runs
    sync endpoints in a thread pool.
    """
    options: dict[str, Any] = {"echo": settings.debug}

    if make_url(database_url).get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
        )
    return options


engine = create_engine(
    settings.database_url,
    **build_engine_options(settings.database_url),
)


# =============================================================================
# Session Factory
# =============================================================================
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    All models inherit from this class:

        class Book(Base):
            __tablename__ = "books"
            ...
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Creates a session, yields it to the route handler and closes it when
    the request ends. Closing a session with an uncommitted transaction
    rolls that transaction back.

    Usage in Routes:
        @router.get("/all")
        def get_books(db: DbSession):
            ...

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables that do not exist yet.

    Called on application startup and by the seed script. There is no
    migration tooling; schema changes require recreating the tables.
    """
    # Import models so they are registered on Base.metadata
    import library_api.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Only for development resets.
    """
    import library_api.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
