"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Bookshelf API and exposes the
persistence primitives the resource services are built on.

Engines
=======
Two engines are supported through the same code path:
- SQLite (default): an embedded, file-backed database. Foreign keys are
  switched on for every connection so ON DELETE CASCADE holds.
- PostgreSQL (psycopg2): pooled connections sized from settings.

JSON columns (book authors/genres) are serialized with ensure_ascii=False so
that case-insensitive text search sees the characters users typed.

Session Management Pattern
==========================
"Session per request":
1. Request arrives → create a new session
2. Use session for all database operations in that request
3. Services commit once per logical write, rollback on failure
4. Close session when request ends

Query Primitives
================
Every statement handed to these helpers is a SQLAlchemy construct, so user
input always travels as bound parameters:

    execute(db, stmt)    -> ExecuteResult(rows_affected, inserted_id)
    query_one(db, stmt)  -> first entity or None
    query_all(db, stmt)  -> list of entities
"""

import json
import logging
from collections.abc import Generator
from dataclasses import dataclass
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.sql.expression import Executable

from bookshelf.config import get_settings

logger = logging.getLogger(__name__)

# Get settings instance
settings = get_settings()


def _json_serializer(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str, **kwargs: Any) -> Engine:
    """
    Build an engine for the given URL.

    SQLite engines get check_same_thread=False (FastAPI runs sync routes in
    a threadpool) and a connect hook enabling foreign keys. Other engines
    get the configured connection pool.

    Args:
        database_url: SQLAlchemy URL
        **kwargs: Extra create_engine() arguments (tests pass poolclass)

    Returns:
        Configured Engine
    """
    options: dict[str, Any] = {
        "echo": settings.debug,
        "json_serializer": _json_serializer,
    }

    if database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
        options["pool_pre_ping"] = True

    options.update(kwargs)
    db_engine = create_engine(database_url, **options)

    if db_engine.dialect.name == "sqlite":
        event.listen(db_engine, "connect", _enable_sqlite_foreign_keys)

    return db_engine


# =============================================================================
# Database Engine
# =============================================================================
engine = create_db_engine(settings.database_url)


# =============================================================================
# Session Factory
# =============================================================================
# - autocommit=False: services decide when to commit
# - autoflush=False: no implicit flush before queries
# - expire_on_commit=False: rows stay readable after commit for responses

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Usage in Routes:
        @router.get("/books")
        def list_books(db: DbSession):
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
# Query Primitives
# =============================================================================
@dataclass(frozen=True)
class ExecuteResult:
    """Outcome of a write statement."""

    rows_affected: int
    inserted_id: int | None = None


def execute(db: Session, stmt: Executable) -> ExecuteResult:
    """
    Run an INSERT/UPDATE/DELETE statement inside the session transaction.

    The caller owns the transaction and decides when to commit.

    Args:
        db: Database session
        stmt: SQLAlchemy insert(), update() or delete() construct

    Returns:
        ExecuteResult with the affected row count and, for single-row
        inserts, the new primary key
    """
    result = db.execute(stmt)
    inserted_id = None
    # Only single-column keys map to one id; composite keys report None
    if getattr(result, "is_insert", False) and len(result.inserted_primary_key or ()) == 1:
        inserted_id = result.inserted_primary_key[0]
    return ExecuteResult(rows_affected=result.rowcount, inserted_id=inserted_id)


def query_one(db: Session, stmt: Executable) -> Any | None:
    """
    Return the first entity selected by stmt, or None.

    Args:
        db: Database session
        stmt: select() of a single entity or column

    Returns:
        The entity (or scalar) or None when nothing matched
    """
    return db.execute(stmt).scalars().first()


def query_all(db: Session, stmt: Executable) -> list[Any]:
    """
    Return every entity selected by stmt.

    Args:
        db: Database session
        stmt: select() of a single entity or column

    Returns:
        List of entities (or scalars), possibly empty
    """
    return list(db.execute(stmt).scalars().all())


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables(bind: Engine | None = None) -> None:
    """
    Create all database tables that do not exist yet.

    Used at startup for the embedded engine and by the test suite.
    PostgreSQL deployments normally run Alembic migrations instead.
    """
    # Import models so every table is registered on Base.metadata
    import bookshelf.models  # noqa: F401

    target = bind or engine
    if target.dialect.name == "sqlite" and target.url.database:
        from pathlib import Path

        Path(target.url.database).parent.mkdir(parents=True, exist_ok=True)

    Base.metadata.create_all(bind=target)
    logger.debug("Database tables ensured")


def drop_tables(bind: Engine | None = None) -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Only for development resets and tests.
    """
    Base.metadata.drop_all(bind=bind or engine)
