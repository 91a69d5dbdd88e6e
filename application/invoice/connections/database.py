"""
SQLAlchemy engines, session factories and transaction helpers.

Writes go through `engine`; reads may use a replica via DATABASE_READ_URL.
Services own commit/rollback through `transaction()`.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

# Logger
from invoice.logging.utils import get_app_logger
logger = get_app_logger("invoice.database")

# Settings
from invoice.config.settings import InvoiceConfigs
configs = InvoiceConfigs()


def normalize_url(database_url: str) -> str:
    """Route plain postgresql:// URLs to the psycopg (v3) driver."""
    if database_url and database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return database_url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str) -> Engine:
    url = make_url(normalize_url(database_url))
    options: Dict[str, Any] = {"echo": configs.SQL_ECHO}

    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # one shared connection, otherwise every checkout sees an empty database
            options["poolclass"] = StaticPool
        sqlite_engine = create_engine(url, **options)
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine

    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=configs.DB_POOL_SIZE,
        max_overflow=configs.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=configs.DB_POOL_RECYCLE,
        **options,
    )


Base = declarative_base()

engine = build_engine(configs.DATABASE_URL)
read_engine = engine if configs.DATABASE_READ_URL == configs.DATABASE_URL else build_engine(configs.DATABASE_READ_URL)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
ReadSessionLocal = sessionmaker(bind=read_engine, autoflush=False, expire_on_commit=False)

logger.info(f"database_engines_initialized | backend={engine.url.get_backend_name()} read_replica={read_engine is not engine}")


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit the work done inside the block, roll it back on error."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


@contextmanager
def get_db_session(read_only: bool = False) -> Iterator[Session]:
    """
    Session for work outside a request (scripts, migrations helpers).

    Read-write sessions commit on success and roll back on error.
    """
    db = (ReadSessionLocal if read_only else SessionLocal)()
    try:
        if read_only:
            yield db
        else:
            with transaction(db):
                yield db
    finally:
        db.close()


def get_db() -> Iterator[Session]:
    """FastAPI dependency: request-scoped write session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        # anything left uncommitted by the request is discarded here
        db.close()


def get_read_db() -> Iterator[Session]:
    """FastAPI dependency: request-scoped session on the read engine."""
    db = ReadSessionLocal()
    try:
        yield db
    finally:
        db.close()


def close_db_pool() -> None:
    for bound in {engine, read_engine}:
        bound.dispose()
    logger.info("database_pools_disposed")
