"""Database session management with connection pooling"""

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from credit_registry.config import settings
from credit_registry.infrastructure.database.models import SCHEMA_TABLES

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite gets foreign key enforcement so cascades behave like PostgreSQL"""
    if database_url.startswith("sqlite"):
        sqlite_engine = create_engine(database_url, connect_args={"check_same_thread": False})
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle_seconds,
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_schema(bind: Engine) -> None:
    """Create items, clients, banks and credits if missing, in that order"""
    for table in SCHEMA_TABLES:
        table.create(bind=bind, checkfirst=True)
    logger.info("Database schema initialized", extra={"tables": [t.name for t in SCHEMA_TABLES]})


def get_db() -> Session:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
