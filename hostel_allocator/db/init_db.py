# hostel_allocator/db/init_db.py
"""Database initialization utilities."""
from typing import Optional

from sqlalchemy.engine import Engine

from hostel_allocator.core.logging import get_logger
from hostel_allocator.db.base import Base, import_models
from hostel_allocator.db.session import engine as default_engine

logger = get_logger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create any missing tables.

    Suitable for development and tests; production schemas are managed by
    migrations.
    """
    import_models()
    Base.metadata.create_all(bind=bind or default_engine)
    logger.info("Database tables ensured", extra={"tables": sorted(Base.metadata.tables)})


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data!
    """
    Base.metadata.drop_all(bind=bind or default_engine)
    logger.warning("All database tables dropped")


def reset_db(bind: Optional[Engine] = None) -> None:
    """Drop and recreate all tables."""
    logger.warning("Resetting database...")
    drop_db(bind)
    init_db(bind)
    logger.info("Database reset complete")
