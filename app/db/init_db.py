"""
Database initialization.

Creates all tables without going through Alembic (local development).
"""

import logging

from sqlmodel import SQLModel

import app.db.base  # noqa: F401
from app.db.session import engine

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Create every SQLModel table that does not exist yet."""
    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(engine)
    logger.info("Tables created: %s", ", ".join(sorted(SQLModel.metadata.tables)))


if __name__ == "__main__":
    from app.core.logging import setup_logging

    setup_logging()
    init_db()
