"""
app/db/schema.py

Purpose: Database schema management

- Creates all tables and their indexes
- Idempotent - safe to run on every startup
"""

from app.db.database import get_engine
from app.models.base import Base
from app.core.logging import get_logger

# Imported for their side effect of registering tables on Base.metadata
from app.models import user, contact, group, pending_action  # noqa: F401

logger = get_logger(__name__)


async def create_tables():
    """
    Creates all tables that do not exist yet.
    """
    engine = get_engine()

    logger.info("Creating database tables...")
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    logger.info(f"✅ Tables ready: {', '.join(sorted(Base.metadata.tables))}")


async def drop_tables():
    """
    Drops every table. Only used by tests and local resets.
    """
    engine = get_engine()

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)

    logger.warning("All tables dropped")
