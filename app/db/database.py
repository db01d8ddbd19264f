"""
app/db/database.py

Purpose: Relational database connection setup

- Initializes the SQLAlchemy async engine and session factory
- Turns on SQLite foreign keys so cascades are enforced
- Health checks and retry logic
- Proper connection lifecycle management
"""

from sqlalchemy import event, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from typing import Optional
import asyncio
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

# Global engine and session factory
_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def connect_to_database(database_url: Optional[str] = None):
    """
    Creates the engine and verifies connectivity with retry logic.
    Called during application startup.

    Args:
        database_url: Overrides settings.DATABASE_URL (used by tests and scripts)
    """
    global _engine, _session_factory

    if _engine is not None:
        logger.warning("Database engine already initialized")
        return

    url = database_url or settings.DATABASE_URL
    max_retries = 3
    retry_delay = 2

    for attempt in range(1, max_retries + 1):
        try:
            logger.info(
                f"Attempting to connect to database (attempt {attempt}/{max_retries})"
            )

            engine = create_async_engine(url, pool_pre_ping=True)
            if engine.dialect.name == "sqlite":
                event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

            async with engine.connect() as connection:
                await connection.execute(text("SELECT 1"))

            _engine = engine
            _session_factory = async_sessionmaker(engine, expire_on_commit=False)

            logger.info(f"✅ Successfully connected to database: {engine.url.render_as_string(hide_password=True)}")
            return

        except OperationalError as e:
            logger.error(
                f"Failed to connect to database (attempt {attempt}/{max_retries}): {e}"
            )

            if attempt < max_retries:
                logger.info(f"Retrying in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
                retry_delay *= 2  # Exponential backoff
            else:
                logger.critical("Failed to connect to database after all retries")
                raise ConnectionError("Could not establish database connection") from e


async def close_database_connection():
    """
    Disposes the engine and its pooled connections.
    Called during application shutdown.
    """
    global _engine, _session_factory

    if _engine:
        logger.info("Closing database connection")
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connection closed")


async def check_database_health() -> bool:
    """
    Checks if the database connection is healthy.

    Returns:
        True if connection is healthy, False otherwise
    """
    try:
        if _engine is None:
            logger.error("Database engine not initialized")
            return False

        async with _engine.connect() as connection:
            await connection.execute(text("SELECT 1"))
        return True

    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        return False


def get_engine() -> AsyncEngine:
    """
    Returns the engine.

    Raises:
        RuntimeError: If the database is not initialized
    """
    if _engine is None:
        raise RuntimeError(
            "Database not initialized. Call connect_to_database() during startup."
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Returns the session factory. Each inbound message gets its own
    session and runs inside a single transaction.

    Raises:
        RuntimeError: If the database is not initialized
    """
    if _session_factory is None:
        raise RuntimeError(
            "Database not initialized. Call connect_to_database() during startup."
        )
    return _session_factory
