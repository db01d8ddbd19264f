"""
Database initialization script

Run once to create the tables (the app also does this at startup):
    python scripts/init_db.py
    python scripts/init_db.py --reset   # drop everything first
"""

import argparse
import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

from sqlalchemy import func, select

from app.core.config import settings
from app.core.logging import setup_logging, get_logger
from app.db.database import connect_to_database, close_database_connection, get_session_factory
from app.db.schema import create_tables, drop_tables
from app.models.base import Base

setup_logging()
logger = get_logger("scripts.init_db")


async def main(reset: bool):
    """Main initialization"""
    logger.info("=" * 60)
    logger.info("  GroupText Database Setup")
    logger.info("=" * 60)

    await connect_to_database()

    try:
        if reset:
            await drop_tables()
        await create_tables()

        logger.info("📊 Current rows:")
        async with get_session_factory()() as session:
            for name, table in sorted(Base.metadata.tables.items()):
                count = (await session.execute(select(func.count()).select_from(table))).scalar_one()
                logger.info(f"  {name}: {count}")

        logger.info(f"✅ Database ready: {settings.DATABASE_URL}")

    finally:
        await close_database_connection()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create GroupText tables")
    parser.add_argument("--reset", action="store_true", help="drop all tables before creating them")
    args = parser.parse_args()

    asyncio.run(main(args.reset))
