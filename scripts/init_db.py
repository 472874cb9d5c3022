"""
Database initialization script

Run once to create collections and indexes:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables before settings are read
load_dotenv()

from app.core.logging import setup_logging, get_logger  # noqa: E402
from app.db.indexes import create_indexes  # noqa: E402
from app.db.mongo import connect_to_mongo, close_mongo_connection  # noqa: E402

setup_logging()
logger = get_logger("scripts.init_db")


async def main():
    await connect_to_mongo()
    try:
        await create_indexes()
        logger.info("🎉 Database initialized")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(main())
