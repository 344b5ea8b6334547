"""
Create the database schema outside of the web process.

    python init_db.py          # create missing tables
    python init_db.py --drop   # DEV ONLY: drop everything, then recreate
"""
import asyncio
import logging
import sys

from backend.app.core.config import get_settings
from backend.app.db.session import Database

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def init_models(drop: bool = False):
    settings = get_settings()
    database = Database.from_settings(settings)
    database.connect()
    try:
        if drop:
            logger.warning("Dropping all tables in %s", settings.DATABASE_URL)
        await database.create_all(drop=drop)
        logger.info("Tables created")
    except Exception:
        logger.exception("Could not create tables")
        raise
    finally:
        await database.dispose()


if __name__ == "__main__":
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(init_models(drop="--drop" in sys.argv[1:]))
