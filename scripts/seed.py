"""
Seed script to populate the demo organizations and users.

Run this script to create the tables and seed them without starting the
server (the server also seeds on startup unless SEED_ON_STARTUP=0).

Usage:
    python -m scripts.seed
"""
import asyncio

from app.core.database.engine import AsyncSessionLocal, init_db
from app.core.database.seed import seed_database
from app.utils import get_logger


log = get_logger(__name__)


async def main():
    """Create tables, then seed if empty."""
    log.info("Initializing database tables...")
    await init_db()

    async with AsyncSessionLocal() as db:
        try:
            created = await seed_database(db)
        except Exception as e:
            log.error(f"Error seeding database: {e}", exc_info=True)
            await db.rollback()
            raise

    if created:
        log.info("Seeding completed successfully!")
    else:
        log.info("Database already contains data, nothing to do")


if __name__ == "__main__":
    asyncio.run(main())
