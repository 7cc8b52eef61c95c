"""
Script to create the database tables and load the sample data.

Usage:
    python scripts/seed_database.py
    python scripts/seed_database.py --no-sample-data
"""

import argparse
import asyncio
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from equine_center.config import get_settings
from equine_center.database import AsyncSessionLocal, async_engine, init_db
from equine_center.logging_config import setup_logging
from equine_center.seed import seed_database


async def main(load_sample_data: bool) -> None:
    settings = get_settings()
    setup_logging(settings, log_to_file=False)

    await init_db()
    print(f"Tables ready at {settings.database_url}")

    if load_sample_data:
        async with AsyncSessionLocal() as session:
            written = await seed_database(session, settings)
        print("Sample data loaded" if written else "Users already exist, nothing to seed")

    await async_engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize the database")
    parser.add_argument(
        "--no-sample-data",
        action="store_true",
        help="Only create tables",
    )
    args = parser.parse_args()
    asyncio.run(main(load_sample_data=not args.no_sample_data))
