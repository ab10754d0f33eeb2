#!/usr/bin/env python3
"""Setup script for a local Famtivity database."""

import asyncio
import logging
import sys
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from famtivity.backend import SelectQuery, SqlBackend
from famtivity.core.config import settings
from famtivity.core.database import create_engine, init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_ACTIVITIES = [
    {"name": "Junior Swim Squad", "category": "sports", "min_age": 5, "max_age": 10,
     "price_per_month": 85.0, "latitude": 37.7599, "longitude": -122.4148,
     "description": "Small-group swim lessons for confident beginners"},
    {"name": "Little Painters Studio", "category": "arts", "min_age": 3, "max_age": 6,
     "price_per_month": 45.0, "latitude": 37.7694, "longitude": -122.4862,
     "description": "Messy, joyful painting for preschoolers"},
    {"name": "Robotics Club", "category": "stem", "min_age": 8, "max_age": 14,
     "price_per_month": 150.0, "latitude": 37.7849, "longitude": -122.4094,
     "description": "Build and program robots in teams"},
    {"name": "Saturday Soccer", "category": "sports", "min_age": 6, "max_age": 12,
     "price_per_month": 60.0, "latitude": 37.7300, "longitude": -122.4400,
     "description": "Weekend soccer league with volunteer coaches"},
    {"name": "Kids Choir", "category": "music", "min_age": 7, "max_age": 13,
     "price_per_month": 40.0, "latitude": 37.7510, "longitude": -122.4330,
     "description": "Weekly choir practice and seasonal concerts"},
]


async def setup_database(backend: SqlBackend):
    """Create every table on the configured database."""
    logger.info("Creating database tables...")
    await init_db(backend.engine)
    logger.info("Database tables ready")


async def create_sample_data(backend: SqlBackend):
    """Seed a small activity catalogue when none exists."""
    existing = await backend.select(SelectQuery(table="activities", limit=1))
    if existing:
        logger.info("Sample activities already exist, skipping...")
        return

    rows = await backend.insert("activities", SAMPLE_ACTIVITIES)
    logger.info(f"Created {len(rows)} sample activities")


async def main():
    """Main setup function."""
    if not settings.database_url:
        logger.error("DATABASE_URL must be set to set up a local database")
        sys.exit(1)

    logger.info("Starting Famtivity database setup...")
    backend = SqlBackend(create_engine(settings.database_url))

    try:
        await setup_database(backend)
        await create_sample_data(backend)
    finally:
        await backend.aclose()

    logger.info("Setup completed successfully!")
    logger.info("You can now start the API server with: cd server && python -m famtivity.main")


if __name__ == "__main__":
    asyncio.run(main())
