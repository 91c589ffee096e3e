#!/usr/bin/env python3
"""
Create the QueComi tables (meals, patients) in the configured database.
Can be run from the host machine or inside the container.
"""

import sys
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("init_db")


def main() -> int:
    from domain.models.database import engine, init_database

    logger.info("Initializing database tables...")
    try:
        init_database()
    except SQLAlchemyError as e:
        logger.error(f"✗ Failed to initialize database: {e}")
        return 1

    tables = inspect(engine).get_table_names()
    logger.info(f"✓ {len(tables)} tables present: {', '.join(sorted(tables))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
