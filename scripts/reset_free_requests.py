#!/usr/bin/env python3
"""
Monthly reset of the free-request allowance of every FREE patient.

Meant to run from cron on the first day of each month.
"""

import argparse
import sys
import logging
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.exc import SQLAlchemyError

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("reset_free_requests")


def main(argv=None) -> int:
    from app.config import settings
    from domain.models import SessionLocal
    from services.quota_service import QuotaService

    p = argparse.ArgumentParser(
        description="Reset the remaining requests of all FREE patients."
    )
    p.add_argument(
        "--requests",
        type=int,
        default=settings.free_requests,
        help="Allowance to grant (default: configured free_requests)",
    )
    args = p.parse_args(argv)

    if args.requests < 0:
        logger.error("--requests must be >= 0")
        return 2

    db = SessionLocal()
    try:
        count = QuotaService.reset_free_user_requests(db, args.requests)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"✗ Reset failed: {e}")
        return 1
    finally:
        db.close()

    logger.info(f"✓ Reset {count} FREE patients to {args.requests} requests")
    return 0


if __name__ == "__main__":
    sys.exit(main())
