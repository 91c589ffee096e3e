#!/usr/bin/env python3
"""
Daily premium subscription check.

Logs the expiry notice owed to every premium patient whose period ends
soon, then moves expired premium patients back to the FREE tier.
Meant to run from cron once a day at 00:00 UTC.
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
logger = logging.getLogger("check_subscriptions")


def main(argv=None) -> int:
    from app.config import settings
    from domain.models import SessionLocal
    from services.quota_service import QuotaService

    p = argparse.ArgumentParser(
        description="Notify expiring premium patients and expire finished subscriptions."
    )
    p.add_argument(
        "--warn-days",
        type=int,
        default=settings.subscription_warning_days,
        help="Days before expiry to notify (default: configured subscription_warning_days)",
    )
    p.add_argument(
        "--no-expire",
        dest="expire",
        action="store_false",
        help="Only report expiring subscriptions; do not downgrade anyone",
    )
    args = p.parse_args(argv)

    if args.warn_days < 0:
        logger.error("--warn-days must be >= 0")
        return 2

    db = SessionLocal()
    try:
        for notice in QuotaService.find_expiring(db, days_before=args.warn_days):
            logger.info(
                f"Expiry notice for user {notice.user_id} "
                f"({notice.tier.value}, {notice.days_left} days left)"
            )
        expired = QuotaService.expire_subscriptions(db) if args.expire else 0
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"✗ Subscription check failed: {e}")
        return 1
    finally:
        db.close()

    logger.info(f"✓ {expired} expired subscriptions moved to FREE")
    return 0


if __name__ == "__main__":
    sys.exit(main())
