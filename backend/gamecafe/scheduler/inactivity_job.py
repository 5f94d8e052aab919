"""
Daily Party Finder cleanup: set users who have not logged in within the configured
threshold (system_settings.party_finder_inactive_days) to resting.

Scheduled by APScheduler in main.py; overlapping runs are prevented with max_instances=1.
"""
import logging
import time

from gamecafe.db.session import SessionLocal
from gamecafe.services.party_finder.activity import CleanupResult, cleanup_inactive_users
from gamecafe.services.party_finder.cache import TTLCache

logger = logging.getLogger(__name__)


def run_inactive_user_cleanup_job(cache: TTLCache) -> CleanupResult | None:
    db = SessionLocal()
    try:
        logger.info("Starting daily party finder cleanup job")
        start = time.monotonic()
        result = cleanup_inactive_users(db, cache)
        logger.info(
            "Cleanup job completed in %.0fms: %s users set to resting, %s errors",
            (time.monotonic() - start) * 1000,
            result.updated,
            len(result.errors),
        )
        return result
    except Exception as e:
        logger.exception("Cleanup job failed: %s", e)
        db.rollback()
        return None
    finally:
        db.close()
