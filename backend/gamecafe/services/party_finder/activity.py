"""
Activity tracking for the Party Finder: the inactivity sweeper (active -> resting after N
days without login) and reactivation of auto-rested users when they log back in.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from gamecafe.core.constants import (
    DEFAULT_INACTIVE_DAYS,
    INACTIVE_DAYS_CACHE_KEY,
    INACTIVE_DAYS_CACHE_TTL_SECONDS,
    INACTIVE_DAYS_SETTING_KEY,
)
from gamecafe.services.party_finder.cache import TTLCache, invalidate_directory_caches
from gamecafe.services.party_finder.repository import PlayerRepository
from gamecafe.services.party_finder.types import PartyStatus, as_utc
from gamecafe.services.settings_service import get_setting, parse_inactive_days

logger = logging.getLogger(__name__)


@dataclass
class CleanupResult:
    updated: int = 0
    errors: list[str] = field(default_factory=list)


def get_inactive_days_threshold(db: Session, cache: TTLCache) -> int:
    """Configured inactivity threshold in days (cached 30 min). Falls back to 14 on any error."""
    try:
        return cache.get_or_set(
            INACTIVE_DAYS_CACHE_KEY,
            INACTIVE_DAYS_CACHE_TTL_SECONDS,
            lambda: parse_inactive_days(get_setting(db, INACTIVE_DAYS_SETTING_KEY)),
        )
    except Exception as e:
        logger.warning("Error fetching inactive days threshold (using %s): %s", DEFAULT_INACTIVE_DAYS, e)
        db.rollback()
        return DEFAULT_INACTIVE_DAYS


def inactivity_cutoff(inactive_days: int, now: datetime | None = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=inactive_days)


def should_user_be_visible(
    looking_for_party: bool,
    party_status: str | None,
    last_login: datetime | None,
    inactive_days: int,
    now: datetime | None = None,
) -> bool:
    """Eligibility: looking for a party, active, and logged in within the threshold."""
    if not looking_for_party:
        return False
    if party_status != PartyStatus.ACTIVE.value:
        return False
    if last_login is None:
        return False
    return as_utc(last_login) > inactivity_cutoff(inactive_days, now)


def cleanup_inactive_users(db: Session, cache: TTLCache, now: datetime | None = None) -> CleanupResult:
    """
    Set active, looking users who have not logged in within the threshold to resting.
    looking_for_party is left as-is so reactivate_user_if_auto_rested can bring them back.
    One failed update is recorded and the batch continues; never raises.
    """
    result = CleanupResult()
    repo = PlayerRepository(db)
    try:
        inactive_days = get_inactive_days_threshold(db, cache)
        cutoff = inactivity_cutoff(inactive_days, now)
        stale = repo.stale_active_players(cutoff)
        logger.info("Found %s inactive users to rest (threshold %s days)", len(stale), inactive_days)

        for user_id, username in stale:
            try:
                repo.set_party_status(user_id, PartyStatus.RESTING)
                result.updated += 1
                logger.info("Set user %s (%s) to resting due to inactivity", username, user_id)
            except Exception as e:
                db.rollback()
                msg = f"Failed to update user {username} ({user_id}): {e}"
                result.errors.append(msg)
                logger.exception(msg)

        invalidate_directory_caches(cache)
        logger.info("Cleanup complete: %s users set to resting, %s errors", result.updated, len(result.errors))
    except Exception as e:
        db.rollback()
        msg = f"Error during cleanup process: {e}"
        result.errors.append(msg)
        logger.exception(msg)
    return result


def reactivate_user_if_auto_rested(
    db: Session,
    cache: TTLCache,
    user_id: str,
    now: datetime | None = None,
) -> bool:
    """
    Login hook. A resting user who is still looking for a party was auto-rested: flip them
    back to active. Everyone else only gets last_login stamped. Never raises.
    Returns True when the user was reactivated.
    """
    now = now or datetime.now(timezone.utc)
    repo = PlayerRepository(db)
    try:
        user = repo.get_user(user_id)
        if user is None:
            logger.warning("Reactivation skipped: user %s not found", user_id)
            return False
        if user.party_status == PartyStatus.RESTING.value and user.looking_for_party:
            repo.set_party_status(user_id, PartyStatus.ACTIVE, last_login=now)
            logger.info("Reactivated user %s on login", user_id)
            invalidate_directory_caches(cache)
            return True
        repo.touch_last_login(user_id, now)
        return False
    except Exception as e:
        db.rollback()
        logger.error("Error reactivating user %s: %s", user_id, e)
        return False
