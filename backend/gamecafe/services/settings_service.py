"""
System settings: key/value rows edited from the admin page.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from gamecafe.core.constants import (
    DEFAULT_INACTIVE_DAYS,
    INACTIVE_DAYS_SETTING_DESCRIPTION,
    INACTIVE_DAYS_SETTING_KEY,
    MAX_INACTIVE_DAYS,
    MIN_INACTIVE_DAYS,
)
from gamecafe.core.errors import PartyFinderValidationError
from gamecafe.models.system_setting import SystemSetting

logger = logging.getLogger(__name__)


def get_setting(db: Session, key: str) -> str | None:
    row = db.query(SystemSetting).filter(SystemSetting.key == key).first()
    return row.value if row else None


def upsert_setting(db: Session, key: str, value: str, description: str | None = None) -> SystemSetting:
    """Insert or update one setting on its unique key."""
    now = datetime.now(timezone.utc)
    row = db.query(SystemSetting).filter(SystemSetting.key == key).first()
    if row:
        row.value = value
        row.updated_at = now
        if description:
            row.description = description
    else:
        row = SystemSetting(key=key, value=value, description=description, updated_at=now)
        db.add(row)
    db.commit()
    db.refresh(row)
    return row


def parse_inactive_days(raw: str | None) -> int:
    """Stored value -> int; missing or garbage falls back to the default."""
    if raw is None or not str(raw).strip():
        return DEFAULT_INACTIVE_DAYS
    try:
        days = int(str(raw).strip())
    except ValueError:
        logger.warning("Invalid %s value %r; using default %s", INACTIVE_DAYS_SETTING_KEY, raw, DEFAULT_INACTIVE_DAYS)
        return DEFAULT_INACTIVE_DAYS
    if days < MIN_INACTIVE_DAYS:
        return DEFAULT_INACTIVE_DAYS
    return days


def get_inactive_days_setting(db: Session) -> int:
    """Uncached read for the admin page."""
    return parse_inactive_days(get_setting(db, INACTIVE_DAYS_SETTING_KEY))


def set_inactive_days_setting(db: Session, days: int) -> SystemSetting:
    if isinstance(days, bool) or not isinstance(days, int) or not MIN_INACTIVE_DAYS <= days <= MAX_INACTIVE_DAYS:
        raise PartyFinderValidationError(
            f"Invalid number of days. Must be between {MIN_INACTIVE_DAYS} and {MAX_INACTIVE_DAYS}."
        )
    row = upsert_setting(db, INACTIVE_DAYS_SETTING_KEY, str(days), INACTIVE_DAYS_SETTING_DESCRIPTION)
    logger.info("Set %s=%s", INACTIVE_DAYS_SETTING_KEY, days)
    return row
