"""Admin: Party Finder settings (inactivity threshold)."""
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from gamecafe.api.deps import get_cache, require_admin
from gamecafe.core.errors import PartyFinderValidationError, to_http
from gamecafe.db.session import get_db
from gamecafe.models.user import User
from gamecafe.services.party_finder.cache import TTLCache, invalidate_directory_caches
from gamecafe.services.settings_service import get_inactive_days_setting, set_inactive_days_setting

router = APIRouter()
logger = logging.getLogger(__name__)


class PartyFinderSettingsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    inactive_days: int = Field(..., alias="inactiveDays")


@router.get("/party-finder-settings")
def get_party_finder_settings(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> dict[str, Any]:
    return {"inactiveDays": get_inactive_days_setting(db)}


@router.put("/party-finder-settings")
def update_party_finder_settings(
    body: PartyFinderSettingsUpdate,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
    admin: User = Depends(require_admin),
) -> dict[str, Any]:
    """Set days before inactive users are automatically set to resting (1-365)."""
    try:
        set_inactive_days_setting(db, body.inactive_days)
    except PartyFinderValidationError as e:
        raise to_http(e) from e
    except Exception as e:
        db.rollback()
        logger.exception("Error updating party finder settings: %s", e)
        raise HTTPException(status_code=500, detail="Failed to update settings. Please try again.") from e
    # Threshold is cached and changes who is eligible
    invalidate_directory_caches(cache)
    days = body.inactive_days
    return {
        "success": True,
        "inactiveDays": days,
        "message": f"Settings updated successfully. Users inactive for {days} days will be automatically set to resting.",
    }
