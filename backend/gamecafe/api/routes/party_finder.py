"""
Party Finder API: player directory, availability, game preferences, profile, login hook.

The current user comes from the X-User-Id header (see api/deps.py).
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from gamecafe.api.deps import get_cache, get_current_user
from gamecafe.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from gamecafe.core.errors import PartyFinderError, PartyFinderValidationError, PermissionDeniedError, to_http
from gamecafe.db.session import get_db
from gamecafe.models.user import User
from gamecafe.services.catalog_service import search_games_by_name
from gamecafe.services.party_finder.activity import reactivate_user_if_auto_rested
from gamecafe.services.party_finder.cache import TTLCache, invalidate_directory_caches
from gamecafe.services.party_finder.directory import PlayerDirectory
from gamecafe.services.party_finder.repository import PlayerRepository
from gamecafe.services.party_finder.types import (
    ContactVisibility,
    ExperienceLevel,
    PartyStatus,
    PlayerFilters,
    VibePreference,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _ensure_self(body_user_id: str, user: User) -> None:
    # Users may only edit their own party finder data
    if body_user_id != user.id:
        raise to_http(PermissionDeniedError("Forbidden"))


# --- Directory ---


@router.get("/players")
def list_players(
    page: int = Query(DEFAULT_PAGE),
    limit: int = Query(DEFAULT_PAGE_LIMIT),
    sort_by: str = Query("compatibility", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    experience: str | None = Query(None),
    vibe: str | None = Query(None),
    availability_day: str | None = Query(None),
    game_preference: str | None = Query(None),
    include_breakdown: bool = Query(False, alias="includeBreakdown"),
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
    user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """
    Paginated players with compatibility scores. Filters accept "all" for no filter.
    meta: totalCount, page, limit, totalPages, averageCompatibility.
    includeBreakdown=true adds each player's per-factor compatibility points.
    """
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_LIMIT)
    try:
        filters = PlayerFilters.from_params(
            experience=experience,
            vibe=vibe,
            availability_day=availability_day,
            game_preference=game_preference,
        )
        result = PlayerDirectory(db, cache).list_for_user(
            user,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
            filters=filters,
            include_breakdown=include_breakdown,
        )
    except PartyFinderError as e:
        raise to_http(e) from e
    except Exception as e:
        logger.exception("Error fetching paginated players: %s", e)
        raise to_http(e) from e
    return result.to_dict()


# --- Availability ---


class AvailabilityUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    selected_days: list[Any] = Field(..., alias="selectedDays")


@router.post("/availability")
def update_availability(
    body: AvailabilityUpdate,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
    user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Replace the user's available weekdays (0 = Sunday ... 6 = Saturday)."""
    _ensure_self(body.user_id, user)
    try:
        days = PlayerRepository(db).replace_availability(user.id, body.selected_days)
    except PartyFinderValidationError as e:
        raise HTTPException(status_code=400, detail="Invalid selectedDays format") from e
    except Exception as e:
        logger.exception("Error updating availability: %s", e)
        raise HTTPException(status_code=500, detail="Failed to update availability") from e
    invalidate_directory_caches(cache)
    return {"success": True, "message": "Availability updated successfully", "selectedDays": days}


# --- Game preferences ---


class GamePreferencesUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    game_preferences: list[Any] = Field(..., alias="gamePreferences")


@router.post("/game-preferences")
def update_game_preferences(
    body: GamePreferencesUpdate,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
    user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Replace the user's game preferences. Every BGG id must already be in the catalog."""
    _ensure_self(body.user_id, user)
    try:
        saved = PlayerRepository(db).replace_game_preferences(user.id, body.game_preferences)
    except PartyFinderValidationError as e:
        raise to_http(e) from e
    except Exception as e:
        logger.exception("Error updating game preferences: %s", e)
        raise HTTPException(status_code=500, detail="Failed to update game preferences") from e
    invalidate_directory_caches(cache)
    return {"success": True, "message": "Game preferences updated successfully", "gamePreferences": saved}


@router.get("/games-search")
def games_search(
    query: str | None = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[dict[str, Any]]:
    """Search the café's collection by name (min 2 chars) for the preference picker."""
    try:
        return search_games_by_name(db, query)
    except Exception as e:
        logger.exception("Error searching games: %s", e)
        raise HTTPException(status_code=500, detail="Failed to search games") from e


# --- Profile ---


class PartyProfileUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    display_name: str | None = Field(None, alias="displayName", max_length=128)
    bio: str | None = Field(None, max_length=2000)
    experience_level: ExperienceLevel | None = Field(None, alias="experienceLevel")
    vibe_preference: VibePreference | None = Field(None, alias="vibePreference")
    looking_for_party: bool | None = Field(None, alias="lookingForParty")
    party_status: PartyStatus | None = Field(None, alias="partyStatus")
    open_to_any_game: bool | None = Field(None, alias="openToAnyGame")
    contact_method: str | None = Field(None, alias="contactMethod", max_length=32)
    contact_value: str | None = Field(None, alias="contactValue", max_length=255)
    contact_visible_to: ContactVisibility | None = Field(None, alias="contactVisibleTo")


def _profile_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "displayName": user.display_name,
        "bio": user.bio,
        "experienceLevel": user.experience_level,
        "vibePreference": user.vibe_preference,
        "lookingForParty": bool(user.looking_for_party),
        "partyStatus": user.party_status,
        "openToAnyGame": bool(user.open_to_any_game),
        "contactMethod": user.contact_method,
        "contactValue": user.contact_value,
        "contactVisibleTo": user.contact_visible_to,
    }


@router.get("/profile")
def get_profile(user: User = Depends(get_current_user)) -> dict[str, Any]:
    return _profile_dict(user)


@router.put("/profile")
def update_profile(
    body: PartyProfileUpdate,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
    user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Update party finder profile fields; only fields sent are changed."""
    changes = body.model_dump(exclude_unset=True)
    for required in ("looking_for_party", "party_status", "open_to_any_game", "contact_visible_to"):
        if required in changes and changes[required] is None:
            raise HTTPException(status_code=400, detail=f"{required} cannot be null")
    try:
        user = PlayerRepository(db).update_profile(user, changes)
    except PartyFinderValidationError as e:
        raise to_http(e) from e
    except Exception as e:
        logger.exception("Error updating profile for %s: %s", user.id, e)
        raise HTTPException(status_code=500, detail="Failed to update profile") from e
    invalidate_directory_caches(cache)
    return _profile_dict(user)


# --- Login hook ---


@router.post("/login-event")
def login_event(
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
    user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """
    Called by the auth layer after a successful login: stamps last_login and reactivates
    users the inactivity sweeper set to resting. Never fails the login.
    """
    reactivated = reactivate_user_if_auto_rested(db, cache, user.id)
    return {"ok": True, "reactivated": reactivated}
