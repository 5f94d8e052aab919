"""
Player directory: filter, score, sort and paginate candidate players for one user.

list_players is pure (no I/O). PlayerDirectory loads the candidate pool and its
availability/preference joins through the cache, then hands them to list_players.
"""
import hashlib
import logging
import math
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from gamecafe.core.constants import (
    AVAILABILITY_CACHE_PREFIX,
    DEFAULT_PAGE,
    DEFAULT_PAGE_LIMIT,
    PLAYER_DETAILS_CACHE_TTL_SECONDS,
    PLAYERS_CACHE_PREFIX,
    PLAYERS_CACHE_TTL_SECONDS,
    PREFERENCES_CACHE_PREFIX,
)
from gamecafe.core.errors import PartyFinderValidationError
from gamecafe.models.user import User
from gamecafe.services.party_finder.activity import get_inactive_days_threshold, inactivity_cutoff
from gamecafe.services.party_finder.cache import TTLCache
from gamecafe.services.party_finder.compatibility import compatibility_breakdown, round_half_up
from gamecafe.services.party_finder.repository import PlayerRepository, current_user_profile
from gamecafe.services.party_finder.types import (
    CurrentUserProfile,
    DirectoryPage,
    PlayerFilters,
    PlayerRecord,
    ScoredPlayer,
    SortField,
    SortOrder,
    VibePreference,
    experience_rank,
)

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _parse_sort(sort_by: str | SortField, sort_order: str | SortOrder) -> tuple[SortField, SortOrder]:
    try:
        field = SortField(sort_by)
    except ValueError:
        allowed = ", ".join(f.value for f in SortField)
        raise PartyFinderValidationError(f"Invalid sortBy: {sort_by!r} (expected one of {allowed})") from None
    try:
        order = SortOrder(str(sort_order).lower())
    except ValueError:
        raise PartyFinderValidationError(f"Invalid sortOrder: {sort_order!r} (expected asc or desc)") from None
    return field, order


def matches_filters(player: PlayerRecord, filters: PlayerFilters) -> bool:
    """All set filters must hold (AND)."""
    if filters.experience is not None and player.experience_level != filters.experience.value:
        return False
    if filters.vibe is not None and player.vibe_preference not in (filters.vibe.value, VibePreference.BOTH.value):
        return False
    if filters.availability_day is not None and filters.availability_day not in player.availability:
        return False
    if filters.game_preference is not None:
        if not player.open_to_any_game and filters.game_preference not in player.game_ids:
            return False
    return True


def _sort_key(field: SortField) -> Callable[[ScoredPlayer], Any]:
    if field is SortField.DISPLAY_NAME:
        return lambda sp: (sp.player.display_name or sp.player.username or "").casefold()
    if field is SortField.EXPERIENCE_LEVEL:
        return lambda sp: experience_rank(sp.player.experience_level)
    if field is SortField.LAST_LOGIN:
        return lambda sp: sp.player.last_login or _EPOCH
    return lambda sp: sp.compatibility


def list_players(
    current_user: CurrentUserProfile,
    current_availability: Iterable[int],
    current_preferences: Iterable[str],
    candidate_pool: Sequence[PlayerRecord],
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_PAGE_LIMIT,
    sort_by: str | SortField = SortField.COMPATIBILITY,
    sort_order: str | SortOrder = SortOrder.DESC,
    filters: PlayerFilters | None = None,
    include_breakdown: bool = False,
) -> DirectoryPage:
    """
    1. drop the requesting user  2. apply filters  3. score  4. sort  5. slice the page
    6. meta: totalCount/totalPages and averageCompatibility over the whole filtered set.
    include_breakdown attaches the per-factor points to each player (debugging the score).
    """
    field, order = _parse_sort(sort_by, sort_order)
    if page < 1 or limit < 1:
        raise PartyFinderValidationError(f"page and limit must be positive (got page={page}, limit={limit})")
    filters = filters or PlayerFilters()
    days = set(current_availability)
    game_ids = set(current_preferences)

    scored = []
    for p in candidate_pool:
        if p.id == current_user.id or not matches_filters(p, filters):
            continue
        breakdown = compatibility_breakdown(current_user, days, game_ids, p)
        scored.append(
            ScoredPlayer(
                player=p,
                compatibility=breakdown.total,
                breakdown=breakdown.to_dict() if include_breakdown else None,
            )
        )
    scored.sort(key=_sort_key(field), reverse=order is SortOrder.DESC)

    total = len(scored)
    offset = (page - 1) * limit
    average = round_half_up(sum(sp.compatibility for sp in scored) / total) if total else 0
    return DirectoryPage(
        data=scored[offset:offset + limit],
        total_count=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
        average_compatibility=average,
    )


def _ids_digest(ids: Iterable[str]) -> str:
    """Stable, short cache-key suffix for a set of player ids."""
    raw = "_".join(sorted(ids))
    return hashlib.sha256(raw.encode()).hexdigest()[:32]


class PlayerDirectory:
    """Loads the eligible candidate pool (read-through cache) and lists players for a user."""

    def __init__(self, db: Session, cache: TTLCache, now: Callable[[], datetime] | None = None) -> None:
        self._db = db
        self._cache = cache
        self._repo = PlayerRepository(db)
        self._now = now or (lambda: datetime.now(timezone.utc))

    def load_candidate_pool(self) -> list[PlayerRecord]:
        """
        Eligible players with availability and game preferences attached. Storage errors propagate.

        The pool is cached per threshold. A cached pool was queried with an earlier (looser)
        cutoff, so it is re-filtered against the exact cutoff for this request.
        """
        inactive_days = get_inactive_days_threshold(self._db, self._cache)
        cutoff = inactivity_cutoff(inactive_days, self._now())
        cached = self._cache.get_or_set(
            f"{PLAYERS_CACHE_PREFIX}{inactive_days}d",
            PLAYERS_CACHE_TTL_SECONDS,
            lambda: self._repo.eligible_players(cutoff),
        )
        players = [p for p in cached if p.last_login is not None and p.last_login >= cutoff]
        if not players:
            return []

        ids = [p.id for p in players]
        digest = _ids_digest(ids)
        availability = self._cache.get_or_set(
            f"{AVAILABILITY_CACHE_PREFIX}{digest}",
            PLAYER_DETAILS_CACHE_TTL_SECONDS,
            lambda: self._repo.availability_for(ids),
        )
        preferences = self._cache.get_or_set(
            f"{PREFERENCES_CACHE_PREFIX}{digest}",
            PLAYER_DETAILS_CACHE_TTL_SECONDS,
            lambda: self._repo.preferences_for(ids),
        )
        return [p.with_details(availability.get(p.id, ()), preferences.get(p.id, ())) for p in players]

    def list_for_user(
        self,
        user: User,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_LIMIT,
        sort_by: str = SortField.COMPATIBILITY.value,
        sort_order: str = SortOrder.DESC.value,
        filters: PlayerFilters | None = None,
        include_breakdown: bool = False,
    ) -> DirectoryPage:
        # Validate before any storage work
        _parse_sort(sort_by, sort_order)
        own_days = self._repo.user_availability_days(user.id)
        own_games = self._repo.user_game_ids(user.id)
        pool = self.load_candidate_pool()
        result = list_players(
            current_user_profile(user),
            own_days,
            own_games,
            pool,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
            filters=filters,
            include_breakdown=include_breakdown,
        )
        logger.debug(
            "Listed players for %s: %s matches, page %s/%s",
            user.id, result.total_count, result.page, result.total_pages,
        )
        return result
