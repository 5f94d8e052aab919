"""
Party Finder storage access. Turns ORM rows into the typed records in types.py once,
so scoring and pagination never touch row shapes.
"""
import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime
from enum import Enum

from sqlalchemy.orm import Session

from gamecafe.core.errors import PartyFinderValidationError
from gamecafe.models.board_game import BoardGame
from gamecafe.models.user import User
from gamecafe.models.user_availability import UserAvailability
from gamecafe.models.user_game_preference import UserGamePreference
from gamecafe.services.party_finder.types import (
    CurrentUserProfile,
    GamePreferenceRecord,
    PartyStatus,
    PlayerRecord,
    as_utc,
    validate_day,
)

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = frozenset({
    "display_name",
    "bio",
    "experience_level",
    "vibe_preference",
    "looking_for_party",
    "party_status",
    "open_to_any_game",
    "contact_method",
    "contact_value",
    "contact_visible_to",
})


def player_from_row(row: User) -> PlayerRecord:
    return PlayerRecord(
        id=row.id,
        username=row.username,
        display_name=row.display_name,
        bio=row.bio,
        experience_level=row.experience_level,
        vibe_preference=row.vibe_preference,
        looking_for_party=bool(row.looking_for_party),
        party_status=row.party_status or PartyStatus.RESTING.value,
        open_to_any_game=bool(row.open_to_any_game),
        contact_method=row.contact_method,
        contact_value=row.contact_value,
        contact_visible_to=row.contact_visible_to or "matches",
        last_login=as_utc(row.last_login),
    )


def current_user_profile(row: User) -> CurrentUserProfile:
    return CurrentUserProfile(
        id=row.id,
        experience_level=row.experience_level,
        vibe_preference=row.vibe_preference,
        open_to_any_game=bool(row.open_to_any_game),
        looking_for_party=bool(row.looking_for_party),
        party_status=row.party_status or PartyStatus.RESTING.value,
    )


class PlayerRepository:
    """Reads and writes for users, availability and game preferences."""

    def __init__(self, db: Session) -> None:
        self._db = db

    # --- Users ---

    def get_user(self, user_id: str) -> User | None:
        return self._db.query(User).filter(User.id == user_id).first()

    def eligible_players(self, cutoff: datetime) -> list[PlayerRecord]:
        """Looking for a party, active, and logged in since cutoff. No details attached."""
        rows = (
            self._db.query(User)
            .filter(
                User.looking_for_party.is_(True),
                User.party_status == PartyStatus.ACTIVE.value,
                User.last_login >= cutoff,
            )
            .all()
        )
        return [player_from_row(r) for r in rows]

    def stale_active_players(self, cutoff: datetime) -> list[tuple[str, str]]:
        """(id, username) of active, looking users whose last login is before cutoff."""
        rows = (
            self._db.query(User.id, User.username)
            .filter(
                User.party_status == PartyStatus.ACTIVE.value,
                User.looking_for_party.is_(True),
                User.last_login < cutoff,
            )
            .all()
        )
        return [(r.id, r.username) for r in rows]

    def set_party_status(self, user_id: str, status: PartyStatus, *, last_login: datetime | None = None) -> int:
        values = {User.party_status: status.value}
        if last_login is not None:
            values[User.last_login] = last_login
        updated = self._db.query(User).filter(User.id == user_id).update(values, synchronize_session=False)
        self._db.commit()
        return updated

    def update_profile(self, user: User, changes: dict) -> User:
        """Apply party-profile column changes (already validated) to the user row."""
        for column, value in changes.items():
            if column not in PROFILE_COLUMNS:
                raise PartyFinderValidationError(f"Unknown profile field: {column}")
            setattr(user, column, value.value if isinstance(value, Enum) else value)
        try:
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise
        self._db.refresh(user)
        return user

    def touch_last_login(self, user_id: str, when: datetime) -> int:
        updated = (
            self._db.query(User)
            .filter(User.id == user_id)
            .update({User.last_login: when}, synchronize_session=False)
        )
        self._db.commit()
        return updated

    # --- Availability ---

    def availability_for(self, user_ids: Iterable[str]) -> dict[str, tuple[int, ...]]:
        ids = list(user_ids)
        if not ids:
            return {}
        days: dict[str, set[int]] = defaultdict(set)
        rows = (
            self._db.query(UserAvailability.user_id, UserAvailability.day_of_week)
            .filter(UserAvailability.user_id.in_(ids))
            .all()
        )
        for r in rows:
            days[r.user_id].add(r.day_of_week)
        return {uid: tuple(sorted(d)) for uid, d in days.items()}

    def user_availability_days(self, user_id: str) -> list[int]:
        return list(self.availability_for([user_id]).get(user_id, ()))

    def replace_availability(self, user_id: str, days: Iterable[int]) -> list[int]:
        """Replace all availability rows for the user. Days must be ints in [0, 6]."""
        selected = sorted({validate_day(d) for d in days})
        try:
            self._db.query(UserAvailability).filter(UserAvailability.user_id == user_id).delete(
                synchronize_session=False
            )
            for day in selected:
                # Time slots reserved for later; only weekdays are scored
                self._db.add(UserAvailability(user_id=user_id, day_of_week=day, time_slot_start=None, time_slot_end=None))
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise
        return selected

    # --- Game preferences ---

    def preferences_for(self, user_ids: Iterable[str]) -> dict[str, tuple[GamePreferenceRecord, ...]]:
        ids = list(user_ids)
        if not ids:
            return {}
        rows = (
            self._db.query(
                UserGamePreference.user_id,
                UserGamePreference.game_bgg_id,
                BoardGame.name,
                BoardGame.thumbnail,
            )
            .join(BoardGame, UserGamePreference.game_bgg_id == BoardGame.bgg_id)
            .filter(UserGamePreference.user_id.in_(ids))
            .order_by(BoardGame.name.asc())
            .all()
        )
        prefs: dict[str, list[GamePreferenceRecord]] = defaultdict(list)
        for r in rows:
            prefs[r.user_id].append(GamePreferenceRecord(bgg_id=r.game_bgg_id, name=r.name, thumbnail=r.thumbnail))
        return {uid: tuple(p) for uid, p in prefs.items()}

    def user_game_ids(self, user_id: str) -> list[str]:
        rows = (
            self._db.query(UserGamePreference.game_bgg_id)
            .filter(UserGamePreference.user_id == user_id)
            .all()
        )
        return [r.game_bgg_id for r in rows]

    def missing_game_ids(self, bgg_ids: Iterable[str]) -> list[str]:
        wanted = list(dict.fromkeys(bgg_ids))
        if not wanted:
            return []
        existing = {
            r.bgg_id for r in self._db.query(BoardGame.bgg_id).filter(BoardGame.bgg_id.in_(wanted)).all()
        }
        return [gid for gid in wanted if gid not in existing]

    def replace_game_preferences(self, user_id: str, bgg_ids: Iterable[str]) -> list[str]:
        """Replace all preferences; every id must already be in the catalog."""
        selected = list(dict.fromkeys(bgg_ids))
        if any(not isinstance(gid, str) or not gid for gid in selected):
            raise PartyFinderValidationError("Invalid gamePreferences format")
        missing = self.missing_game_ids(selected)
        if missing:
            raise PartyFinderValidationError(f"Invalid games: {', '.join(missing)}")
        try:
            self._db.query(UserGamePreference).filter(UserGamePreference.user_id == user_id).delete(
                synchronize_session=False
            )
            for gid in selected:
                self._db.add(UserGamePreference(user_id=user_id, game_bgg_id=gid))
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise
        return selected
