"""
Typed records for the Party Finder. Same shape regardless of where a player came from
(ORM rows, cache payloads, tests); the scorer and directory only ever see these.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from gamecafe.core.errors import PartyFinderValidationError

# Sentinel the UI sends for "no filter"; mapped to None at the edge.
ANY_FILTER_VALUE = "all"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def rank(self) -> int:
        return _EXPERIENCE_RANKS[self]

    @classmethod
    def parse(cls, value: str | None) -> "ExperienceLevel | None":
        """Lenient parse for stored values: unknown or empty -> None."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_EXPERIENCE_RANKS = {
    ExperienceLevel.BEGINNER: 1,
    ExperienceLevel.INTERMEDIATE: 2,
    ExperienceLevel.ADVANCED: 3,
}


def experience_rank(value: str | None) -> int:
    """Ordinal for sorting; unset or unknown levels rank lowest (0)."""
    level = ExperienceLevel.parse(value)
    return level.rank if level else 0


def experience_adjacent(a: ExperienceLevel, b: ExperienceLevel) -> bool:
    """Levels one step apart (intermediate bridges beginner and advanced)."""
    return abs(a.rank - b.rank) == 1


class VibePreference(str, Enum):
    CASUAL = "casual"
    COMPETITIVE = "competitive"
    BOTH = "both"

    @classmethod
    def parse(cls, value: str | None) -> "VibePreference | None":
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class PartyStatus(str, Enum):
    ACTIVE = "active"
    RESTING = "resting"


class ContactVisibility(str, Enum):
    NONE = "none"
    MATCHES = "matches"
    ALL = "all"


class SortField(str, Enum):
    COMPATIBILITY = "compatibility"
    DISPLAY_NAME = "displayName"
    EXPERIENCE_LEVEL = "experienceLevel"
    LAST_LOGIN = "lastLogin"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything in the core is UTC-aware."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class GamePreferenceRecord:
    bgg_id: str
    name: str | None = None
    thumbnail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"gameBggId": self.bgg_id, "name": self.name, "thumbnail": self.thumbnail}


@dataclass(frozen=True)
class PlayerRecord:
    """One candidate player with their availability days and game preferences attached."""

    id: str
    username: str
    display_name: str | None = None
    bio: str | None = None
    experience_level: str | None = None
    vibe_preference: str | None = None
    looking_for_party: bool = False
    party_status: str = PartyStatus.RESTING.value
    open_to_any_game: bool = False
    contact_method: str | None = None
    contact_value: str | None = None
    contact_visible_to: str = ContactVisibility.MATCHES.value
    last_login: datetime | None = None
    availability: tuple[int, ...] = ()
    game_preferences: tuple[GamePreferenceRecord, ...] = ()

    @property
    def game_ids(self) -> frozenset[str]:
        return frozenset(p.bgg_id for p in self.game_preferences)

    def with_details(
        self,
        availability: tuple[int, ...],
        game_preferences: tuple[GamePreferenceRecord, ...],
    ) -> "PlayerRecord":
        return replace(self, availability=availability, game_preferences=game_preferences)

    def contact_is_visible(self) -> bool:
        return self.contact_visible_to in (ContactVisibility.MATCHES.value, ContactVisibility.ALL.value)


@dataclass(frozen=True)
class CurrentUserProfile:
    """The requesting user's matching attributes (availability/preferences are passed separately)."""

    id: str
    experience_level: str | None = None
    vibe_preference: str | None = None
    open_to_any_game: bool = False
    looking_for_party: bool = False
    party_status: str = PartyStatus.RESTING.value


def _is_unset(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip().lower() in ("", ANY_FILTER_VALUE)


@dataclass(frozen=True)
class PlayerFilters:
    """User-supplied filters, each AND-combined. None means unfiltered."""

    experience: ExperienceLevel | None = None
    vibe: VibePreference | None = None
    availability_day: int | None = None
    game_preference: str | None = None

    @classmethod
    def from_params(
        cls,
        experience: str | None = None,
        vibe: str | None = None,
        availability_day: str | int | None = None,
        game_preference: str | None = None,
    ) -> "PlayerFilters":
        """Parse raw query params; "all" or empty means unset. Anything else must be valid."""
        exp = None
        if not _is_unset(experience):
            exp = ExperienceLevel.parse(experience)
            if exp is None:
                raise PartyFinderValidationError(f"Invalid experience filter: {experience!r}")
        vib = None
        if not _is_unset(vibe):
            vib = VibePreference.parse(vibe)
            if vib is None:
                raise PartyFinderValidationError(f"Invalid vibe filter: {vibe!r}")
        day = None
        if not _is_unset(availability_day):
            try:
                day = int(availability_day)
            except (TypeError, ValueError):
                raise PartyFinderValidationError(f"Invalid availability_day filter: {availability_day!r}") from None
            validate_day(day)
        game = None
        if not _is_unset(game_preference):
            game = str(game_preference).strip()
        return cls(experience=exp, vibe=vib, availability_day=day, game_preference=game)


def validate_day(day: Any) -> int:
    # bool is an int subclass; True is not a weekday
    if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
        raise PartyFinderValidationError(f"Invalid day of week: {day!r} (expected 0-6)")
    return day


@dataclass(frozen=True)
class ScoredPlayer:
    player: PlayerRecord
    compatibility: int
    breakdown: dict[str, float | int] | None = None

    def to_dict(self) -> dict[str, Any]:
        p = self.player
        visible = p.contact_is_visible()
        data = {
            "id": p.id,
            "username": p.username,
            "displayName": p.display_name,
            "bio": p.bio,
            "experienceLevel": p.experience_level,
            "vibePreference": p.vibe_preference,
            "lookingForParty": p.looking_for_party,
            "partyStatus": p.party_status,
            "openToAnyGame": p.open_to_any_game,
            "contactVisibleTo": p.contact_visible_to,
            "contactMethod": p.contact_method if visible else None,
            "contactValue": p.contact_value if visible else None,
            "lastLogin": p.last_login.isoformat() if p.last_login else None,
            "availability": [{"dayOfWeek": d} for d in sorted(p.availability)],
            "gamePreferences": [g.to_dict() for g in p.game_preferences],
            "compatibility": self.compatibility,
        }
        if self.breakdown is not None:
            data["compatibilityBreakdown"] = self.breakdown
        return data


@dataclass
class DirectoryPage:
    data: list[ScoredPlayer] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    limit: int = 20
    total_pages: int = 0
    average_compatibility: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [p.to_dict() for p in self.data],
            "meta": {
                "totalCount": self.total_count,
                "page": self.page,
                "limit": self.limit,
                "totalPages": self.total_pages,
                "averageCompatibility": self.average_compatibility,
            },
        }
