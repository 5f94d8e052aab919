"""
Compatibility score (0-100) between the requesting user and one candidate.

Four weighted factors summing to 100:
  - availability overlap   40  (shared weekdays / larger of the two sets)
  - game preferences       40  (full credit if either side is open to any game)
  - experience level       10  (exact 10, adjacent 5)
  - vibe                   10  (either "both" or exact 10, otherwise 2)
"""
import math
from collections.abc import Iterable
from dataclasses import dataclass

from gamecafe.services.party_finder.types import (
    CurrentUserProfile,
    ExperienceLevel,
    PlayerRecord,
    VibePreference,
    experience_adjacent,
)

AVAILABILITY_WEIGHT = 40
GAME_PREFERENCE_WEIGHT = 40
EXPERIENCE_WEIGHT = 10
EXPERIENCE_ADJACENT_POINTS = 5
VIBE_WEIGHT = 10
VIBE_MISMATCH_POINTS = 2


def _overlap_points(weight: int, ours: set, theirs: set) -> float:
    # Divisor floor of 1: two empty sets score 0, never NaN
    return weight * len(ours & theirs) / max(len(ours), len(theirs), 1)


def availability_points(current_days: Iterable[int], candidate_days: Iterable[int]) -> float:
    return _overlap_points(AVAILABILITY_WEIGHT, set(current_days), set(candidate_days))


def game_preference_points(
    current_open_to_any: bool,
    current_game_ids: Iterable[str],
    candidate_open_to_any: bool,
    candidate_game_ids: Iterable[str],
) -> float:
    if current_open_to_any or candidate_open_to_any:
        return float(GAME_PREFERENCE_WEIGHT)
    return _overlap_points(GAME_PREFERENCE_WEIGHT, set(current_game_ids), set(candidate_game_ids))


def experience_points(current_level: str | None, candidate_level: str | None) -> int:
    ours = ExperienceLevel.parse(current_level)
    theirs = ExperienceLevel.parse(candidate_level)
    if ours is None or theirs is None:
        return 0
    if ours == theirs:
        return EXPERIENCE_WEIGHT
    if experience_adjacent(ours, theirs):
        return EXPERIENCE_ADJACENT_POINTS
    return 0


def vibe_points(current_vibe: str | None, candidate_vibe: str | None) -> int:
    ours = VibePreference.parse(current_vibe)
    theirs = VibePreference.parse(candidate_vibe)
    if VibePreference.BOTH in (ours, theirs):
        return VIBE_WEIGHT
    if ours is not None and ours == theirs:
        return VIBE_WEIGHT
    return VIBE_MISMATCH_POINTS


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class CompatibilityBreakdown:
    availability: float
    game_preferences: float
    experience: int
    vibe: int

    @property
    def total(self) -> int:
        raw = self.availability + self.game_preferences + self.experience + self.vibe
        return max(0, min(100, round_half_up(raw)))

    def to_dict(self) -> dict[str, float | int]:
        return {
            "availability": round(self.availability, 2),
            "gamePreferences": round(self.game_preferences, 2),
            "experience": self.experience,
            "vibe": self.vibe,
            "total": self.total,
        }


def compatibility_breakdown(
    current_user: CurrentUserProfile,
    current_days: Iterable[int],
    current_game_ids: Iterable[str],
    candidate: PlayerRecord,
) -> CompatibilityBreakdown:
    return CompatibilityBreakdown(
        availability=availability_points(current_days, candidate.availability),
        game_preferences=game_preference_points(
            current_user.open_to_any_game,
            current_game_ids,
            candidate.open_to_any_game,
            candidate.game_ids,
        ),
        experience=experience_points(current_user.experience_level, candidate.experience_level),
        vibe=vibe_points(current_user.vibe_preference, candidate.vibe_preference),
    )


def score_compatibility(
    current_user: CurrentUserProfile,
    current_days: Iterable[int],
    current_game_ids: Iterable[str],
    candidate: PlayerRecord,
) -> int:
    """Deterministic, side-effect-free integer score in [0, 100]."""
    return compatibility_breakdown(current_user, current_days, current_game_ids, candidate).total
