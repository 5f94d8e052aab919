from gamecafe.services.party_finder.compatibility import (
    availability_points,
    compatibility_breakdown,
    experience_points,
    game_preference_points,
    round_half_up,
    score_compatibility,
    vibe_points,
)
from gamecafe.services.party_finder.types import CurrentUserProfile, GamePreferenceRecord, PlayerRecord


def _me(**fields):
    return CurrentUserProfile(id="me", **fields)


def _candidate(days=(), games=(), **fields):
    prefs = tuple(GamePreferenceRecord(bgg_id=g) for g in games)
    return PlayerRecord(id="c1", username="c1", availability=tuple(days), game_preferences=prefs, **fields)


def test_perfect_match_scores_100():
    me = _me(experience_level="intermediate", vibe_preference="casual")
    other = _candidate(days=[1, 3, 5], games=["g1"], experience_level="intermediate", vibe_preference="casual")
    assert score_compatibility(me, {1, 3, 5}, {"g1"}, other) == 100


def test_partial_match():
    me = _me(experience_level="beginner", vibe_preference="casual")
    other = _candidate(days=[1, 2, 3], games=["g1", "g3"], experience_level="intermediate", vibe_preference="casual")
    # availability 40*1/3, games 40*1/2, experience adjacent 5, vibe 10
    assert score_compatibility(me, {1, 4}, {"g1", "g2"}, other) == 48


def test_nothing_in_common_gets_vibe_floor():
    me = _me(experience_level="beginner", vibe_preference="casual")
    other = _candidate(days=[2], games=["g2"], experience_level="advanced", vibe_preference="competitive")
    assert score_compatibility(me, {1}, {"g1"}, other) == 2


def test_empty_sets_score_zero_not_nan():
    assert availability_points([], []) == 0
    assert game_preference_points(False, [], False, []) == 0


def test_overlap_uses_larger_set():
    assert availability_points([1], [1, 2, 3, 4]) == 10
    assert availability_points([1, 2, 3, 4], [1]) == 10


def test_open_to_any_game_gives_full_game_credit():
    assert game_preference_points(True, [], False, ["g9"]) == 40
    assert game_preference_points(False, ["g1"], True, []) == 40


def test_experience_levels():
    assert experience_points("advanced", "advanced") == 10
    assert experience_points("beginner", "intermediate") == 5
    assert experience_points("advanced", "intermediate") == 5
    assert experience_points("beginner", "advanced") == 0
    assert experience_points(None, "advanced") == 0
    assert experience_points("expert", "advanced") == 0


def test_vibe():
    assert vibe_points("casual", "casual") == 10
    assert vibe_points("competitive", "both") == 10
    assert vibe_points("both", None) == 10
    assert vibe_points("casual", "competitive") == 2
    assert vibe_points(None, None) == 2
    assert vibe_points("casual", None) == 2


def test_round_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(13.5) == 14
    assert round_half_up(48.333) == 48
    assert round_half_up(0.49) == 0


def test_breakdown_total_matches_score():
    me = _me(experience_level="beginner", vibe_preference="casual")
    other = _candidate(days=[0, 6], games=["g1"], experience_level="beginner", vibe_preference="both")
    breakdown = compatibility_breakdown(me, {0}, {"g1", "g2"}, other)
    assert breakdown.to_dict() == {
        "availability": 20.0,
        "gamePreferences": 20.0,
        "experience": 10,
        "vibe": 10,
        "total": 60,
    }
    assert breakdown.total == score_compatibility(me, {0}, {"g1", "g2"}, other)


def test_score_is_bounded_and_deterministic():
    me = _me(open_to_any_game=True, experience_level="advanced", vibe_preference="both")
    other = _candidate(days=list(range(7)), experience_level="advanced")
    first = score_compatibility(me, set(range(7)), set(), other)
    assert first == score_compatibility(me, set(range(7)), set(), other)
    assert 0 <= first <= 100
