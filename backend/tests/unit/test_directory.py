from datetime import datetime, timedelta, timezone

import pytest

from factories import make_game, make_user, set_days, set_games
from gamecafe.core.errors import PartyFinderValidationError
from gamecafe.services.party_finder.cache import TTLCache
from gamecafe.services.party_finder.directory import PlayerDirectory, list_players, matches_filters
from gamecafe.services.party_finder.types import (
    CurrentUserProfile,
    GamePreferenceRecord,
    PlayerFilters,
    PlayerRecord,
)

ME = CurrentUserProfile(id="me", experience_level="intermediate", vibe_preference="casual")


def _player(pid, days=(), games=(), **fields):
    fields.setdefault("username", pid)
    prefs = tuple(GamePreferenceRecord(bgg_id=g) for g in games)
    return PlayerRecord(id=pid, availability=tuple(days), game_preferences=prefs, **fields)


def test_excludes_requesting_user():
    pool = [_player("me"), _player("a"), _player("b")]
    page = list_players(ME, [], [], pool)
    assert [sp.player.id for sp in page.data] == ["a", "b"]
    assert page.total_count == 2


def test_sorted_by_compatibility_desc_by_default():
    low = _player("low", experience_level="advanced", vibe_preference="competitive")
    high = _player("high", days=[1, 2], games=["g1"], experience_level="intermediate", vibe_preference="casual")
    mid = _player("mid", days=[1], experience_level="intermediate", vibe_preference="casual")
    page = list_players(ME, [1, 2], ["g1"], [low, high, mid])
    assert [sp.player.id for sp in page.data] == ["high", "mid", "low"]
    scores = [sp.compatibility for sp in page.data]
    assert scores == sorted(scores, reverse=True)


def test_sort_ascending():
    low = _player("low", vibe_preference="competitive")
    high = _player("high", days=[1], vibe_preference="casual")
    page = list_players(ME, [1], [], [high, low], sort_order="asc")
    assert [sp.player.id for sp in page.data] == ["low", "high"]


def test_ties_keep_pool_order():
    pool = [_player(pid) for pid in ("c", "a", "b")]
    page = list_players(ME, [], [], pool)
    assert [sp.player.id for sp in page.data] == ["c", "a", "b"]


def test_sort_by_display_name_falls_back_to_username():
    pool = [
        _player("1", username="zed"),
        _player("2", username="x", display_name="alice"),
        _player("3", username="Bob"),
    ]
    page = list_players(ME, [], [], pool, sort_by="displayName", sort_order="asc")
    assert [sp.player.id for sp in page.data] == ["2", "3", "1"]


def test_sort_by_experience_level():
    pool = [
        _player("a", experience_level="advanced"),
        _player("n"),
        _player("b", experience_level="beginner"),
    ]
    page = list_players(ME, [], [], pool, sort_by="experienceLevel", sort_order="desc")
    assert [sp.player.id for sp in page.data] == ["a", "b", "n"]


def test_sort_by_last_login_puts_never_logged_in_last():
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    pool = [
        _player("old", last_login=now - timedelta(days=5)),
        _player("never"),
        _player("new", last_login=now),
    ]
    page = list_players(ME, [], [], pool, sort_by="lastLogin", sort_order="desc")
    assert [sp.player.id for sp in page.data] == ["new", "old", "never"]


def test_pagination_and_meta():
    pool = [_player(f"p{i:02d}") for i in range(45)]
    first = list_players(ME, [], [], pool, page=1, limit=20)
    last = list_players(ME, [], [], pool, page=3, limit=20)
    beyond = list_players(ME, [], [], pool, page=4, limit=20)
    assert len(first.data) == 20
    assert len(last.data) == 5
    assert beyond.data == []
    assert first.total_count == last.total_count == 45
    assert first.total_pages == 3
    assert beyond.to_dict()["meta"]["page"] == 4


def test_average_compatibility_over_whole_filtered_set():
    pool = [
        _player("a", days=[1], vibe_preference="casual"),  # 40 + 0 + 0 + 10
        _player("b", vibe_preference="competitive"),  # 2
        _player("c", vibe_preference="competitive"),  # 2
    ]
    page = list_players(ME, [1], [], pool, limit=1)
    assert len(page.data) == 1
    assert page.average_compatibility == 18  # (50 + 2 + 2) / 3


def test_empty_pool_meta():
    meta = list_players(ME, [], [], []).to_dict()["meta"]
    assert meta == {"totalCount": 0, "page": 1, "limit": 20, "totalPages": 0, "averageCompatibility": 0}


def test_experience_filter():
    pool = [
        _player("a", experience_level="advanced"),
        _player("b", experience_level="beginner"),
        _player("c", experience_level="advanced"),
    ]
    filters = PlayerFilters.from_params(experience="advanced")
    page = list_players(ME, [], [], pool, filters=filters)
    assert {sp.player.id for sp in page.data} == {"a", "c"}


def test_vibe_filter_includes_both():
    pool = [
        _player("casual", vibe_preference="casual"),
        _player("both", vibe_preference="both"),
        _player("comp", vibe_preference="competitive"),
    ]
    page = list_players(ME, [], [], pool, filters=PlayerFilters.from_params(vibe="casual"))
    assert {sp.player.id for sp in page.data} == {"casual", "both"}


def test_day_and_game_filters_combine():
    pool = [
        _player("both", days=[3], games=["g1"]),
        _player("day_only", days=[3], games=["g2"]),
        _player("open", days=[3], open_to_any_game=True),
        _player("game_only", days=[4], games=["g1"]),
    ]
    filters = PlayerFilters.from_params(availability_day="3", game_preference="g1")
    page = list_players(ME, [], [], pool, filters=filters)
    assert {sp.player.id for sp in page.data} == {"both", "open"}


def test_all_means_no_filter():
    filters = PlayerFilters.from_params(experience="all", vibe="all", availability_day="all", game_preference="")
    assert filters == PlayerFilters()
    assert matches_filters(_player("x"), filters)


@pytest.mark.parametrize(
    "params",
    [
        {"experience": "expert"},
        {"vibe": "chill"},
        {"availability_day": "7"},
        {"availability_day": "monday"},
    ],
)
def test_invalid_filters_rejected(params):
    with pytest.raises(PartyFinderValidationError):
        PlayerFilters.from_params(**params)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"sort_by": "age"},
        {"sort_order": "sideways"},
        {"page": 0},
        {"limit": 0},
    ],
)
def test_invalid_listing_params_rejected(kwargs):
    with pytest.raises(PartyFinderValidationError):
        list_players(ME, [], [], [_player("a")], **kwargs)


def test_hidden_contact_not_serialized():
    hidden = _player("h", contact_method="email", contact_value="h@example.com", contact_visible_to="none")
    shown = _player("s", contact_method="email", contact_value="s@example.com", contact_visible_to="matches")
    rows = {d["id"]: d for d in list_players(ME, [], [], [hidden, shown]).to_dict()["data"]}
    assert rows["h"]["contactValue"] is None
    assert rows["h"]["contactMethod"] is None
    assert rows["s"]["contactValue"] == "s@example.com"


# --- PlayerDirectory (storage + cache) ---


def test_directory_lists_only_eligible_players(db, cache):
    now = datetime.now(timezone.utc)
    me = make_user(db, "me", experience_level="beginner")
    make_user(db, "fresh", last_login=now - timedelta(days=2))
    make_user(db, "stale", last_login=now - timedelta(days=30))
    make_user(db, "resting", party_status="resting")
    make_user(db, "not_looking", looking_for_party=False)
    make_user(db, "never", last_login=None)

    page = PlayerDirectory(db, cache).list_for_user(me)
    assert [sp.player.id for sp in page.data] == ["fresh"]


def test_directory_attaches_availability_and_preferences(db, cache):
    make_game(db, "13", "Catan", thumbnail="catan.png")
    make_game(db, "822", "Carcassonne")
    me = make_user(db, "me")
    set_days(db, "me", [1, 5])
    set_games(db, "me", ["13"])
    make_user(db, "other")
    set_days(db, "other", [5])
    set_games(db, "other", ["13", "822"])

    page = PlayerDirectory(db, cache).list_for_user(me)
    other = page.data[0].player
    assert other.availability == (5,)
    assert [g.name for g in other.game_preferences] == ["Carcassonne", "Catan"]
    # availability 40*1/2, games 40*1/2, no experience, vibe floor
    assert page.data[0].compatibility == 42


def test_directory_reads_through_cache(db, cache):
    me = make_user(db, "me")
    make_user(db, "a")
    frozen = datetime.now(timezone.utc)
    directory = PlayerDirectory(db, cache, now=lambda: frozen)
    assert directory.list_for_user(me).total_count == 1
    assert any(key.startswith("party_finder_players_") for key in cache._entries)

    # New player is hidden until the cache is invalidated
    make_user(db, "b")
    assert directory.list_for_user(me).total_count == 1
    cache.invalidate("party_finder")
    assert directory.list_for_user(me).total_count == 2


def test_directory_rejects_bad_sort_before_querying(db, cache):
    me = make_user(db, "me")
    with pytest.raises(PartyFinderValidationError):
        PlayerDirectory(db, cache).list_for_user(me, sort_by="nope")
    assert len(cache) == 0


class _Clock:
    def __init__(self):
        self.seconds = 0.0

    def __call__(self):
        return self.seconds


def test_directory_cache_stays_bounded_under_steady_traffic(db):
    clock = _Clock()
    cache = TTLCache(clock=clock)
    me = make_user(db, "me")
    make_user(db, "a")
    set_days(db, "a", [1])
    start = datetime.now(timezone.utc)
    for minute in range(120):
        now = start + timedelta(minutes=minute)
        PlayerDirectory(db, cache, now=lambda: now).list_for_user(me)
        clock.seconds += 60
    # threshold + pool + availability + preferences
    assert len(cache) <= 4


def test_cached_pool_uses_exact_cutoff(db):
    clock = _Clock()
    cache = TTLCache(clock=clock)
    start = datetime.now(timezone.utc)
    me = make_user(db, "me")
    # Crosses the 14-day threshold one minute after start
    make_user(db, "fading", last_login=start - timedelta(days=14) + timedelta(minutes=1))

    assert PlayerDirectory(db, cache, now=lambda: start).list_for_user(me).total_count == 1
    clock.seconds += 120
    later = start + timedelta(minutes=2)
    assert PlayerDirectory(db, cache, now=lambda: later).list_for_user(me).total_count == 0


def test_breakdown_only_when_requested():
    other = _player("a", days=[1], vibe_preference="casual")
    plain = list_players(ME, [1], [], [other]).to_dict()["data"][0]
    assert "compatibilityBreakdown" not in plain
    detailed = list_players(ME, [1], [], [other], include_breakdown=True).to_dict()["data"][0]
    assert detailed["compatibilityBreakdown"] == {
        "availability": 40.0,
        "gamePreferences": 0.0,
        "experience": 0,
        "vibe": 10,
        "total": 50,
    }
    assert detailed["compatibility"] == 50
