from datetime import datetime, timedelta, timezone

from factories import auth, make_game, make_user, set_days, set_games
from gamecafe.models import User, UserAvailability, UserGamePreference


def test_players_requires_authentication(client):
    assert client.get("/party-finder/players").status_code == 401
    assert client.get("/party-finder/players", headers=auth("ghost")).status_code == 401


def test_players_listing(client, db):
    make_game(db, "13", "Catan")
    make_user(db, "me", experience_level="intermediate", vibe_preference="casual")
    set_days(db, "me", [2, 4])
    set_games(db, "me", ["13"])
    make_user(db, "best", display_name="Best", experience_level="intermediate", vibe_preference="casual")
    set_days(db, "best", [2, 4])
    set_games(db, "best", ["13"])
    make_user(db, "meh", vibe_preference="competitive")

    response = client.get("/party-finder/players", headers=auth("me"))
    assert response.status_code == 200
    body = response.json()
    assert [p["id"] for p in body["data"]] == ["best", "meh"]
    assert [p["compatibility"] for p in body["data"]] == [100, 2]
    assert body["data"][0]["availability"] == [{"dayOfWeek": 2}, {"dayOfWeek": 4}]
    assert body["data"][0]["gamePreferences"] == [{"gameBggId": "13", "name": "Catan", "thumbnail": None}]
    assert body["meta"] == {"totalCount": 2, "page": 1, "limit": 20, "totalPages": 1, "averageCompatibility": 51}


def test_players_filters_and_sorting(client, db):
    make_user(db, "me")
    make_user(db, "ann", display_name="Ann", experience_level="advanced")
    make_user(db, "bob", display_name="Bob", experience_level="beginner")
    make_user(db, "cat", display_name="Cat", experience_level="advanced")

    response = client.get(
        "/party-finder/players",
        params={"experience": "advanced", "vibe": "all", "sortBy": "displayName", "sortOrder": "desc"},
        headers=auth("me"),
    )
    assert response.status_code == 200
    assert [p["id"] for p in response.json()["data"]] == ["cat", "ann"]


def test_players_clamps_paging(client, db):
    make_user(db, "me")
    for i in range(3):
        make_user(db, f"p{i}")
    meta = client.get("/party-finder/players", params={"page": 0, "limit": 500}, headers=auth("me")).json()["meta"]
    assert (meta["page"], meta["limit"]) == (1, 100)


def test_players_invalid_params(client, db):
    make_user(db, "me")
    assert client.get("/party-finder/players", params={"sortBy": "age"}, headers=auth("me")).status_code == 400
    assert client.get("/party-finder/players", params={"experience": "pro"}, headers=auth("me")).status_code == 400
    assert client.get("/party-finder/players", params={"availability_day": "9"}, headers=auth("me")).status_code == 400


def test_update_availability(client, db, cache):
    make_user(db, "me")
    set_days(db, "me", [0])
    cache.set("party_finder_availability_x", {})

    response = client.post(
        "/party-finder/availability",
        json={"userId": "me", "selectedDays": [5, 1, 5]},
        headers=auth("me"),
    )
    assert response.status_code == 200
    assert response.json()["selectedDays"] == [1, 5]
    days = sorted(r.day_of_week for r in db.query(UserAvailability).filter_by(user_id="me"))
    assert days == [1, 5]
    assert "party_finder_availability_x" not in cache


def test_update_availability_rejects_bad_days(client, db):
    make_user(db, "me")
    set_days(db, "me", [3])
    for bad in ([7], [-1], ["monday"], [True]):
        response = client.post(
            "/party-finder/availability", json={"userId": "me", "selectedDays": bad}, headers=auth("me")
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid selectedDays format"
    # Unchanged after rejected writes
    assert [r.day_of_week for r in db.query(UserAvailability).filter_by(user_id="me")] == [3]


def test_cannot_edit_someone_else(client, db):
    make_user(db, "me")
    make_user(db, "other")
    response = client.post(
        "/party-finder/availability", json={"userId": "other", "selectedDays": [1]}, headers=auth("me")
    )
    assert response.status_code == 403
    response = client.post(
        "/party-finder/game-preferences", json={"userId": "other", "gamePreferences": []}, headers=auth("me")
    )
    assert response.status_code == 403


def test_update_game_preferences(client, db):
    make_game(db, "13", "Catan")
    make_game(db, "822", "Carcassonne")
    make_user(db, "me")
    set_games(db, "me", ["822"])

    response = client.post(
        "/party-finder/game-preferences",
        json={"userId": "me", "gamePreferences": ["13", "13"]},
        headers=auth("me"),
    )
    assert response.status_code == 200
    assert response.json()["gamePreferences"] == ["13"]
    assert [r.game_bgg_id for r in db.query(UserGamePreference).filter_by(user_id="me")] == ["13"]


def test_update_game_preferences_unknown_game(client, db):
    make_game(db, "13", "Catan")
    make_user(db, "me")
    response = client.post(
        "/party-finder/game-preferences",
        json={"userId": "me", "gamePreferences": ["13", "404", "405"]},
        headers=auth("me"),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid games: 404, 405"
    assert db.query(UserGamePreference).count() == 0


def test_games_search(client, db):
    make_game(db, "13", "Catan")
    make_game(db, "822", "Carcassonne")
    make_user(db, "me")
    assert client.get("/party-finder/games-search", params={"query": "c"}, headers=auth("me")).json() == []
    hits = client.get("/party-finder/games-search", params={"query": "cat"}, headers=auth("me")).json()
    assert [h["bggId"] for h in hits] == ["13"]


def test_profile_round_trip(client, db, cache):
    make_user(db, "me", looking_for_party=False, party_status="resting")
    cache.set("party_finder_players_1", [])

    response = client.put(
        "/party-finder/profile",
        json={
            "displayName": "Meeple Mike",
            "experienceLevel": "advanced",
            "vibePreference": "both",
            "lookingForParty": True,
            "partyStatus": "active",
            "contactVisibleTo": "none",
        },
        headers=auth("me"),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["displayName"] == "Meeple Mike"
    assert body["experienceLevel"] == "advanced"
    assert body["partyStatus"] == "active"
    assert body["contactVisibleTo"] == "none"
    assert "party_finder_players_1" not in cache

    assert client.get("/party-finder/profile", headers=auth("me")).json()["vibePreference"] == "both"
    assert db.get(User, "me").looking_for_party is True


def test_profile_rejects_invalid_values(client, db):
    make_user(db, "me")
    assert client.put("/party-finder/profile", json={"experienceLevel": "guru"}, headers=auth("me")).status_code == 422
    assert client.put("/party-finder/profile", json={"partyStatus": None}, headers=auth("me")).status_code == 400


def test_login_event_reactivates_auto_rested_user(client, db):
    make_user(db, "me", party_status="resting", last_login=datetime.now(timezone.utc) - timedelta(days=60))
    response = client.post("/party-finder/login-event", headers=auth("me"))
    assert response.status_code == 200
    assert response.json() == {"ok": True, "reactivated": True}
    assert db.get(User, "me").party_status == "active"

    again = client.post("/party-finder/login-event", headers=auth("me"))
    assert again.json() == {"ok": True, "reactivated": False}


def test_players_breakdown_flag(client, db):
    make_user(db, "me", vibe_preference="casual")
    make_user(db, "other", vibe_preference="both")
    plain = client.get("/party-finder/players", headers=auth("me")).json()["data"][0]
    assert "compatibilityBreakdown" not in plain
    detailed = client.get("/party-finder/players", params={"includeBreakdown": "true"}, headers=auth("me")).json()
    breakdown = detailed["data"][0]["compatibilityBreakdown"]
    assert breakdown["vibe"] == 10
    assert breakdown["total"] == detailed["data"][0]["compatibility"] == 10


def test_unauthenticated_and_forbidden_details(client, db):
    make_user(db, "me")
    assert client.get("/party-finder/profile").json() == {"detail": "Not authenticated"}
    response = client.post(
        "/party-finder/availability", json={"userId": "someone", "selectedDays": []}, headers=auth("me")
    )
    assert response.json() == {"detail": "Forbidden"}
