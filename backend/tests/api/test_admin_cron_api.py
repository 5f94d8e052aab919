from datetime import datetime, timedelta, timezone

from factories import auth, make_user
from gamecafe.config import settings
from gamecafe.models import User


def _stale(db, user_id, days=30):
    make_user(db, user_id, last_login=datetime.now(timezone.utc) - timedelta(days=days))


def test_settings_require_admin(client, db):
    make_user(db, "player")
    assert client.get("/admin/party-finder-settings").status_code == 401
    assert client.get("/admin/party-finder-settings", headers=auth("player")).status_code == 403
    response = client.put("/admin/party-finder-settings", json={"inactiveDays": 7}, headers=auth("player"))
    assert response.status_code == 403


def test_settings_get_and_update(client, db, cache):
    make_user(db, "admin", is_admin=True)
    assert client.get("/admin/party-finder-settings", headers=auth("admin")).json() == {"inactiveDays": 14}

    cache.set("party_finder_inactive_days_threshold", 14)
    response = client.put("/admin/party-finder-settings", json={"inactiveDays": 30}, headers=auth("admin"))
    assert response.status_code == 200
    assert response.json()["inactiveDays"] == 30
    assert "30 days" in response.json()["message"]
    assert "party_finder_inactive_days_threshold" not in cache
    assert client.get("/admin/party-finder-settings", headers=auth("admin")).json() == {"inactiveDays": 30}


def test_settings_update_out_of_range(client, db):
    make_user(db, "admin", is_admin=True)
    for days in (0, 366):
        response = client.put("/admin/party-finder-settings", json={"inactiveDays": days}, headers=auth("admin"))
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid number of days. Must be between 1 and 365."


def test_cron_cleanup_open_outside_production(client, db):
    _stale(db, "sleepy")
    response = client.get("/cron/cleanup-inactive-users")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["usersUpdated"] == 1
    assert body["errors"] == []
    assert body["duration"].endswith("ms")
    assert db.get(User, "sleepy").party_status == "resting"


def test_cron_cleanup_requires_secret_in_production(client, db):
    settings.environment = "production"
    settings.cron_secret = "s3cret"
    _stale(db, "sleepy")

    assert client.get("/cron/cleanup-inactive-users").status_code == 401
    response = client.get("/cron/cleanup-inactive-users", headers={"X-Cron-Secret": "wrong"})
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert db.get(User, "sleepy").party_status == "active"

    response = client.get("/cron/cleanup-inactive-users", headers={"X-Cron-Secret": "s3cret"})
    assert response.status_code == 200
    assert response.json()["usersUpdated"] == 1


def test_cron_rejects_everything_when_secret_unset_in_production(client):
    settings.environment = "production"
    response = client.get("/cron/cleanup-inactive-users", headers={"X-Cron-Secret": ""})
    assert response.status_code == 401


def test_manual_cleanup_by_admin(client, db):
    make_user(db, "admin", is_admin=True)
    _stale(db, "sleepy")
    assert client.post("/cron/cleanup-inactive-users", headers=auth("sleepy")).status_code == 403

    response = client.post("/cron/cleanup-inactive-users", headers=auth("admin"))
    assert response.status_code == 200
    body = response.json()
    assert body["triggeredBy"] == "admin"
    assert body["usersUpdated"] == 1
    assert body["message"] == "Manual cleanup completed: 1 users set to resting"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
