import pytest

from gamecafe.core.errors import PartyFinderValidationError
from gamecafe.models import SystemSetting
from gamecafe.services.settings_service import (
    get_inactive_days_setting,
    parse_inactive_days,
    set_inactive_days_setting,
    upsert_setting,
)


def test_default_when_unset(db):
    assert get_inactive_days_setting(db) == 14


def test_set_and_read_back(db):
    set_inactive_days_setting(db, 30)
    assert get_inactive_days_setting(db) == 30
    set_inactive_days_setting(db, 7)
    assert get_inactive_days_setting(db) == 7
    assert db.query(SystemSetting).count() == 1


@pytest.mark.parametrize("days", [0, 366, -5, True, "10", 2.5])
def test_set_rejects_out_of_range(db, days):
    with pytest.raises(PartyFinderValidationError, match="between 1 and 365"):
        set_inactive_days_setting(db, days)


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 14), ("", 14), ("abc", 14), ("0", 14), (" 21 ", 21), ("400", 400)],
)
def test_parse_inactive_days(raw, expected):
    assert parse_inactive_days(raw) == expected


def test_upsert_keeps_description_when_not_given(db):
    upsert_setting(db, "k", "1", "first")
    row = upsert_setting(db, "k", "2")
    assert (row.value, row.description) == ("2", "first")
