from datetime import datetime, timezone

import pytest

from session import Session

NOON = datetime(2024, 5, 1, 12, 30, 45, tzinfo=timezone.utc)


def test_timestamp_in_session_zone():
    session = Session(time_zone="Asia/Tokyo", clock=lambda: NOON)
    assert session.timestamp() == "2024-05-01 21:30:45"


def test_naive_clock_is_treated_as_utc():
    session = Session(time_zone="UTC", clock=lambda: datetime(2024, 1, 2, 3, 4, 5))
    assert session.timestamp() == "2024-01-02 03:04:05"


def test_unknown_time_zone():
    with pytest.raises(ValueError):
        Session(time_zone="Mars/Olympus_Mons")


def test_active_user_email_sources():
    assert Session().active_user_email() is None
    assert Session(user_email="").active_user_email() is None
    assert Session(user_email="me@example.com").active_user_email() == "me@example.com"
    assert Session(user_email=lambda: None).active_user_email() is None
    assert Session(user_email=lambda: "you@example.com").active_user_email() == "you@example.com"


def test_from_env(monkeypatch):
    monkeypatch.setenv("SHEET_LOG_TIME_ZONE", "Asia/Tokyo")
    monkeypatch.delenv("SHEET_LOG_USER_EMAIL", raising=False)
    session = Session.from_env(default_time_zone="UTC", default_user_email="bot@example.com")
    assert session.time_zone == "Asia/Tokyo"
    assert session.active_user_email() == "bot@example.com"


def test_from_env_user_override(monkeypatch):
    monkeypatch.setenv("SHEET_LOG_USER_EMAIL", "ops@example.com")
    session = Session.from_env(default_user_email="bot@example.com")
    assert session.active_user_email() == "ops@example.com"


def test_failing_user_lookup_gives_none(caplog):
    def lookup():
        raise RuntimeError("no active session")

    assert Session(user_email=lookup).active_user_email() is None
    assert "Active user lookup failed" in caplog.text
