"""
Unit tests for booking window validation, datetime helpers and errors
"""
import pytest
from datetime import datetime, timedelta, timezone

from scholarlink import datetime_utils
from scholarlink.database import normalize_database_url
from scholarlink.datetime_utils import as_utc, monotonic_utc_now
from scholarlink.services.exceptions import (
    InvalidCredentials,
    InvalidTransition,
    ScholarLinkError,
    StorageError,
    ValidationError,
)
from scholarlink.services.session_store import validate_booking_window

NOW = datetime(2030, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestBookingWindow:

    @pytest.mark.parametrize("duration", [30, 60, 90, 120])
    def test_supported_durations(self, duration):
        start = validate_booking_window(NOW + timedelta(hours=1), duration, now=NOW)
        assert start == NOW + timedelta(hours=1)

    @pytest.mark.parametrize("duration", [0, 15, 45, 61, 180])
    def test_unsupported_duration(self, duration):
        with pytest.raises(ValidationError, match="Invalid duration"):
            validate_booking_window(NOW + timedelta(hours=1), duration, now=NOW)

    def test_past_start_rejected(self):
        with pytest.raises(ValidationError, match="in the past"):
            validate_booking_window(NOW - timedelta(minutes=1), 60, now=NOW)

    def test_start_equal_to_now_allowed(self):
        assert validate_booking_window(NOW, 60, now=NOW) == NOW

    def test_naive_start_is_utc(self):
        naive = datetime(2030, 5, 1, 13, 0)
        start = validate_booking_window(naive, 60, now=NOW)
        assert start.tzinfo is not None
        assert start == NOW + timedelta(hours=1)

    def test_missing_start(self):
        with pytest.raises(ValidationError):
            validate_booking_window(None, 60, now=NOW)


class TestDatetimeHelpers:

    def test_as_utc_converts_offsets(self):
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2030, 5, 1, 14, 0, tzinfo=plus_two)
        assert as_utc(value) == NOW
        assert as_utc(value).utcoffset() == timedelta(0)

    def test_as_utc_none(self):
        assert as_utc(None) is None

    def test_creation_timestamps_strictly_increase_on_a_stalled_clock(self, monkeypatch):
        monkeypatch.setattr(datetime_utils, "_last_timestamp", None)
        monkeypatch.setattr(datetime_utils, "utc_now", lambda: NOW)
        stamps = [monotonic_utc_now() for _ in range(3)]
        assert stamps[0] < stamps[1] < stamps[2]
        assert stamps[2] - stamps[1] == timedelta(microseconds=1)


class TestErrors:

    def test_envelope(self):
        error = InvalidTransition("Session is already accepted", details={"current_status": "accepted"})
        assert error.to_dict() == {
            "error": {
                "code": "INVALID_TRANSITION",
                "message": "Session is already accepted",
                "details": {"current_status": "accepted"},
            }
        }
        assert error.status_code == 409

    def test_credentials_message_is_generic(self):
        error = InvalidCredentials()
        assert "password" not in error.message.lower()
        assert error.status_code == 401

    def test_hierarchy(self):
        for error_cls in (ValidationError, InvalidTransition, StorageError):
            assert issubclass(error_cls, ScholarLinkError)
        assert StorageError("down").status_code == 503


def test_postgres_url_uses_asyncpg():
    assert normalize_database_url("postgresql://u:p@db/x") == "postgresql+asyncpg://u:p@db/x"
    assert normalize_database_url("sqlite+aiosqlite:///x.db") == "sqlite+aiosqlite:///x.db"
