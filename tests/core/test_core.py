"""
Exception, result and settings tests.
"""
import json
import logging

import pytest

from hostel_allocator.config.settings import Settings
from hostel_allocator.core.exceptions import (
    ErrorCode,
    HostelOccupiedError,
    InsufficientCapacityError,
    NoEligibleTargetError,
    RoomNotFoundError,
)
from hostel_allocator.core.logging import (
    AllocatorJsonFormatter,
    RequestContextFilter,
    actor_email,
    request_id,
)
from hostel_allocator.services.base import ErrorSeverity, ServiceError, ServiceResult


class TestExceptions:

    def test_to_dict_shape(self):
        data = RoomNotFoundError("r-1").to_dict()["error"]

        assert data["code"] == "ROOM_NOT_FOUND"
        assert data["type"] == "RoomNotFoundError"
        assert data["details"]["resource_id"] == "r-1"

    def test_capacity_shortfall(self):
        error = InsufficientCapacityError("too many", requested=5, available=3)

        assert error.status_code == 409
        assert error.details["shortfall"] == 2

    def test_no_eligible_target_is_not_a_failure_status(self):
        assert NoEligibleTargetError("nothing").status_code == 200

    def test_hostel_occupied_message(self):
        error = HostelOccupiedError("h-1", occupied_beds=3)

        assert "3 occupied" in error.message
        assert error.error_code == ErrorCode.HOSTEL_OCCUPIED


class TestServiceResult:

    def test_from_app_exception_keeps_status(self):
        result = ServiceResult.from_app_exception(RoomNotFoundError("r-1"))

        assert not result
        assert result.error.status_code == 404
        assert result.error.code == ErrorCode.ROOM_NOT_FOUND

    def test_unwrap_failure_raises(self):
        with pytest.raises(ValueError):
            ServiceResult.internal_error("release bed").unwrap()

    def test_internal_error_is_critical(self):
        error = ServiceResult.internal_error("allocate beds", details={"error": "boom"}).error

        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.status_code == 500
        assert error.severity == ErrorSeverity.CRITICAL
        assert error.message == "Failed to allocate beds"

    def test_error_keeps_field_and_stamps_time(self):
        error = ServiceError(code=ErrorCode.VALIDATION_ERROR, message="bad count", field="count")

        data = error.to_dict()
        assert data["field"] == "count"
        assert data["timestamp"] is not None

    def test_unwrap_or(self):
        assert ServiceResult.internal_error("list beds").unwrap_or([]) == []
        assert ServiceResult.success([1]).unwrap_or([]) == [1]


class TestSettings:

    def test_database_url_override(self):
        settings = Settings(DATABASE_URL="sqlite:///./local.db")

        assert settings.get_database_url() == "sqlite:///./local.db"
        assert settings.is_sqlite()

    def test_postgres_url_from_parts(self):
        settings = Settings(
            DATABASE_URL=None,
            DB_HOST="db",
            DB_PORT=5433,
            DB_USER="warden",
            DB_PASSWORD="secret",
            DB_NAME="hostels",
        )

        assert settings.get_database_url() == "postgresql://warden:secret@db:5433/hostels"
        assert not settings.is_sqlite()

    def test_log_format_validated(self):
        with pytest.raises(ValueError):
            Settings(LOG_FORMAT="xml")

    def test_cors_origins_from_string(self):
        settings = Settings(BACKEND_CORS_ORIGINS="http://a.test, http://b.test")

        assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]


def test_request_context_filter_adds_ids():
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
    id_token = request_id.set("req-9")
    actor_token = actor_email.set("warden@example.org")
    try:
        RequestContextFilter().filter(record)
    finally:
        request_id.reset(id_token)
        actor_email.reset(actor_token)

    assert record.request_id == "req-9"
    assert record.actor == "warden@example.org"


def test_json_formatter_includes_level_and_actor():
    record = logging.LogRecord("hostel_allocator.test", logging.WARNING, __file__, 1, "bed taken", None, None)
    record.request_id = "req-1"
    record.actor = "warden@example.org"

    rendered = json.loads(AllocatorJsonFormatter("%(message)s %(request_id)s").format(record))

    assert rendered["message"] == "bed taken"
    assert rendered["level"] == "WARNING"
    assert rendered["actor"] == "warden@example.org"
    assert rendered["request_id"] == "req-1"
