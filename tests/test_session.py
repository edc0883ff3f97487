"""Tests for the session manager, error catalog and client-side validation."""

from datetime import datetime, timezone

import httpx
import pytest

from core.errors import ERROR_CATALOG, AppError, ErrorAction, create_app_error, handle_app_error
from core.session import SessionManager
from core.validation import validate_category_fields, validate_event_fields, validate_signup_fields


def test_new_session_is_unauthenticated():
    session = SessionManager()
    assert session.get_credential() is None
    assert not session.is_authenticated


def test_login_logout_cycle():
    session = SessionManager()
    session.login("abc")
    assert session.get_credential() == "abc"
    assert session.is_authenticated
    session.logout()
    assert session.get_credential() is None


def test_set_credential_none_clears():
    session = SessionManager("abc")
    session.set_credential(None)
    assert not session.is_authenticated
    session.set_credential("")
    assert session.get_credential() is None


def test_device_id_is_stable_per_session():
    session = SessionManager()
    assert session.device_id == session.device_id
    assert SessionManager().device_id != session.device_id


@pytest.mark.asyncio
async def test_bootstrap_swallows_app_errors():
    session = SessionManager("stale")

    async def failing_refresh():
        raise create_app_error("INVALID_REFRESH_TOKEN")

    assert await session.bootstrap(failing_refresh) is False
    assert session.get_credential() is None


@pytest.mark.asyncio
async def test_bootstrap_stores_token():
    session = SessionManager()

    async def refresh():
        return "new-token"

    assert await session.bootstrap(refresh) is True
    assert session.get_credential() == "new-token"


# =============================================================================
# Error catalog
# =============================================================================


def test_catalog_key_lookup_with_override():
    error = create_app_error("CLIENT_VALIDATION_ERROR", "Passwords differ")
    assert error.status == 400
    assert error.message == "Passwords differ"
    assert error.action is ErrorAction.SHOW_ALERT


def test_response_body_fields_win_over_catalog():
    response = httpx.Response(
        409, json={"code": "EMAIL_ALREADY_EXISTS", "message": "Taken", "status": 409}
    )
    error = create_app_error(response)
    assert (error.status, error.code, error.message) == (409, "EMAIL_ALREADY_EXISTS", "Taken")


def test_non_json_response_falls_back_to_internal_error():
    error = create_app_error(httpx.Response(502, text="<html>Bad gateway</html>"))
    assert error.code == "INTERNAL_ERROR"
    assert error.message == ERROR_CATALOG["INTERNAL_ERROR"].message


def test_unknown_source_falls_back_to_internal_error():
    error = create_app_error(RuntimeError("boom"))
    assert error.code == "INTERNAL_ERROR"
    assert isinstance(error, AppError)
    assert error.to_dict()["action"] == "SHOW_ALERT"


@pytest.mark.parametrize(
    "code, clears",
    [
        ("INVALID_REFRESH_TOKEN", True),
        ("TOKEN_EXPIRED", True),
        ("VALIDATION_ERROR", False),
        ("CALENDAR_NOT_CONNECTED", False),
        ("RATE_LIMITED", False),
    ],
)
def test_handle_app_error_clears_session_for_auth_actions(code, clears):
    session = SessionManager("abc")
    action = handle_app_error(create_app_error(code), session)
    assert action is ERROR_CATALOG[code].action
    assert session.is_authenticated is not clears


# =============================================================================
# Validation
# =============================================================================


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_event_end_before_start_is_rejected():
    with pytest.raises(AppError) as exc_info:
        validate_event_fields("Trip", _utc(2024, 3, 12), _utc(2024, 3, 10))
    assert exc_info.value.code == "CLIENT_VALIDATION_ERROR"
    assert "End must not be before start" in exc_info.value.message


def test_event_collects_all_problems():
    with pytest.raises(AppError) as exc_info:
        validate_event_fields("  ", datetime(2024, 3, 10), datetime(2024, 3, 11))
    assert "Title is required" in exc_info.value.message
    assert "timezone" in exc_info.value.message


def test_valid_event_passes():
    validate_event_fields("Trip", _utc(2024, 3, 10), _utc(2024, 3, 10))


def test_category_color_must_be_hex():
    validate_category_fields("Bills", "#A1B2C3")
    with pytest.raises(AppError):
        validate_category_fields("Bills", "red")


def test_signup_password_mismatch():
    with pytest.raises(AppError) as exc_info:
        validate_signup_fields("me@example.com", "secret123", "secret124")
    assert "do not match" in exc_info.value.message
