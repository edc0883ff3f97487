"""
Error catalog and application error type.

Backend failures arrive as ``{code, message, status?}`` JSON bodies. Each code
is looked up in ERROR_CATALOG to decide what the caller should do about it.
Unknown codes fall back to INTERNAL_ERROR.
"""

import logging
from dataclasses import dataclass
from enum import Enum

import httpx

logger = logging.getLogger(__name__)


class ErrorAction(str, Enum):
    """What the caller should do in response to an error."""

    SHOW_ALERT = "SHOW_ALERT"
    LOGOUT = "LOGOUT"
    REDIRECT_LOGIN = "REDIRECT_LOGIN"
    RETRY = "RETRY"
    IGNORE = "IGNORE"


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    status: int
    message: str
    action: ErrorAction


def _entry(code: str, status: int, message: str, action: ErrorAction) -> tuple[str, ErrorDefinition]:
    return code, ErrorDefinition(code=code, status=status, message=message, action=action)


# =============================================================================
# CATALOG
# =============================================================================

ERROR_CATALOG: dict[str, ErrorDefinition] = dict(
    [
        _entry("INTERNAL_ERROR", 500, "An unexpected error occurred.", ErrorAction.SHOW_ALERT),
        _entry("NETWORK_ERROR", 503, "Unable to reach the server.", ErrorAction.RETRY),
        _entry("SERVICE_UNAVAILABLE", 503, "Service temporarily unavailable.", ErrorAction.RETRY),
        _entry("RATE_LIMITED", 429, "Too many requests. Please slow down.", ErrorAction.RETRY),
        _entry("CLIENT_VALIDATION_ERROR", 400, "Please check the form and try again.", ErrorAction.SHOW_ALERT),
        _entry("VALIDATION_ERROR", 400, "The request was invalid.", ErrorAction.SHOW_ALERT),
        _entry("INVALID_CREDENTIALS", 401, "Invalid email or password.", ErrorAction.SHOW_ALERT),
        _entry("UNAUTHORIZED", 401, "Authentication required.", ErrorAction.REDIRECT_LOGIN),
        _entry("TOKEN_EXPIRED", 401, "Session expired. Please log in again.", ErrorAction.REDIRECT_LOGIN),
        _entry("INVALID_REFRESH_TOKEN", 401, "Session is no longer valid.", ErrorAction.LOGOUT),
        _entry("FORBIDDEN", 403, "You do not have permission to do that.", ErrorAction.SHOW_ALERT),
        _entry("NOT_FOUND", 404, "The requested resource was not found.", ErrorAction.SHOW_ALERT),
        _entry("CALENDAR_NOT_CONNECTED", 404, "No calendar is connected yet.", ErrorAction.IGNORE),
        _entry("EMAIL_ALREADY_EXISTS", 409, "An account with this email already exists.", ErrorAction.SHOW_ALERT),
    ]
)

FALLBACK_CODE = "INTERNAL_ERROR"


class AppError(Exception):
    """Error surfaced to callers, already mapped through the catalog."""

    def __init__(self, status: int, code: str, message: str, action: ErrorAction):
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message
        self.action = action

    def __repr__(self) -> str:
        return f"AppError(status={self.status}, code={self.code!r}, action={self.action.value})"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "code": self.code,
            "message": self.message,
            "action": self.action.value,
        }


def response_body(response: httpx.Response) -> dict:
    """JSON object body of a response, or {} for anything else."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def create_app_error(source, override_message: str | None = None) -> AppError:
    """
    Build an AppError from a catalog key, an httpx response, or anything else.

    A response body's ``message`` and ``status`` win over the catalog defaults,
    but the action always comes from the catalog entry.
    """
    if isinstance(source, str) and source in ERROR_CATALOG:
        definition = ERROR_CATALOG[source]
        return AppError(
            status=definition.status,
            code=definition.code,
            message=override_message or definition.message,
            action=definition.action,
        )

    if isinstance(source, httpx.Response):
        data = response_body(source)
        definition = ERROR_CATALOG.get(data.get("code") or FALLBACK_CODE, ERROR_CATALOG[FALLBACK_CODE])
        status = data.get("status")
        return AppError(
            status=status if isinstance(status, int) else definition.status,
            code=definition.code,
            message=override_message or data.get("message") or definition.message,
            action=definition.action,
        )

    definition = ERROR_CATALOG[FALLBACK_CODE]
    return AppError(
        status=definition.status,
        code=definition.code,
        message=override_message or definition.message,
        action=definition.action,
    )


def handle_app_error(error: AppError, session) -> ErrorAction:
    """
    Apply the session side of an error's action and return the action.

    LOGOUT and REDIRECT_LOGIN drop the local credential; everything else is
    left to the caller (show the message, offer a retry, or ignore it).
    """
    if error.action in (ErrorAction.LOGOUT, ErrorAction.REDIRECT_LOGIN):
        session.logout()
        logger.warning("%s: %s (session cleared)", error.code, error.message)
    elif error.action is ErrorAction.IGNORE:
        logger.debug("%s ignored: %s", error.code, error.message)
    else:
        logger.info("%s: %s", error.code, error.message)
    return error.action
