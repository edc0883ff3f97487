"""
Login, signup and logout against the planner backend.
"""

import logging

from core.api_client import ApiClient
from core.errors import AppError, create_app_error, response_body
from core.validation import validate_signup_fields
from models.account import UserInfo

logger = logging.getLogger(__name__)


async def login(client: ApiClient, email: str, password: str, remember_me: bool = False) -> str:
    """
    Log in and store the returned access token in the client's session.

    The refresh cookie set by the backend stays in the client's cookie jar.

    Returns:
        The new access token
    """
    response = await client.post(
        "/auth/login/",
        json={
            "email": email,
            "password": password,
            "device_id": client.session.device_id,
            "remember_me": remember_me,
        },
    )
    access_token = response_body(response).get("access_token")
    if not access_token:
        raise create_app_error("INTERNAL_ERROR", "Login response did not include an access token")
    client.session.login(access_token)
    return access_token


async def signup(
    client: ApiClient,
    email: str,
    password: str,
    confirm_password: str,
    agreed_to_terms: bool = True,
) -> None:
    validate_signup_fields(email, password, confirm_password, agreed_to_terms)
    await client.post(
        "/auth/signup/",
        json={"email": email, "password": password, "confirm_password": confirm_password},
    )


async def logout(client: ApiClient) -> None:
    """Tell the backend to end the session, then always clear it locally."""
    try:
        await client.post("/auth/logout/")
    except AppError as e:
        logger.warning("Logout API failed (%s), continuing local logout", e.code)
    finally:
        client.session.logout()


async def get_me(client: ApiClient) -> UserInfo:
    data = await client.get_json("/auth/me/")
    return UserInfo(id=data["id"], email=data["email"])


async def complete_oauth_login(client: ApiClient) -> bool:
    """
    Finish a third-party login: the backend has set the refresh cookie, so one
    refresh yields the access token.
    """
    try:
        await client.refresh_access_token()
    except AppError as e:
        logger.info("OAuth login could not be completed: %s", e.code)
        return False
    return client.session.is_authenticated
