"""
In-memory session holding the current access token.

The SessionManager is the only writer of the credential. Everything else reads
a snapshot through get_credential().
"""

import logging
import uuid
from typing import Awaitable, Callable

from core.errors import AppError

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the access token for one client session."""

    def __init__(self, access_token: str | None = None):
        self._access_token = access_token or None
        # Generated once and reused for every login from this session
        self.device_id = str(uuid.uuid4())

    @property
    def is_authenticated(self) -> bool:
        return self._access_token is not None

    def get_credential(self) -> str | None:
        return self._access_token

    def set_credential(self, access_token: str | None) -> None:
        """Overwrite the credential; a falsy value clears it."""
        self._access_token = access_token or None

    def login(self, access_token: str) -> None:
        self.set_credential(access_token)

    def logout(self) -> None:
        """Drop the local credential. Server-side invalidation is the caller's job."""
        self._access_token = None

    async def bootstrap(self, refresher: Callable[[], Awaitable[str]]) -> bool:
        """
        Try one silent refresh at startup.

        Best effort: on failure the session stays unauthenticated and no error
        is raised.
        """
        try:
            access_token = await refresher()
        except AppError as e:
            logger.debug("Session bootstrap failed: %s", e.code)
            self.logout()
            return False
        self.set_credential(access_token)
        return self.is_authenticated
