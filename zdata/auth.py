"""Authentication and session token storage."""

import logging
from typing import Any, Optional

from .transport import HttpRequest, Transport
from .validation import (
    AUTH_RESPONSE_SCHEMA,
    LOGIN_REQUEST_SCHEMA,
    REGISTER_REQUEST_SCHEMA,
    validate,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Logs users in and holds the bearer token for later requests."""

    def __init__(self, transport: Transport):
        """Initialize auth service.

        Args:
            transport: Transport used for /login and /register
        """
        self.transport = transport
        self._access_token: Optional[str] = None

    async def login(self, credentials: dict[str, Any]) -> dict[str, Any]:
        """Authenticate with email and password.

        Args:
            credentials: {"email": ..., "password": ...}

        Returns:
            Auth response with access_token and user

        Raises:
            ApiError: VALIDATION for a malformed payload or response,
                UNAUTHENTICATED for rejected credentials, TRANSPORT otherwise
        """
        validate(LOGIN_REQUEST_SCHEMA, credentials)
        return await self._authenticate("/login", credentials)

    async def register(self, user_data: dict[str, Any]) -> dict[str, Any]:
        """Create an account and store its token.

        Args:
            user_data: {"name": ..., "email": ..., "password": ...}

        Returns:
            Auth response with access_token and user
        """
        validate(REGISTER_REQUEST_SCHEMA, user_data)
        return await self._authenticate("/register", user_data)

    async def _authenticate(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self.transport.request(HttpRequest(method="POST", url=url, data=payload))
        auth_response = validate(AUTH_RESPONSE_SCHEMA, response.data)
        self.set_access_token(auth_response["access_token"])
        logger.info(f"Authenticated as {auth_response['user']['email']}")
        return auth_response

    def logout(self) -> None:
        self._access_token = None
        logger.info("Logged out")

    def is_authenticated(self) -> bool:
        return bool(self._access_token)

    def set_access_token(self, token: str) -> None:
        """Store a bearer token.

        Raises:
            ValueError: If token is empty or not a string
        """
        if not token or not isinstance(token, str):
            raise ValueError("Invalid access token: must be a non-empty string")
        self._access_token = token

    def get_access_token(self) -> Optional[str]:
        return self._access_token

    def auth_header(self) -> dict[str, str]:
        """Authorization header for the current token, empty when logged out."""
        if self._access_token:
            return {"Authorization": f"Bearer {self._access_token}"}
        return {}
