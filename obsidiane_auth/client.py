"""
Obsidiane Auth SDK Client

Main client classes for the Obsidiane Auth API. Both clients group the
API into namespaces sharing one transport, hence one cookie session:

    client = AuthClient(AuthClientConfig(base_url="https://auth.example.com"))
    client.auth.login("user@example.com", "secret")
    users = client.users.list()
"""

import logging
from typing import Any, Dict, Optional

from .cookies import CookieJar
from .endpoints import (
    AsyncAuthNamespace,
    AsyncInvitesNamespace,
    AsyncSetupNamespace,
    AsyncUsersNamespace,
    AuthNamespace,
    InvitesNamespace,
    SetupNamespace,
    UsersNamespace,
)
from .transport import AsyncTransport, Transport
from .types import AuthClientConfig


logger = logging.getLogger("obsidiane_auth")


class AuthClient:
    """
    Obsidiane Auth Client - Synchronous SDK entry point.

    Namespaces:
        auth:    /api/auth/* endpoints
        users:   /api/users* endpoints
        invites: /api/invite_users* endpoints
        setup:   /api/setup/admin endpoint
    """

    def __init__(self, config: AuthClientConfig) -> None:
        """Initialize the client. Raises ConfigurationError on invalid config."""
        self._config = config
        self._transport = Transport(
            config.base_url,
            default_headers=config.headers,
            timeout_ms=config.timeout_ms,
            origin=config.origin,
            debug=config.debug,
        )

        self.auth = AuthNamespace(self._transport)
        self.users = UsersNamespace(self._transport)
        self.invites = InvitesNamespace(self._transport)
        self.setup = SetupNamespace(self._transport)

        if config.debug:
            logger.debug("[Obsidiane] AuthClient initialized (base_url=%s)", self._transport.base_url)

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def cookies(self) -> CookieJar:
        """Session cookies collected from the API responses."""
        return self._transport.cookies

    def generate_csrf_token(self) -> str:
        """Generate a CSRF token accepted by the protected endpoints."""
        return self._transport.issue_csrf_token()

    def request(self, method: str, path: str, **options: Any) -> Dict[str, Any]:
        """Raw access to the transport for endpoints without a namespace method."""
        return self._transport.execute(method, path, **options)  # type: ignore[arg-type]

    def close(self) -> None:
        """Close the HTTP client."""
        self._transport.close()

    def __enter__(self) -> "AuthClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"AuthClient(base_url={self._transport.base_url!r})"


class AsyncAuthClient:
    """
    Obsidiane Auth Async Client - Asynchronous SDK entry point.

    Same namespaces as AuthClient with awaitable methods. Ideal for
    FastAPI, aiohttp, and other async frameworks.
    """

    def __init__(self, config: AuthClientConfig) -> None:
        """Initialize the async client."""
        self._config = config
        self._transport = AsyncTransport(
            config.base_url,
            default_headers=config.headers,
            timeout_ms=config.timeout_ms,
            origin=config.origin,
            debug=config.debug,
        )

        self.auth = AsyncAuthNamespace(self._transport)
        self.users = AsyncUsersNamespace(self._transport)
        self.invites = AsyncInvitesNamespace(self._transport)
        self.setup = AsyncSetupNamespace(self._transport)

        if config.debug:
            logger.debug(
                "[Obsidiane] AsyncAuthClient initialized (base_url=%s)", self._transport.base_url
            )

    @property
    def transport(self) -> AsyncTransport:
        return self._transport

    @property
    def cookies(self) -> CookieJar:
        return self._transport.cookies

    def generate_csrf_token(self) -> str:
        """Generate a CSRF token accepted by the protected endpoints."""
        return self._transport.issue_csrf_token()

    async def request(self, method: str, path: str, **options: Any) -> Dict[str, Any]:
        return await self._transport.execute(method, path, **options)  # type: ignore[arg-type]

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._transport.close()

    async def __aenter__(self) -> "AsyncAuthClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"AsyncAuthClient(base_url={self._transport.base_url!r})"


# =============================================================================
# Factory Functions
# =============================================================================

def create_auth_client(
    base_url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout_ms: Optional[int] = None,
    origin: Optional[str] = None,
    debug: bool = False,
) -> AuthClient:
    """Create a new synchronous client."""
    return AuthClient(AuthClientConfig(base_url, headers, timeout_ms, origin, debug))


def create_async_auth_client(
    base_url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout_ms: Optional[int] = None,
    origin: Optional[str] = None,
    debug: bool = False,
) -> AsyncAuthClient:
    """Create a new asynchronous client."""
    return AsyncAuthClient(AuthClientConfig(base_url, headers, timeout_ms, origin, debug))
