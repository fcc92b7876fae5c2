"""
Endpoint namespaces of the Auth API.

* auth:    /api/auth/*         (login, me, logout, register, password, invite)
* users:   /api/users*         (User resource, JSON-LD)
* invites: /api/invite_users*  (InviteUser resource, JSON-LD)
* setup:   /api/setup/admin    (initial administrator)

State-changing calls carry a fresh ``csrf-token`` header; ``refresh`` only
sends one when the caller provides it.
"""

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

from .csrf import optional_csrf_headers, required_csrf_headers
from .headers import ACCEPT_JSON_LD
from .jsonld import Collection, Item
from .types import InitialAdminData, RegisterData, normalize_login_response

if TYPE_CHECKING:
    from .transport import AsyncTransport, Transport


PATH_AUTH_ME = "/api/auth/me"
PATH_AUTH_LOGIN = "/api/auth/login"
PATH_AUTH_REFRESH = "/api/auth/refresh"
PATH_AUTH_LOGOUT = "/api/auth/logout"
PATH_AUTH_REGISTER = "/api/auth/register"
PATH_AUTH_PASSWORD_FORGOT = "/api/auth/password/forgot"
PATH_AUTH_PASSWORD_RESET = "/api/auth/password/reset"
PATH_AUTH_INVITE = "/api/auth/invite"
PATH_AUTH_INVITE_COMPLETE = "/api/auth/invite/complete"
PATH_USERS = "/api/users"
PATH_INVITE_USERS = "/api/invite_users"
PATH_SETUP_INITIAL_ADMIN = "/api/setup/admin"

JSON_LD_HEADERS = {"Accept": ACCEPT_JSON_LD}

RegisterInput = Union[RegisterData, Mapping[str, Any]]
AdminInput = Union[InitialAdminData, Mapping[str, Any]]


def _as_payload(data: Union[RegisterData, InitialAdminData, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, (RegisterData, InitialAdminData)):
        return data.to_dict()
    return dict(data)


def _refresh_result(payload: Mapping[str, Any]) -> Dict[str, int]:
    exp = payload.get("exp")
    try:
        return {"exp": int(exp) if exp is not None else 0}
    except (TypeError, ValueError):
        return {"exp": 0}


def _complete_invite_body(token: str, password: str) -> Dict[str, str]:
    return {"token": token, "password": password, "confirmPassword": password}


# =============================================================================
# Sync namespaces
# =============================================================================

class AuthNamespace:
    """Authentication operations (/api/auth/*)."""

    def __init__(self, transport: "Transport") -> None:
        self._transport = transport

    def me(self) -> Dict[str, Any]:
        """GET /api/auth/me - current session user."""
        return self._transport.execute("GET", PATH_AUTH_ME)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Login with email and password.

        The session cookies set by the response are reused by every later
        call made through the same client.

        Returns:
            ``{"user": {"id", "email", "roles", "isEmailVerified"}, "exp": int}``
        """
        payload = self._transport.execute(
            "POST",
            PATH_AUTH_LOGIN,
            headers=required_csrf_headers(),
            json={"email": email, "password": password},
        )
        return normalize_login_response(payload)

    def refresh(self, csrf: Optional[str] = None) -> Dict[str, int]:
        """Refresh the session. The CSRF token is optional for this endpoint."""
        payload = self._transport.execute(
            "POST", PATH_AUTH_REFRESH, headers=optional_csrf_headers(csrf)
        )
        return _refresh_result(payload)

    def logout(self) -> None:
        self._transport.execute("POST", PATH_AUTH_LOGOUT, headers=required_csrf_headers())

    def register(self, data: RegisterInput) -> Dict[str, Any]:
        """Register a new user."""
        return self._transport.execute(
            "POST", PATH_AUTH_REGISTER, headers=required_csrf_headers(), json=_as_payload(data)
        )

    def request_password_reset(self, email: str) -> Dict[str, Any]:
        """Request password reset email."""
        return self._transport.execute(
            "POST",
            PATH_AUTH_PASSWORD_FORGOT,
            headers=required_csrf_headers(),
            json={"email": email},
        )

    def reset_password(self, token: str, password: str) -> None:
        """Set a new password with the token received by email."""
        self._transport.execute(
            "POST",
            PATH_AUTH_PASSWORD_RESET,
            headers=required_csrf_headers(),
            json={"token": token, "password": password},
        )

    def invite_user(self, email: str) -> Dict[str, Any]:
        """Invite a user by email (admin only)."""
        return self._transport.execute(
            "POST", PATH_AUTH_INVITE, headers=required_csrf_headers(), json={"email": email}
        )

    def complete_invite(self, token: str, password: str) -> Dict[str, Any]:
        """Accept an invitation and choose a password."""
        return self._transport.execute(
            "POST",
            PATH_AUTH_INVITE_COMPLETE,
            headers=required_csrf_headers(),
            json=_complete_invite_body(token, password),
        )


class UsersNamespace:
    """User resource (/api/users*)."""

    def __init__(self, transport: "Transport") -> None:
        self._transport = transport

    def list(self) -> Collection:
        payload = self._transport.execute("GET", PATH_USERS, headers=JSON_LD_HEADERS)
        return Collection.from_dict(payload)

    def get(self, user_id: int) -> Item:
        payload = self._transport.execute("GET", f"{PATH_USERS}/{user_id}", headers=JSON_LD_HEADERS)
        return Item.from_dict(payload)

    def delete(self, user_id: int) -> None:
        self._transport.execute("DELETE", f"{PATH_USERS}/{user_id}")


class InvitesNamespace:
    """Invitation resource (/api/invite_users*)."""

    def __init__(self, transport: "Transport") -> None:
        self._transport = transport

    def list(self) -> Collection:
        payload = self._transport.execute("GET", PATH_INVITE_USERS, headers=JSON_LD_HEADERS)
        return Collection.from_dict(payload)

    def get(self, invite_id: int) -> Item:
        payload = self._transport.execute(
            "GET", f"{PATH_INVITE_USERS}/{invite_id}", headers=JSON_LD_HEADERS
        )
        return Item.from_dict(payload)


class SetupNamespace:
    """Initial administrator setup (/api/setup/admin)."""

    def __init__(self, transport: "Transport") -> None:
        self._transport = transport

    def create_initial_admin(self, data: AdminInput) -> Dict[str, Any]:
        return self._transport.execute(
            "POST",
            PATH_SETUP_INITIAL_ADMIN,
            headers=required_csrf_headers(),
            json=_as_payload(data),
        )


# =============================================================================
# Async namespaces
# =============================================================================

class AsyncAuthNamespace:
    """Authentication operations for the async client."""

    def __init__(self, transport: "AsyncTransport") -> None:
        self._transport = transport

    async def me(self) -> Dict[str, Any]:
        return await self._transport.execute("GET", PATH_AUTH_ME)

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Login with email and password."""
        payload = await self._transport.execute(
            "POST",
            PATH_AUTH_LOGIN,
            headers=required_csrf_headers(),
            json={"email": email, "password": password},
        )
        return normalize_login_response(payload)

    async def refresh(self, csrf: Optional[str] = None) -> Dict[str, int]:
        payload = await self._transport.execute(
            "POST", PATH_AUTH_REFRESH, headers=optional_csrf_headers(csrf)
        )
        return _refresh_result(payload)

    async def logout(self) -> None:
        await self._transport.execute("POST", PATH_AUTH_LOGOUT, headers=required_csrf_headers())

    async def register(self, data: RegisterInput) -> Dict[str, Any]:
        return await self._transport.execute(
            "POST", PATH_AUTH_REGISTER, headers=required_csrf_headers(), json=_as_payload(data)
        )

    async def request_password_reset(self, email: str) -> Dict[str, Any]:
        return await self._transport.execute(
            "POST",
            PATH_AUTH_PASSWORD_FORGOT,
            headers=required_csrf_headers(),
            json={"email": email},
        )

    async def reset_password(self, token: str, password: str) -> None:
        await self._transport.execute(
            "POST",
            PATH_AUTH_PASSWORD_RESET,
            headers=required_csrf_headers(),
            json={"token": token, "password": password},
        )

    async def invite_user(self, email: str) -> Dict[str, Any]:
        return await self._transport.execute(
            "POST", PATH_AUTH_INVITE, headers=required_csrf_headers(), json={"email": email}
        )

    async def complete_invite(self, token: str, password: str) -> Dict[str, Any]:
        return await self._transport.execute(
            "POST",
            PATH_AUTH_INVITE_COMPLETE,
            headers=required_csrf_headers(),
            json=_complete_invite_body(token, password),
        )


class AsyncUsersNamespace:
    """User resource for the async client."""

    def __init__(self, transport: "AsyncTransport") -> None:
        self._transport = transport

    async def list(self) -> Collection:
        payload = await self._transport.execute("GET", PATH_USERS, headers=JSON_LD_HEADERS)
        return Collection.from_dict(payload)

    async def get(self, user_id: int) -> Item:
        payload = await self._transport.execute(
            "GET", f"{PATH_USERS}/{user_id}", headers=JSON_LD_HEADERS
        )
        return Item.from_dict(payload)

    async def delete(self, user_id: int) -> None:
        await self._transport.execute("DELETE", f"{PATH_USERS}/{user_id}")


class AsyncInvitesNamespace:
    """Invitation resource for the async client."""

    def __init__(self, transport: "AsyncTransport") -> None:
        self._transport = transport

    async def list(self) -> Collection:
        payload = await self._transport.execute("GET", PATH_INVITE_USERS, headers=JSON_LD_HEADERS)
        return Collection.from_dict(payload)

    async def get(self, invite_id: int) -> Item:
        payload = await self._transport.execute(
            "GET", f"{PATH_INVITE_USERS}/{invite_id}", headers=JSON_LD_HEADERS
        )
        return Item.from_dict(payload)


class AsyncSetupNamespace:
    """Initial administrator setup for the async client."""

    def __init__(self, transport: "AsyncTransport") -> None:
        self._transport = transport

    async def create_initial_admin(self, data: AdminInput) -> Dict[str, Any]:
        return await self._transport.execute(
            "POST",
            PATH_SETUP_INITIAL_ADMIN,
            headers=required_csrf_headers(),
            json=_as_payload(data),
        )
