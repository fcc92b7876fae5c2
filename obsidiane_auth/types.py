"""
Obsidiane Auth SDK Type Definitions

Configuration and lightweight models mirroring the Auth API payloads.
The API itself always answers with JSON mappings; these models are an
optional typed view over them.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from .errors import ConfigurationError


@dataclass
class AuthClientConfig:
    """SDK configuration options."""

    # API base URL, e.g. https://auth.example.com (required)
    base_url: str
    # Headers sent with every request
    headers: Optional[Dict[str, str]] = None
    # Request timeout in milliseconds (default: httpx default)
    timeout_ms: Optional[int] = None
    # Origin header value; derived from base_url when not set
    origin: Optional[str] = None
    # Enable debug logging (default: False)
    debug: bool = False

    @classmethod
    def from_env(cls, prefix: str = "OBSIDIANE_AUTH_") -> "AuthClientConfig":
        """Create config from environment variables."""

        def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
            return os.environ.get(f"{prefix}{key}", default)

        base_url = get_env("BASE_URL")
        if not base_url:
            raise ConfigurationError(
                f"{prefix}BASE_URL environment variable is required",
                {"variable": f"{prefix}BASE_URL"},
            )

        timeout = get_env("TIMEOUT_MS")
        try:
            timeout_ms = int(timeout) if timeout else None
        except ValueError:
            raise ConfigurationError(
                f"{prefix}TIMEOUT_MS must be an integer",
                {"variable": f"{prefix}TIMEOUT_MS", "value": timeout},
            )

        return cls(
            base_url=base_url,
            timeout_ms=timeout_ms,
            origin=get_env("ORIGIN") or None,
            debug=(get_env("DEBUG", "") or "").lower() in ("1", "true", "yes", "on"),
        )


def _to_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class User:
    """User resource (UserRead)."""

    id: int
    email: str
    roles: List[str] = field(default_factory=list)
    is_email_verified: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        """Create from dictionary."""
        roles = data.get("roles")
        return cls(
            id=_to_int(data.get("id")),
            email=str(data.get("email") or ""),
            roles=[str(role) for role in roles] if isinstance(roles, list) else [],
            is_email_verified=bool(data.get("isEmailVerified", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "roles": list(self.roles),
            "isEmailVerified": self.is_email_verified,
        }


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass
class Invite:
    """Invitation resource (InviteUserRead)."""

    id: int
    email: str
    created_at: datetime
    expires_at: datetime
    accepted_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Invite":
        """Create from dictionary. Missing creation/expiry dates default to now."""
        now = datetime.now(timezone.utc)
        return cls(
            id=_to_int(data.get("id")),
            email=str(data.get("email") or ""),
            created_at=_parse_datetime(data.get("createdAt")) or now,
            expires_at=_parse_datetime(data.get("expiresAt")) or now,
            accepted_at=_parse_datetime(data.get("acceptedAt")),
        )

    @property
    def is_accepted(self) -> bool:
        return self.accepted_at is not None


def normalize_login_response(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Normalize a login response to ``{"user": {...}, "exp": int}``.

    Missing fields get neutral defaults so callers can index the result
    without guarding every key.
    """
    user = payload.get("user")
    if not isinstance(user, Mapping):
        user = {}
    return {
        "user": User.from_dict(user).to_dict(),
        "exp": _to_int(payload.get("exp")),
    }


@dataclass
class RegisterData:
    """User registration data."""

    email: str
    password: str
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API requests."""
        result: Dict[str, Any] = dict(self.extra)
        result["email"] = self.email
        result["password"] = self.password
        return result


@dataclass
class InitialAdminData:
    """Initial administrator account created through /api/setup/admin."""

    email: str
    password: str

    def to_dict(self) -> Dict[str, Any]:
        return {"email": self.email, "password": self.password}
