"""
Obsidiane Auth Python SDK

A Python SDK for the Obsidiane Auth API with sync and async clients,
cookie-based sessions, stateless CSRF tokens and JSON-LD resources.
"""

from .client import AuthClient, AsyncAuthClient, create_auth_client, create_async_auth_client
from .cookies import CookieJar
from .csrf import CSRF_HEADER, generate_csrf_token
from .decoder import DecodedResponse, decode_response
from .errors import (
    ObsidianeAuthError,
    ApiError,
    NetworkError,
    ConfigurationError,
    SerializationError,
    is_obsidiane_error,
    is_api_error,
)
from .headers import HeaderPolicy, compute_origin
from .jsonld import Collection, Item
from .transport import Transport, AsyncTransport
from .types import (
    AuthClientConfig,
    User,
    Invite,
    RegisterData,
    InitialAdminData,
    normalize_login_response,
)

__version__ = "1.0.0"
__all__ = [
    # Clients
    "AuthClient",
    "AsyncAuthClient",
    "create_auth_client",
    "create_async_auth_client",
    # Transport
    "Transport",
    "AsyncTransport",
    "CookieJar",
    "HeaderPolicy",
    "compute_origin",
    "CSRF_HEADER",
    "generate_csrf_token",
    "DecodedResponse",
    "decode_response",
    # JSON-LD
    "Collection",
    "Item",
    # Types
    "AuthClientConfig",
    "User",
    "Invite",
    "RegisterData",
    "InitialAdminData",
    "normalize_login_response",
    # Errors
    "ObsidianeAuthError",
    "ApiError",
    "NetworkError",
    "ConfigurationError",
    "SerializationError",
    "is_obsidiane_error",
    "is_api_error",
]
