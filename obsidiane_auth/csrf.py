"""
Stateless CSRF tokens.

The Auth API checks a random ``csrf-token`` header together with the
request Origin, so tokens are generated locally and never stored.
"""

import secrets
from typing import Dict, Optional


CSRF_HEADER = "csrf-token"
CSRF_TOKEN_BYTES = 16


def generate_csrf_token() -> str:
    """Return a fresh 32-character hexadecimal token."""
    return secrets.token_hex(CSRF_TOKEN_BYTES)


def required_csrf_headers() -> Dict[str, str]:
    """Headers for endpoints that always need a CSRF token."""
    return {CSRF_HEADER: generate_csrf_token()}


def optional_csrf_headers(token: Optional[str] = None) -> Dict[str, str]:
    """Headers for endpoints where the CSRF token is caller-supplied and optional."""
    if not token:
        return {}
    return {CSRF_HEADER: token}
