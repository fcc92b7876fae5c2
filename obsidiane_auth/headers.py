"""
Request header policy.

Computes the effective headers of a request from the SDK defaults, the
client-level default headers, per-call overrides, the self-declared Origin
and the session cookies.
"""

from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit


CONTENT_TYPE_JSON = "application/json"
ACCEPT_JSON = "application/json"
ACCEPT_JSON_LD = "application/ld+json, application/json"


def _netloc_host(netloc: str) -> str:
    # host as written in the URL, without userinfo or port
    hostinfo = netloc.rpartition("@")[2]
    if hostinfo.startswith("["):
        return hostinfo[: hostinfo.index("]") + 1]
    return hostinfo.partition(":")[0]


def compute_origin(base_url: str) -> Optional[str]:
    """
    Derive ``scheme://host[:port]`` from a base URL.

    The host keeps the spelling used in the base URL. Returns None when the
    URL has no scheme or host, or an invalid port.
    """
    if not base_url:
        return None

    try:
        parts = urlsplit(base_url)
        port = parts.port
    except ValueError:
        return None

    if not parts.scheme or not parts.hostname:
        return None

    host = _netloc_host(parts.netloc)
    suffix = f":{port}" if port is not None else ""
    return f"{parts.scheme}://{host}{suffix}"


def normalize_headers(headers: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Coerce header values to strings."""
    if not headers:
        return {}
    return {str(name): str(value) for name, value in headers.items()}


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    lowered = name.lower()
    return any(key.lower() == lowered for key in headers)


def _merge(target: Dict[str, str], source: Mapping[str, str]) -> None:
    # header names are case-insensitive: the incoming spelling replaces the old one
    for name, value in source.items():
        for existing in [key for key in target if key.lower() == name.lower()]:
            del target[existing]
        target[name] = value


class HeaderPolicy:
    """Builds the final header mapping for each request."""

    def __init__(
        self,
        default_headers: Optional[Mapping[str, Any]] = None,
        origin: Optional[str] = None,
    ) -> None:
        self.default_headers = normalize_headers(default_headers)
        self.origin = origin

    def build(
        self,
        overrides: Optional[Mapping[str, Any]] = None,
        cookie: str = "",
    ) -> Dict[str, str]:
        """
        Build request headers.

        Args:
            overrides: Per-call headers; they take precedence over everything.
            cookie: Rendered Cookie header value from the session jar. It is
                not attached when the overrides already carry a Cookie
                header; the caller's value is then sent unchanged.

        Returns:
            Header mapping ready to be sent.
        """
        headers: Dict[str, str] = {
            "Content-Type": CONTENT_TYPE_JSON,
            "Accept": ACCEPT_JSON,
        }
        _merge(headers, self.default_headers)
        _merge(headers, normalize_headers(overrides))

        if self.origin and not _has_header(headers, "Origin"):
            headers["Origin"] = self.origin

        if cookie and not _has_header(headers, "Cookie"):
            headers["Cookie"] = cookie

        return headers
