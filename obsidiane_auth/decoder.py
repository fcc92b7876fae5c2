"""
Response decoding.

Turns a raw HTTP exchange (status, body bytes) into a tagged result: either
a decoded JSON mapping or an ApiError. Two rules always hold:

* ``204 No Content`` is an empty success, whatever the body contains.
* A status >= 400 is an error, even when the body is valid JSON.

Bodies that cannot be parsed are preserved as ``{"raw": <text>}`` instead
of being dropped, so HTML error pages injected by proxies or truncated
payloads stay available for diagnostics.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from .errors import ApiError


logger = logging.getLogger("obsidiane_auth")

RawBody = Union[bytes, str, None]


@dataclass
class DecodedResponse:
    """Result of decoding a response: ``data`` on success, ``error`` on failure."""

    status: int
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Dict[str, Any]:
        """Return the success mapping or raise the decoded ApiError."""
        if self.error is not None:
            raise self.error
        return self.data


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _parse_strict(raw: bytes) -> Any:
    return json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)


def _parse_lenient(text: str) -> Any:
    return json.loads(text.lstrip("\ufeff"), strict=False)


def _as_bytes(raw: RawBody) -> bytes:
    if raw is None:
        return b""
    if isinstance(raw, str):
        return raw.encode("utf-8")
    return bytes(raw)


def decode_body(raw: RawBody) -> Dict[str, Any]:
    """
    Decode a response body into a mapping.

    Args:
        raw: Response body bytes (or text).

    Returns:
        The parsed JSON object; ``{}`` for an empty body or a JSON value
        that is not an object; ``{"raw": text}`` when the body is not JSON.
        Invalid UTF-8 bytes in ``text`` are kept as surrogate escapes, so
        ``text.encode("utf-8", "surrogateescape")`` gives back the body.
    """
    content = _as_bytes(raw)
    if not content:
        return {}

    try:
        parsed = _parse_strict(content)
    except (ValueError, RecursionError):
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors;
        # RecursionError comes from bodies nested deeper than the parser allows
        text = content.decode("utf-8", errors="surrogateescape")
        try:
            parsed = _parse_lenient(text)
        except (ValueError, RecursionError):
            return {"raw": text}
        if isinstance(parsed, dict):
            return parsed
        return {"raw": text}

    return parsed if isinstance(parsed, dict) else {}


def decode_response(status: int, raw: RawBody) -> DecodedResponse:
    """
    Classify a response by status code and decode its body.

    Args:
        status: HTTP status code.
        raw: Response body bytes (or text).

    Returns:
        DecodedResponse holding either the body mapping or an ApiError.
    """
    if status == 204:
        return DecodedResponse(status=status)

    body = decode_body(raw)

    if status >= 400:
        error = ApiError.from_payload(status, body)
        logger.debug("API error %s", error.message)
        return DecodedResponse(status=status, error=error)

    return DecodedResponse(status=status, data=body)
