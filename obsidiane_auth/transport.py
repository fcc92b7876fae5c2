"""
Obsidiane Auth SDK Transport

Low-level HTTP layer shared by every endpoint. It owns the session cookie
jar, builds request headers (Origin, CSRF, Cookie), dispatches the request
through httpx and decodes the response into a mapping or an ApiError.

One transport instance is one session: cookies set by a response are sent
back on every later request issued through the same instance.
"""

import asyncio
import json
import logging
import threading
from typing import Any, Dict, Literal, Mapping, Optional, Tuple, Union

import httpx

from .cookies import CookieJar
from .csrf import generate_csrf_token
from .decoder import decode_response
from .errors import ConfigurationError, NetworkError, SerializationError
from .headers import HeaderPolicy, compute_origin


logger = logging.getLogger("obsidiane_auth")

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
RequestBody = Union[bytes, str, None]


def _timeout_seconds(timeout_ms: Optional[float]) -> Optional[float]:
    if timeout_ms is None:
        return None
    if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, (int, float)) or timeout_ms <= 0:
        raise ConfigurationError(
            "timeout_ms must be a positive number of milliseconds",
            {"timeout_ms": timeout_ms},
        )
    return timeout_ms / 1000


def encode_json_body(payload: Any) -> bytes:
    """Serialize a structured request body as UTF-8 JSON."""
    try:
        return json.dumps(payload, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(
            f"Request body is not JSON serializable: {e}",
            {"type": type(payload).__name__},
        ) from e


def _resolve_body(payload: Any, body: RequestBody) -> Optional[bytes]:
    if payload is not None:
        return encode_json_body(payload)
    if body is None or body == b"" or body == "":
        return None
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


class _TransportBase:
    """Configuration and per-request preparation shared by both transports."""

    def __init__(
        self,
        base_url: str,
        default_headers: Optional[Mapping[str, Any]] = None,
        timeout_ms: Optional[float] = None,
        origin: Optional[str] = None,
        debug: bool = False,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ConfigurationError("base_url is required")

        self.base_url = base_url.strip().rstrip("/")
        self.timeout = _timeout_seconds(timeout_ms)
        self.origin = origin or compute_origin(self.base_url)
        self.cookies = CookieJar()
        self._header_policy = HeaderPolicy(default_headers, self.origin)
        self._debug = debug

    def _log(self, message: str, *args: Any) -> None:
        """Log debug message."""
        if self._debug:
            logger.debug(f"[Obsidiane] {message}", *args)

    def _client_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"follow_redirects": False}
        if self.timeout is not None:
            options["timeout"] = self.timeout
        return options

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def issue_csrf_token(self) -> str:
        """Generate a stateless CSRF token for a state-changing request."""
        return generate_csrf_token()

    def build_headers(self, headers: Optional[Mapping[str, Any]] = None) -> Dict[str, str]:
        """Headers the next request would carry, session cookie included."""
        return self._header_policy.build(headers, cookie=self.cookies.header())

    def _prepare(
        self,
        headers: Optional[Mapping[str, Any]],
        payload: Any,
        body: RequestBody,
    ) -> Tuple[Dict[str, str], Optional[bytes]]:
        return self.build_headers(headers), _resolve_body(payload, body)

    def _timeout_error(self, error: httpx.TimeoutException) -> NetworkError:
        return NetworkError("Request timeout", {"timeout": self.timeout, "cause": str(error)})

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_url={self.base_url!r})"


class Transport(_TransportBase):
    """Synchronous transport backed by httpx.Client."""

    def __init__(
        self,
        base_url: str,
        default_headers: Optional[Mapping[str, Any]] = None,
        timeout_ms: Optional[float] = None,
        origin: Optional[str] = None,
        debug: bool = False,
    ) -> None:
        super().__init__(base_url, default_headers, timeout_ms, origin, debug)
        self._lock = threading.Lock()
        self._http_client = httpx.Client(**self._client_options())

    def execute(
        self,
        method: HttpMethod,
        path: str,
        *,
        headers: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        body: RequestBody = None,
    ) -> Dict[str, Any]:
        """
        Perform a request and decode the JSON response.

        Args:
            method: HTTP method.
            path: Path appended to the base URL (e.g. "/api/auth/me").
            headers: Per-call header overrides.
            json: Structured body, serialized as JSON. Wins over ``body``.
            body: Pre-serialized raw body.

        Returns:
            Decoded response mapping ({} for 204 No Content).

        Raises:
            ApiError: Response status >= 400.
            SerializationError: ``json`` cannot be encoded.
            NetworkError: Connection failure or timeout.
        """
        method = method.upper()  # type: ignore[assignment]
        url = self.url(path)

        with self._lock:
            request_headers, content = self._prepare(headers, json, body)
            self._log("%s %s", method, path)
            try:
                response = self._http_client.request(
                    method, url, headers=request_headers, content=content
                )
            except httpx.TimeoutException as e:
                raise self._timeout_error(e) from e
            except httpx.RequestError as e:
                raise NetworkError(str(e) or "Request failed", {"url": url}) from e
            finally:
                # the CookieJar is the only session store
                self._http_client.cookies.clear()

            self.cookies.ingest(response.headers)

        self._log("%s %s -> %s", method, path, response.status_code)
        return decode_response(response.status_code, response.content).unwrap()

    def close(self) -> None:
        """Close the HTTP client."""
        self._http_client.close()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class AsyncTransport(_TransportBase):
    """Asynchronous transport backed by httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str,
        default_headers: Optional[Mapping[str, Any]] = None,
        timeout_ms: Optional[float] = None,
        origin: Optional[str] = None,
        debug: bool = False,
    ) -> None:
        super().__init__(base_url, default_headers, timeout_ms, origin, debug)
        # created lazily so they bind to the running event loop
        self._lock: Optional[asyncio.Lock] = None
        self._http_client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(**self._client_options())
        return self._http_client

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def execute(
        self,
        method: HttpMethod,
        path: str,
        *,
        headers: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        body: RequestBody = None,
    ) -> Dict[str, Any]:
        """Async counterpart of Transport.execute."""
        method = method.upper()  # type: ignore[assignment]
        url = self.url(path)

        async with self._get_lock():
            request_headers, content = self._prepare(headers, json, body)
            self._log("%s %s", method, path)
            client = self._get_client()
            try:
                response = await client.request(
                    method, url, headers=request_headers, content=content
                )
            except httpx.TimeoutException as e:
                raise self._timeout_error(e) from e
            except httpx.RequestError as e:
                raise NetworkError(str(e) or "Request failed", {"url": url}) from e
            finally:
                client.cookies.clear()

            self.cookies.ingest(response.headers)

        self._log("%s %s -> %s", method, path, response.status_code)
        return decode_response(response.status_code, response.content).unwrap()

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "AsyncTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
