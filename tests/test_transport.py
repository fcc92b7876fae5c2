"""
Tests for the HTTP transport: headers, bodies, session cookies and errors.
"""

import json

import httpx
import pytest
import respx

from obsidiane_auth.errors import (
    ApiError,
    ConfigurationError,
    NetworkError,
    SerializationError,
)
from obsidiane_auth.transport import AsyncTransport, Transport, encode_json_body


BASE_URL = "https://api.example.com:8443"


@pytest.fixture
def transport() -> Transport:
    return Transport(BASE_URL)


class TestConstruction:
    """Construction-time validation."""

    @pytest.mark.parametrize("base_url", ["", "   "])
    def test_empty_base_url(self, base_url):
        with pytest.raises(ConfigurationError):
            Transport(base_url)

    def test_trailing_slashes(self):
        assert Transport("https://api.example.com///").base_url == "https://api.example.com"

    def test_timeout_converted_to_seconds(self):
        assert Transport(BASE_URL, timeout_ms=2500).timeout == 2.5

    def test_timeout_unset(self):
        assert Transport(BASE_URL).timeout is None

    @pytest.mark.parametrize("timeout_ms", [0, -10])
    def test_invalid_timeout(self, timeout_ms):
        with pytest.raises(ConfigurationError):
            Transport(BASE_URL, timeout_ms=timeout_ms)

    def test_origin_derived_from_base_url(self, transport: Transport):
        assert transport.origin == "https://api.example.com:8443"

    def test_no_origin_for_relative_base_url(self):
        assert Transport("/api").origin is None


class TestRequests:
    """Request building and dispatch."""

    @respx.mock
    def test_default_request_headers(self, transport: Transport):
        route = respx.get(f"{BASE_URL}/api/auth/me").mock(
            return_value=httpx.Response(200, json={"ok": True})
        )

        assert transport.execute("GET", "/api/auth/me") == {"ok": True}

        headers = route.calls.last.request.headers
        assert headers["content-type"] == "application/json"
        assert headers["accept"] == "application/json"
        assert headers["origin"] == "https://api.example.com:8443"
        assert "cookie" not in headers

    @respx.mock
    def test_override_precedence(self):
        transport = Transport(BASE_URL, default_headers={"X-App": "demo", "Accept": "text/plain"})
        route = respx.get(f"{BASE_URL}/ping").mock(return_value=httpx.Response(200, json={}))

        transport.execute("GET", "/ping", headers={"accept": "application/ld+json", "X-Retry": 1})

        headers = route.calls.last.request.headers
        assert headers["x-app"] == "demo"
        assert headers.get_list("accept") == ["application/ld+json"]
        assert headers["x-retry"] == "1"

    @respx.mock
    def test_caller_origin_not_replaced(self, transport: Transport):
        route = respx.get(f"{BASE_URL}/ping").mock(return_value=httpx.Response(200, json={}))

        transport.execute("GET", "/ping", headers={"origin": "https://app.example.com"})

        assert route.calls.last.request.headers.get_list("origin") == ["https://app.example.com"]

    @respx.mock
    def test_json_body_wins_over_raw_body(self, transport: Transport):
        route = respx.post(f"{BASE_URL}/echo").mock(return_value=httpx.Response(200, json={}))

        transport.execute("POST", "/echo", json={"name": "élan"}, body="ignored")

        assert json.loads(route.calls.last.request.content.decode("utf-8")) == {"name": "élan"}

    @respx.mock
    def test_raw_body(self, transport: Transport):
        route = respx.post(f"{BASE_URL}/echo").mock(return_value=httpx.Response(200, json={}))

        transport.execute("POST", "/echo", body='{"pre":"serialized"}')

        assert route.calls.last.request.content == b'{"pre":"serialized"}'

    @respx.mock
    def test_lowercase_method(self, transport: Transport):
        route = respx.delete(f"{BASE_URL}/api/users/1").mock(return_value=httpx.Response(204))

        assert transport.execute("delete", "/api/users/1") == {}
        assert route.called

    @respx.mock
    def test_unserializable_body_is_not_sent(self, transport: Transport):
        route = respx.post(f"{BASE_URL}/echo").mock(return_value=httpx.Response(200, json={}))

        with pytest.raises(SerializationError):
            transport.execute("POST", "/echo", json={"when": object()})

        with pytest.raises(SerializationError):
            transport.execute("POST", "/echo", json={"value": float("nan")})

        assert not route.called

    def test_encode_json_body(self):
        assert encode_json_body({"a": [1, 2]}) == b'{"a": [1, 2]}'


class TestSession:
    """Cookie continuity across calls."""

    @respx.mock
    def test_cookies_sent_back(self, transport: Transport):
        respx.post(f"{BASE_URL}/api/auth/login").mock(
            return_value=httpx.Response(
                200,
                json={},
                headers=[
                    ("Set-Cookie", "BEARER=token1; Path=/; HttpOnly"),
                    ("Set-Cookie", "REFRESH=token2; Path=/api/auth"),
                ],
            )
        )
        me = respx.get(f"{BASE_URL}/api/auth/me").mock(return_value=httpx.Response(200, json={}))

        transport.execute("POST", "/api/auth/login", json={})
        transport.execute("GET", "/api/auth/me")

        assert me.calls.last.request.headers["cookie"] == "BEARER=token1; REFRESH=token2"

    @respx.mock
    def test_last_cookie_wins(self, transport: Transport):
        route = respx.get(f"{BASE_URL}/step").mock(side_effect=[
            httpx.Response(200, json={}, headers={"Set-Cookie": "a=1"}),
            httpx.Response(200, json={}, headers={"Set-Cookie": "a=2; Path=/"}),
            httpx.Response(200, json={}),
        ])

        transport.execute("GET", "/step")
        transport.execute("GET", "/step")
        transport.execute("GET", "/step")

        assert route.calls.last.request.headers["cookie"] == "a=2"

    @respx.mock
    def test_cookies_ingested_from_error_response(self, transport: Transport):
        respx.post(f"{BASE_URL}/api/auth/logout").mock(
            return_value=httpx.Response(401, json={"error": "expired"}, headers={"Set-Cookie": "BEARER=; Path=/"})
        )

        with pytest.raises(ApiError):
            transport.execute("POST", "/api/auth/logout")

        assert transport.cookies.get("BEARER") == ""

    @respx.mock
    def test_sessions_are_per_instance(self):
        first, second = Transport(BASE_URL), Transport(BASE_URL)
        respx.get(f"{BASE_URL}/login").mock(
            return_value=httpx.Response(200, json={}, headers={"Set-Cookie": "session=abc"})
        )
        other = respx.get(f"{BASE_URL}/other").mock(return_value=httpx.Response(200, json={}))

        first.execute("GET", "/login")
        second.execute("GET", "/other")

        assert "cookie" not in other.calls.last.request.headers
        assert len(second.cookies) == 0


class TestErrors:
    """Error propagation."""

    @respx.mock
    def test_api_error(self, transport: Transport):
        respx.get(f"{BASE_URL}/api/users/5").mock(
            return_value=httpx.Response(404, json={"error": "not_found", "details": {"id": 5}})
        )

        with pytest.raises(ApiError) as exc_info:
            transport.execute("GET", "/api/users/5")

        error = exc_info.value
        assert error.status_code == 404
        assert error.code == "not_found"
        assert error.details == {"id": 5}
        assert error.payload == {"error": "not_found", "details": {"id": 5}}

    @respx.mock
    def test_html_error_page(self, transport: Transport):
        respx.get(f"{BASE_URL}/api/auth/me").mock(
            return_value=httpx.Response(502, text="<html>Bad Gateway</html>")
        )

        with pytest.raises(ApiError) as exc_info:
            transport.execute("GET", "/api/auth/me")

        assert exc_info.value.code == "unknown_error"
        assert exc_info.value.payload == {"raw": "<html>Bad Gateway</html>"}

    @respx.mock
    def test_deeply_nested_error_body(self, transport: Transport):
        respx.get(f"{BASE_URL}/x").mock(return_value=httpx.Response(500, content=b"[" * 100000))

        with pytest.raises(ApiError) as exc_info:
            transport.execute("GET", "/x")

        assert exc_info.value.status_code == 500
        assert exc_info.value.code == "unknown_error"

    @respx.mock
    def test_connection_error(self, transport: Transport):
        respx.get(f"{BASE_URL}/api/auth/me").mock(side_effect=httpx.ConnectError)

        with pytest.raises(NetworkError) as exc_info:
            transport.execute("GET", "/api/auth/me")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @respx.mock
    def test_timeout(self):
        transport = Transport(BASE_URL, timeout_ms=500)
        respx.get(f"{BASE_URL}/api/auth/me").mock(side_effect=httpx.ReadTimeout)

        with pytest.raises(NetworkError) as exc_info:
            transport.execute("GET", "/api/auth/me")

        assert exc_info.value.details["timeout"] == 0.5


class TestAsyncTransport:
    """Async transport mirrors the sync behaviour."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_session_and_decoding(self):
        transport = AsyncTransport(BASE_URL)
        respx.post(f"{BASE_URL}/api/auth/login").mock(
            return_value=httpx.Response(200, json={"exp": 1}, headers={"Set-Cookie": "session=abc"})
        )
        me = respx.get(f"{BASE_URL}/api/auth/me").mock(return_value=httpx.Response(200, text="not json"))

        assert await transport.execute("POST", "/api/auth/login", json={"email": "a@x.com"}) == {"exp": 1}
        assert await transport.execute("GET", "/api/auth/me") == {"raw": "not json"}
        assert me.calls.last.request.headers["cookie"] == "session=abc"
        assert me.calls.last.request.headers["origin"] == "https://api.example.com:8443"

        await transport.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error(self):
        respx.get(f"{BASE_URL}/api/auth/me").mock(side_effect=httpx.ConnectError)

        async with AsyncTransport(BASE_URL) as transport:
            with pytest.raises(NetworkError):
                await transport.execute("GET", "/api/auth/me")
