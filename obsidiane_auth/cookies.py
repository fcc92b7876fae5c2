"""
Obsidiane Auth SDK Cookie Jar

Minimal in-memory session store. Only cookie names and values are kept;
expiry, path and domain attributes are ignored, so the jar lives exactly
as long as the client that owns it.
"""

import threading
from typing import Dict, Iterable, Optional, Tuple, Union

import httpx


HeaderSource = Union[httpx.Headers, Iterable[Tuple[str, str]]]


class CookieJar:
    """Name/value cookie store fed from Set-Cookie response headers."""

    def __init__(self) -> None:
        self._cookies: Dict[str, str] = {}
        self._lock = threading.Lock()

    def ingest(self, headers: HeaderSource) -> None:
        """
        Store every cookie set by a response.

        Args:
            headers: Response headers, either an httpx.Headers instance or
                an iterable of (name, value) pairs. A response may carry
                several Set-Cookie headers; all of them are read.
        """
        if isinstance(headers, httpx.Headers):
            pairs: Iterable[Tuple[str, str]] = headers.multi_items()
        else:
            pairs = headers

        values = [value for name, value in pairs if name.lower() == "set-cookie"]
        with self._lock:
            for line in values:
                self._store(line)

    def _store(self, line: str) -> None:
        pair = line.split(";", 1)[0].strip()
        parts = pair.split("=", 1)
        if len(parts) == 2:
            self._cookies[parts[0]] = parts[1]

    def header(self) -> str:
        """Render the jar as a Cookie request header value ("" when empty)."""
        with self._lock:
            return "; ".join(f"{name}={value}" for name, value in self._cookies.items())

    def get(self, name: str) -> Optional[str]:
        with self._lock:
            return self._cookies.get(name)

    def as_dict(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._cookies)

    def clear(self) -> None:
        """Forget every stored cookie."""
        with self._lock:
            self._cookies.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cookies)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._cookies

    def __repr__(self) -> str:
        return f"CookieJar(names={list(self.as_dict())!r})"
