"""Shared fixtures: an in-memory stand-in for the network."""

from __future__ import annotations

import threading
import time
from typing import Dict, Iterator, List, Optional, Union

import pytest
import requests

REASONS = {200: "OK", 404: "Not Found", 500: "Internal Server Error", 503: "Service Unavailable"}


class FakeResponse:
    def __init__(
        self,
        url: str,
        status_code: int,
        text: str,
        chunk_delay: float = 0.0,
        on_close=None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        self.text = text
        self.reason = REASONS.get(status_code, "")
        self.headers = {"Content-Type": "text/css; charset=utf-8"}
        self.encoding = "utf-8"
        self.chunk_delay = chunk_delay
        self._on_close = on_close

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} {self.reason} for url: {self.url}")

    def iter_content(self, chunk_size: int = 1, decode_unicode: bool = False) -> Iterator[bytes]:
        body = self.text.encode("utf-8")
        # Slow responses trickle one byte at a time.
        step = 1 if self.chunk_delay else max(1, chunk_size)
        for start in range(0, len(body), step):
            if self.chunk_delay:
                time.sleep(self.chunk_delay)
            yield body[start : start + step]

    def close(self) -> None:
        if self._on_close:
            self._on_close()
            self._on_close = None

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class FakeWeb:
    """Maps URLs to canned responses or exceptions and records requests.

    Streamed requests are counted while open so tests can check how many
    downloads ran at the same time.
    """

    def __init__(self) -> None:
        self.routes: Dict[str, Union[tuple, Exception]] = {}
        self.hanging: Dict[str, float] = {}
        self.requests: List[dict] = []
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def add(self, url: str, body: str = "", status: int = 200) -> None:
        self.routes[url] = (status, body, 0.0)

    def trickle(self, url: str, body: str, chunk_delay: float) -> None:
        self.routes[url] = (200, body, chunk_delay)

    def hang(self, url: str, delay: float) -> None:
        """Never answer within ``delay`` seconds; honours the request timeout."""
        self.hanging[url] = delay

    def fail(self, url: str, exc: Optional[Exception] = None) -> None:
        self.routes[url] = exc or requests.ConnectionError(f"cannot reach {url}")

    def _opened(self) -> None:
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)

    def _closed(self) -> None:
        with self._lock:
            self.active -= 1

    def get(self, url, headers=None, timeout=None, stream=False, **kwargs):
        self.requests.append({"url": url, "headers": headers or {}, "timeout": timeout})
        if url in self.hanging:
            delay = self.hanging[url]
            self._opened()
            try:
                time.sleep(min(delay, timeout) if timeout is not None else delay)
            finally:
                self._closed()
            if timeout is not None and delay > timeout:
                raise requests.ReadTimeout(f"read timed out after {timeout}s")
            return FakeResponse(url, 200, "")
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(url, 404, "")
        if isinstance(route, Exception):
            raise route
        status, body, chunk_delay = route
        if not stream:
            return FakeResponse(url, status, body)
        self._opened()
        return FakeResponse(url, status, body, chunk_delay, on_close=self._closed)

    @property
    def requested_urls(self) -> List[str]:
        return [entry["url"] for entry in self.requests]


@pytest.fixture
def fake_web(monkeypatch: pytest.MonkeyPatch) -> FakeWeb:
    web = FakeWeb()
    monkeypatch.setattr(requests, "get", web.get)
    return web
