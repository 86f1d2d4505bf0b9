"""HTTP client with timeouts and host-aware rate limiting."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from types import TracebackType
from typing import Any
from urllib.parse import urlparse

import requests

from dustwatch.common.constants import USER_AGENT
from dustwatch.common.errors import FetchError


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 10.0
    read: float = 30.0


class HttpRequestError(FetchError):
    error_code = "HTTP_ERROR"


class TokenBucket:
    def __init__(self, rate_per_sec: float, capacity: float | None = None) -> None:
        self.rate_per_sec = rate_per_sec
        self.capacity = capacity if capacity is not None else rate_per_sec
        self.tokens = self.capacity
        self.updated_at = time.monotonic()
        self.lock = threading.Lock()

    def acquire(self, tokens: float = 1.0) -> None:
        while True:
            with self.lock:
                now = time.monotonic()
                elapsed = now - self.updated_at
                self.tokens = min(self.capacity, self.tokens + elapsed * self.rate_per_sec)
                self.updated_at = now
                if self.tokens >= tokens:
                    self.tokens -= tokens
                    return
                deficit = tokens - self.tokens
                wait_for = max(deficit / self.rate_per_sec, 0.01)
            time.sleep(wait_for)


class HostRateLimiter:
    def __init__(self, default_rate_per_sec: float) -> None:
        self.default_rate_per_sec = default_rate_per_sec
        self.buckets: dict[str, TokenBucket] = {}
        self.lock = threading.Lock()

    def acquire(self, host: str, tokens: float = 1.0) -> None:
        with self.lock:
            bucket = self.buckets.get(host)
            if bucket is None:
                bucket = TokenBucket(rate_per_sec=self.default_rate_per_sec)
                self.buckets[host] = bucket
        bucket.acquire(tokens=tokens)


class HttpClient:
    """Single-attempt JSON client shared by all fetch workers of a cycle."""

    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        rate_per_sec: float | None = None,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.session = requests.Session()
        self.limiter = HostRateLimiter(default_rate_per_sec=rate_per_sec) if rate_per_sec else None

    @classmethod
    def from_config(cls, http_config: dict) -> "HttpClient":
        return cls(
            timeout=TimeoutConfig(
                connect=float(http_config["connect_timeout"]),
                read=float(http_config["read_timeout"]),
            ),
            rate_per_sec=float(http_config["rate_per_sec"]) or None,
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _host(self, url: str) -> str:
        return urlparse(url).netloc

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        out = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if headers:
            out.update(headers)
        return out

    def _raise_for_status(self, response: requests.Response, url: str) -> None:
        status = response.status_code
        if status >= 400:
            raise HttpRequestError(f"HTTP status {status} from {url}")

    def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> dict[str, Any]:
        req_timeout = timeout or self.timeout
        if self.limiter is not None:
            self.limiter.acquire(self._host(url))

        try:
            response = self.session.request(
                method="GET",
                url=url,
                params=params,
                headers=self._headers(headers),
                timeout=(req_timeout.connect, req_timeout.read),
            )
        except requests.RequestException as exc:
            raise HttpRequestError(f"Request to {url} failed: {exc}") from exc
        self._raise_for_status(response, url)

        try:
            payload = response.json()
        except ValueError as exc:
            raise HttpRequestError(f"Invalid JSON payload from {url}") from exc

        if not isinstance(payload, dict):
            raise HttpRequestError(f"Unexpected JSON document from {url}")
        return payload
