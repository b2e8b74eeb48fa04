"""
Async JSON-over-HTTP client shared by the provider integrations.

ESPN serves box scores and rosters from different hosts, so requests are
paced per host rather than globally. Every call goes through the same retry
policy: transport errors, 429 and 5xx are retried with exponential backoff,
other 4xx fail at once.

Usage:
    class MyClient(JsonApiClient):
        BASE_URL = "https://api.example.com"

        async def get_data(self) -> dict:
            return await self.get_json("/data")
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

import httpx

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ExternalAPIError(Exception):
    """A request that did not produce a usable JSON body."""

    def __init__(
        self,
        message: str,
        code: str = "EXTERNAL_API_ERROR",
        status_code: int | None = None,
        url: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.url = url


class RateLimitError(ExternalAPIError):
    """Still rate limited (429) after the last attempt."""

    def __init__(self, message: str, retry_after: float, url: str | None = None):
        super().__init__(message, code="RATE_LIMITED", status_code=429, url=url)
        self.retry_after = retry_after


class InvalidResponseError(ExternalAPIError):
    """A successful response whose body is not JSON."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message, code="INVALID_RESPONSE", status_code=502, url=url)


# ---------------------------------------------------------------------------
# Pacing / retries
# ---------------------------------------------------------------------------

class HostRateLimiter:
    """Keeps at least ``60 / requests_per_minute`` seconds between calls to the same host."""

    def __init__(self, requests_per_minute: int = 120):
        self.interval = 60.0 / requests_per_minute
        self._last: dict[str, float] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    async def wait(self, host: str) -> None:
        lock = self._locks.setdefault(host, asyncio.Lock())
        async with lock:
            last = self._last.get(host)
            if last is not None:
                remaining = self.interval - (time.monotonic() - last)
                if remaining > 0:
                    await asyncio.sleep(remaining)
            self._last[host] = time.monotonic()


@dataclass(frozen=True)
class RetryPolicy:
    """How many attempts a request gets and how long to wait between them."""

    attempts: int = 3
    backoff_base: float = 1.0
    max_wait: float = 30.0
    retry_statuses: tuple[int, ...] = (429, 500, 502, 503, 504)

    def backoff(self, attempt: int) -> float:
        """Wait before retrying after the given (0-based) attempt."""
        return min(self.backoff_base * 2 ** attempt, self.max_wait)

    def should_retry(self, status: int) -> bool:
        return status in self.retry_statuses


def parse_retry_after(value: str | None, default: float = 60.0) -> float:
    """Seconds from a Retry-After header; HTTP-date or garbage values use ``default``."""
    if not value:
        return default
    try:
        return max(float(value), 0.0)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class JsonApiClient:
    """
    Async client for JSON endpoints with per-host pacing and retries.

    Subclasses set BASE_URL; absolute URLs bypass it. Use as an async context
    manager, or let the first request open the connection pool and call
    ``close()`` when done:

        async with MyClient() as client:
            data = await client.get_json("/endpoint")

    A custom ``transport`` can be injected (tests use ``httpx.MockTransport``).
    """

    BASE_URL: str = ""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        headers: dict[str, str] | None = None,
        requests_per_minute: int = 120,
        timeout: float = 30.0,
        retry: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or self.BASE_URL).rstrip("/")
        self._headers = headers or {}
        self._limiter = HostRateLimiter(requests_per_minute)
        self._timeout = timeout
        self.retry = retry or RetryPolicy()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "JsonApiClient":
        self._open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _open(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers,
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    def _host_for(self, url: str) -> str:
        return urlsplit(url).netloc or urlsplit(self._base_url).netloc

    async def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """
        GET ``url`` and decode the JSON body.

        Raises:
            RateLimitError: If the host still answers 429 on the last attempt
            InvalidResponseError: If a 2xx body is not JSON
            ExternalAPIError: On a non-retryable status or once attempts run out
        """
        client = self._open()
        host = self._host_for(url)
        last_error: ExternalAPIError | None = None

        for attempt in range(self.retry.attempts):
            final_attempt = attempt == self.retry.attempts - 1
            await self._limiter.wait(host)

            try:
                response = await client.get(url, params=params)
            except httpx.RequestError as e:
                last_error = ExternalAPIError(f"Request to {url} failed: {e}", url=url)
                if not final_attempt:
                    wait = self.retry.backoff(attempt)
                    logger.warning("Request error for %s, retrying in %.1fs: %s", url, wait, e)
                    await asyncio.sleep(wait)
                continue

            status = response.status_code
            if response.is_success:
                try:
                    return response.json()
                except ValueError as e:
                    raise InvalidResponseError(
                        f"Non-JSON response from {url}: {response.text[:200]}", url=url
                    ) from e

            if status == 429:
                retry_after = parse_retry_after(response.headers.get("retry-after"))
                last_error = RateLimitError(
                    f"Rate limited by {host}; retry after {retry_after:.0f}s", retry_after, url=url
                )
                wait = min(retry_after, self.retry.max_wait)
            else:
                last_error = ExternalAPIError(
                    f"HTTP {status} from {url}: {response.text[:200]}", status_code=status, url=url
                )
                wait = self.retry.backoff(attempt)

            if not self.retry.should_retry(status):
                raise last_error
            if not final_attempt:
                logger.warning("HTTP %d from %s, retrying in %.1fs (attempt %d)", status, url, wait, attempt + 1)
                await asyncio.sleep(wait)

        raise last_error or ExternalAPIError(f"No attempts made for {url}", url=url)
