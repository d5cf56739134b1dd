"""HTTP access to the Jamf documentation backend.

All outgoing requests pass through a shared ``RequestThrottle`` so the
backend sees at most one request per ``rate_limit_delay``. Transport
failures are converted to ``DocsError`` subclasses at this boundary;
nothing above this module sees an ``httpx`` exception.
"""

import asyncio
import logging
import random
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, TypeVar

import httpx

from jamf_docs_mcp.config.domains import RequestSettings
from jamf_docs_mcp.core.errors import (
    DocsError,
    DocsNetworkError,
    DocsNotFoundError,
    DocsParseError,
    DocsRateLimitError,
    DocsTimeoutError,
)
from jamf_docs_mcp.core.observability import get_audit_logger

logger = logging.getLogger(__name__)

T = TypeVar("T")

FRONTEND_HOST = "learn.jamf.com"
BACKEND_HOST = "learn-be.jamf.com"

ACCEPT_JSON = "application/json"
ACCEPT_HTML = "text/html,application/xhtml+xml"


class SleepFunc(Protocol):
    """Protocol for injectable sleep function."""

    async def __call__(self, seconds: float) -> None: ...


def to_backend_url(url: str) -> str:
    """Rewrite a learn.jamf.com URL to the pre-rendering backend host."""
    return url.replace(FRONTEND_HOST, BACKEND_HOST)


def to_frontend_url(url: str) -> str:
    """Rewrite a learn-be.jamf.com URL to the public site."""
    return url.replace(BACKEND_HOST, FRONTEND_HOST)


class RequestThrottle:
    """Enforces a minimum interval between outgoing requests.

    Callers ``await throttle.wait()`` before each request. Concurrent callers
    are serialized by a lock so spacing holds across tasks.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep_func: Optional[SleepFunc] = None,
    ):
        self.min_interval = max(0.0, min_interval)
        self._clock = clock
        self._sleep = sleep_func or asyncio.sleep
        self._last_request: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        async with self._lock:
            if self._last_request is not None:
                elapsed = self._clock() - self._last_request
                if elapsed < self.min_interval:
                    await self._sleep(self.min_interval - elapsed)
            self._last_request = self._clock()


async def async_retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    rng: Optional[random.Random] = None,
    sleep_func: Optional[SleepFunc] = None,
) -> T:
    """Async retry with exponential backoff and jitter.

    Only ``DocsError`` instances whose ``retryable`` property is true are
    retried; anything else propagates immediately. A rate-limit error with a
    ``retry_after`` hint waits at least that long.

    Args:
        func: Async function to retry (no arguments; use lambda for args).
        max_retries: Maximum retry attempts after the first call.
        base_delay: Initial delay in seconds.
        max_delay: Maximum delay cap in seconds.
        exponential_base: Multiplier per retry.
        jitter: Add 50-150% randomness to the delay.
        rng: Injectable Random instance for deterministic testing.
        sleep_func: Injectable sleep function for time control in tests.

    Returns:
        Result from the function on success.

    Raises:
        DocsError: The last error if all retries are exhausted, or the first
            non-retryable one.
    """
    _rng = rng or random.Random()
    _sleep = sleep_func or asyncio.sleep

    for attempt in range(max_retries + 1):
        try:
            return await func()
        except DocsError as e:
            if not e.retryable or attempt == max_retries:
                raise

            delay = min(base_delay * (exponential_base**attempt), max_delay)
            if jitter:
                delay = delay * (0.5 + _rng.random())
            retry_after = getattr(e, "retry_after", None)
            if retry_after:
                delay = max(delay, min(retry_after, max_delay))

            logger.debug(
                "Retrying %s after %s (attempt %d/%d, %.2fs)",
                e.url or "request",
                e.code.value,
                attempt + 1,
                max_retries,
                delay,
            )
            await _sleep(delay)

    raise RuntimeError("async_retry_with_backoff: unexpected state")


def parse_retry_after(response: httpx.Response) -> Optional[float]:
    """Parse a numeric ``Retry-After`` header, or None."""
    retry_after = response.headers.get("Retry-After")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            pass
    return None


def classify_http_error(exc: Exception, url: str, resource_type: str = "Resource") -> DocsError:
    """Convert an ``httpx`` failure into the matching ``DocsError``.

    404 becomes NOT_FOUND, 429 RATE_LIMITED, timeouts TIMEOUT, and anything
    else NETWORK_ERROR.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        status = response.status_code
        if status == 404:
            return DocsNotFoundError(f"{resource_type} not found: {url}", url=url)
        if status == 429:
            return DocsRateLimitError(url=url, retry_after=parse_retry_after(response))
        return DocsNetworkError(f"HTTP {status} {response.reason_phrase}".strip(), url=url, status_code=status)
    if isinstance(exc, httpx.TimeoutException):
        return DocsTimeoutError(url=url)
    return DocsNetworkError(str(exc) or type(exc).__name__, url=url)


class DocsHttpClient:
    """Throttled, retrying ``httpx.AsyncClient`` wrapper for the docs backend.

    Example:
        async with DocsHttpClient(config.requests) as client:
            data = await client.get_json("https://learn-be.jamf.com/api/search", params={"q": "mdm"})
    """

    def __init__(
        self,
        settings: Optional[RequestSettings] = None,
        throttle: Optional[RequestThrottle] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep_func: Optional[SleepFunc] = None,
    ):
        self.settings = settings or RequestSettings()
        self.throttle = throttle or RequestThrottle(self.settings.rate_limit_delay)
        self._sleep = sleep_func
        self._client = httpx.AsyncClient(
            timeout=self.settings.timeout,
            transport=transport,
            follow_redirects=True,
            headers={
                "User-Agent": self.settings.user_agent,
                "Accept-Language": "en-US,en;q=0.9",
            },
        )

    async def __aenter__(self) -> "DocsHttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _fetch(
        self, url: str, accept: str, resource_type: str, params: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        async def attempt() -> httpx.Response:
            await self.throttle.wait()
            try:
                response = await self._client.get(url, params=params, headers={"Accept": accept})
                response.raise_for_status()
                return response
            except httpx.HTTPError as e:
                error = classify_http_error(e, url, resource_type)
                if isinstance(error, DocsRateLimitError):
                    get_audit_logger().rate_limit(url=url, retry_after=error.retry_after)
                raise error from e

        return await async_retry_with_backoff(
            attempt,
            max_retries=self.settings.max_retries,
            base_delay=self.settings.retry_delay,
            sleep_func=self._sleep,
        )

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``url`` and decode the JSON body."""
        response = await self._fetch(url, ACCEPT_JSON, "Resource", params=params)
        try:
            return response.json()
        except ValueError as e:
            raise DocsParseError(f"Invalid JSON from {url}: {e}", url=url) from e

    async def get_html(self, url: str) -> str:
        """GET ``url`` and return the body as text."""
        response = await self._fetch(url, ACCEPT_HTML, "Article")
        return response.text
