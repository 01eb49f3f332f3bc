"""HTTP transport for the IMSLP APIs.

All requests go through a single :class:`HttpClient` which:

- serializes requests through one lock (a single request queue) and waits
  ``rate_limit_delay`` seconds between consecutive requests
- applies a per-request timeout
- caches successful GET responses for ``cache_ttl`` seconds, keyed on the
  full URL
- maps HTTP and transport failures onto the :mod:`easy_imslp.api.errors`
  hierarchy

There are no retries: a failed request raises immediately.

Usage:
    from easy_imslp.api.http import HttpClient

    with HttpClient() as http:
        response = http.get("https://imslp.org/api.php", params={"action": "query"})
        print(response.data)
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from easy_imslp.api.cache import TTLCache, create_cache_key
from easy_imslp.api.errors import (
    ErrorDetails,
    ImslpError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    RequestTimeoutError,
)
from easy_imslp.config import ClientConfig, load_config

logger = logging.getLogger(__name__)

ParamValue = str | int | float | bool | None


@dataclass(frozen=True)
class HttpResponse:
    """Decoded JSON response."""

    data: Any
    status: int
    headers: Mapping[str, str]


def _encode_params(params: Mapping[str, ParamValue] | None) -> dict[str, str]:
    """Drop None/False values; True becomes "1" (MediaWiki flags are presence-based)."""
    encoded: dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None or value is False:
            continue
        encoded[key] = "1" if value is True else str(value)
    return encoded


class HttpClient:
    """Rate-limited, caching JSON client built on :class:`httpx.Client`."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or load_config()
        self.rate_limit_delay = self.config.rate_limit_delay
        self._sleep = sleep
        self._clock = clock
        self._cache: TTLCache[HttpResponse] = TTLCache(self.config.cache_ttl, clock=clock)
        self._queue_lock = threading.Lock()
        self._last_request_time: float | None = None
        self._client = httpx.Client(
            transport=transport,
            headers={"User-Agent": self.config.user_agent},
            timeout=self.config.timeout,
            follow_redirects=True,
        )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def build_url(self, base_url: str, params: Mapping[str, ParamValue] | None = None) -> str:
        """Return ``base_url`` with encoded query parameters."""
        encoded = _encode_params(params)
        if not encoded:
            return base_url
        return str(httpx.URL(base_url, params=encoded))

    def request(
        self,
        url: str,
        *,
        method: str = "GET",
        params: Mapping[str, ParamValue] | None = None,
        headers: Mapping[str, str] | None = None,
        data: Mapping[str, Any] | None = None,
        json_body: Any = None,
        timeout: float | None = None,
        skip_cache: bool = False,
    ) -> HttpResponse:
        """Send a request and decode its JSON body.

        Args:
            url: Endpoint URL without query string.
            method: ``GET`` or ``POST``.
            params: Query parameters; None values are dropped.
            headers: Extra headers merged over the defaults.
            data: Form body for POST.
            json_body: JSON body for POST.
            timeout: Per-request timeout in seconds (default from config).
            skip_cache: Bypass the response cache for this GET.

        Returns:
            HttpResponse with the decoded JSON payload.

        Raises:
            NotFoundError: HTTP 404.
            RateLimitError: HTTP 429.
            RequestTimeoutError: The request timed out.
            NetworkError: Other HTTP errors and transport failures.
            ParseError: The body is not valid JSON.
        """
        full_url = self.build_url(url, params)
        request_timeout = self.config.timeout if timeout is None else timeout
        use_cache = method == "GET" and self.config.cache and not skip_cache
        cache_key = create_cache_key("http", full_url)

        if use_cache:
            cached = self._cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit: {full_url}")
                return cached

        with self._queue_lock:
            self._wait_for_rate_limit()
            logger.debug(f"{method} {full_url}")
            response = self._send(
                method, full_url, headers, data, json_body, request_timeout
            )

        if response.is_error:
            self._raise_for_status(response, full_url)

        try:
            payload = response.json()
        except ValueError as e:
            raise ParseError(
                f"Invalid JSON response from {full_url}",
                ErrorDetails(
                    url=full_url, status_code=response.status_code, response_body=response.text
                ),
                raw_data=response.text,
            ) from e

        result = HttpResponse(data=payload, status=response.status_code, headers=response.headers)
        if use_cache:
            self._cache.set(cache_key, result)
        return result

    def get(
        self,
        url: str,
        params: Mapping[str, ParamValue] | None = None,
        **kwargs: Any,
    ) -> HttpResponse:
        return self.request(url, method="GET", params=params, **kwargs)

    def post(
        self,
        url: str,
        data: Mapping[str, Any] | None = None,
        json_body: Any = None,
        **kwargs: Any,
    ) -> HttpResponse:
        return self.request(url, method="POST", data=data, json_body=json_body, **kwargs)

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> dict[str, float]:
        """Current cache size and TTL."""
        return {"size": self._cache.size(), "ttl": self._cache.ttl}

    def set_rate_limit(self, delay: float) -> None:
        """Change the minimum delay (seconds) between requests."""
        if delay < 0:
            raise ValueError(f"rate limit delay must be >= 0, got {delay}")
        self.rate_limit_delay = delay

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _wait_for_rate_limit(self) -> None:
        """Sleep until ``rate_limit_delay`` has passed since the previous request."""
        if self._last_request_time is not None:
            delay = self.rate_limit_delay - (self._clock() - self._last_request_time)
            if delay > 0:
                self._sleep(delay)
        self._last_request_time = self._clock()

    def _send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None,
        data: Mapping[str, Any] | None,
        json_body: Any,
        timeout: float,
    ) -> httpx.Response:
        try:
            return self._client.request(
                method,
                url,
                headers=dict(headers) if headers else None,
                data=data,
                json=json_body,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"Request timed out after {timeout}s", timeout, ErrorDetails(url=url)
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Network error: {e}", ErrorDetails(url=url)) from e

    def _raise_for_status(self, response: httpx.Response, url: str) -> None:
        status = response.status_code
        body = response.text
        error: ImslpError

        if status == 404:
            error = NotFoundError(
                f"Resource not found: {url}",
                ErrorDetails(url=url, status_code=status, response_body=body),
            )
        elif status == 429:
            error = RateLimitError(
                "Rate limit exceeded",
                ErrorDetails(url=url, status_code=status, response_body=body),
                retry_after=_parse_retry_after(response.headers.get("Retry-After")),
            )
        else:
            error = NetworkError(
                f"HTTP error {status}",
                ErrorDetails(
                    url=url,
                    status_code=status,
                    response_body=body,
                    suggestion=f"Server returned status {status}. Check if IMSLP is available.",
                ),
            )

        logger.debug(f"{type(error).__name__} for {url}: {error.message}")
        raise error


def _parse_retry_after(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None
