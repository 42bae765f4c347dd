"""Default ``requests``-based page fetcher with timeouts, retries and rate limiting."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable, Mapping

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from catalogpager.config import HostSettings
from catalogpager.constants import DEFAULT_USER_AGENT
from catalogpager.errors import TransportError
from catalogpager.types import SessionLike

log = logging.getLogger(__name__)

RETRY_STATUS_CODES = (429, 500, 502, 503, 504)


class RateLimiter:
    """Allow at most ``limit`` acquisitions per sliding ``period`` seconds."""

    def __init__(
        self,
        limit: int,
        period: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if period <= 0:
            raise ValueError("period must be positive")
        self.limit = limit
        self.period = period
        self._clock = clock
        self._sleep = sleep
        self._calls: deque[float] = deque()
        self._lock = threading.Lock()

    def acquire(self) -> None:
        """Block until another request fits into the current window."""
        with self._lock:
            now = self._clock()
            while self._calls and now - self._calls[0] >= self.period:
                self._calls.popleft()
            if len(self._calls) >= self.limit:
                wait = self.period - (now - self._calls[0])
                log.debug("Rate limit reached, sleeping %.3fs", wait)
                self._sleep(wait)
                now = self._clock()
                self._calls.popleft()
            self._calls.append(now)


def build_session(user_agent: str, *, retries: int = 3) -> requests.Session:
    """Create a session with a browser user agent and transport-level retries."""
    session = requests.Session()
    session.headers.update({"User-Agent": user_agent})
    adapter = HTTPAdapter(
        max_retries=Retry(
            total=retries,
            backoff_factor=0.5,
            status_forcelist=RETRY_STATUS_CODES,
            allowed_methods=frozenset({"GET"}),
        )
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class RequestsPageFetcher:
    """Fetch page content over HTTP, translating failures into ``TransportError``."""

    def __init__(
        self,
        session: SessionLike | None = None,
        *,
        request_timeout: tuple[float, float] = (15.0, 30.0),
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self.session = session if session is not None else build_session(DEFAULT_USER_AGENT)
        self.request_timeout = request_timeout
        self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter(10, 1.0)

    @classmethod
    def from_settings(cls, settings: HostSettings) -> RequestsPageFetcher:
        """Build a fetcher configured from host settings."""
        return cls(
            build_session(settings.user_agent),
            request_timeout=settings.request_timeout,
            rate_limiter=RateLimiter(settings.rate_limit, settings.rate_period),
        )

    def fetch(self, url: str, headers: Mapping[str, str]) -> str:
        """Return the decoded body of ``url``."""
        self.rate_limiter.acquire()
        try:
            response = self.session.get(url, headers=dict(headers), timeout=self.request_timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(url, f"Failed to fetch {url}: {exc}") from exc
        return response.text
