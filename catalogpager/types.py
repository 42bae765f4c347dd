"""Typed protocol contracts shared across runtime components."""

from __future__ import annotations

from typing import Callable, Mapping, MutableMapping, Protocol, TypeAlias

BaseUrlProvider: TypeAlias = Callable[[], str]


class PageFetcher(Protocol):
    """Host-supplied transport returning raw page content for a URL."""

    def fetch(self, url: str, headers: Mapping[str, str]) -> str:
        """Return page content or raise ``TransportError``."""


class ResponseLike(Protocol):
    """Minimal HTTP response contract used by the default fetcher."""

    text: str

    def raise_for_status(self) -> None:
        """Raise for non-successful HTTP responses."""


class SessionLike(Protocol):
    """Minimal HTTP session contract used by the default fetcher."""

    headers: MutableMapping[str, str]

    def get(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        timeout: tuple[float, float] | None = None,
    ) -> ResponseLike:
        """Perform an HTTP GET request and return a response object."""

    def mount(self, prefix: str, adapter: object) -> None:
        """Attach a transport adapter for matching URL prefixes."""
