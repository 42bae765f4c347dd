"""Domain-specific exceptions raised by catalogpager runtime components."""

from __future__ import annotations


class CatalogPagerError(Exception):
    """Base exception for catalogpager-specific runtime failures."""


class TransportError(CatalogPagerError):
    """Raised by a page fetcher when a listing or detail page cannot be retrieved."""

    def __init__(self, url: str, message: str | None = None) -> None:
        """Store the failed ``url`` alongside a human-readable message."""
        super().__init__(message or f"Failed to fetch {url}")
        self.url = url


class MalformedDocumentError(CatalogPagerError):
    """Raised when fetched content cannot be parsed as a document at all."""


class UnsupportedOperationError(CatalogPagerError, NotImplementedError):
    """Raised for entry points a source permanently does not support."""


class SourceDefinitionError(CatalogPagerError):
    """Raised when a TOML source definition is missing or invalid."""
