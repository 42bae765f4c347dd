"""Immutable catalog models shared between extraction, paging and CLI layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from catalogpager.constants import (
    DEFAULT_PAGE_PARAMETER,
    DEFAULT_QUERY_PARAMETER,
    CatalogKind,
    MangaStatus,
)


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """One catalog item extracted from a listing page."""

    title: str
    relative_path: str
    thumbnail_url: str

    def as_dict(self) -> dict[str, str]:
        """Return a JSON-serializable representation of the entry."""
        return {
            "title": self.title,
            "relative_path": self.relative_path,
            "thumbnail_url": self.thumbnail_url,
        }


@dataclass(frozen=True, slots=True)
class CatalogPage:
    """Entries of one listing page in document order plus the continuation flag."""

    entries: tuple[CatalogEntry, ...]
    has_next_page: bool

    @property
    def titles(self) -> list[str]:
        """Return entry titles in page order."""
        return [entry.title for entry in self.entries]


@dataclass(frozen=True, slots=True)
class ExtractionRuleSet:
    """CSS selectors locating entries and pagination controls on a listing page."""

    entry_selector: str
    next_page_selector: str
    title_selector: str
    link_selector: str
    thumbnail_selector: str
    link_attribute: str = "href"
    thumbnail_attribute: str = "src"


@dataclass(frozen=True, slots=True)
class ListingEndpoint:
    """Base listing path of one catalog kind and its query parameter names."""

    path: str
    query_parameter: str = DEFAULT_QUERY_PARAMETER
    page_parameter: str = DEFAULT_PAGE_PARAMETER


@dataclass(frozen=True, slots=True)
class PageRequest:
    """A fully built request handed to a page fetcher."""

    url: str
    headers: Mapping[str, str]


@dataclass(frozen=True, slots=True)
class Chapter:
    """One chapter link from a title page."""

    name: str
    relative_path: str


@dataclass(frozen=True, slots=True)
class PageImage:
    """One page image of a chapter; ``image_url`` is already the final URL."""

    index: int
    image_url: str


@dataclass(frozen=True, slots=True)
class MangaDetails:
    """Descriptive metadata of a single title."""

    title: str
    description: str
    genres: tuple[str, ...]
    thumbnail_url: str
    status: MangaStatus

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-serializable representation of the details."""
        return {
            "title": self.title,
            "description": self.description,
            "genres": list(self.genres),
            "thumbnail_url": self.thumbnail_url,
            "status": self.status.name.lower(),
        }


@dataclass(frozen=True, slots=True)
class DetailRuleSet:
    """CSS selectors for title, chapter-list and reader pages."""

    title_selector: str
    description_selector: str
    genre_selector: str
    thumbnail_selector: str
    status_selector: str
    chapter_selector: str
    page_image_selector: str
    thumbnail_attribute: str = "src"
    chapter_link_attribute: str = "href"
    page_image_attribute: str = "src"
    ongoing_labels: frozenset[str] = frozenset()
    completed_labels: frozenset[str] = frozenset()

    def status_for(self, label: str) -> MangaStatus:
        """Map a status label from the title page to a ``MangaStatus``."""
        if label in self.ongoing_labels:
            return MangaStatus.ONGOING
        if label in self.completed_labels:
            return MangaStatus.COMPLETED
        return MangaStatus.UNKNOWN


@dataclass(frozen=True, slots=True)
class SourceDefinition:
    """Everything the core needs to know about one site's layout."""

    name: str
    default_base_url: str
    listings: Mapping[CatalogKind, ListingEndpoint]
    rule_sets: Mapping[CatalogKind, ExtractionRuleSet]
    details: DetailRuleSet
    language: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Freeze mapping fields so the definition stays read-only once built."""
        object.__setattr__(self, "listings", MappingProxyType(dict(self.listings)))
        object.__setattr__(self, "rule_sets", MappingProxyType(dict(self.rule_sets)))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def endpoint_for(self, kind: CatalogKind) -> ListingEndpoint:
        """Return the listing endpoint configured for ``kind``."""
        return self.listings[kind]

    def rules_for(self, kind: CatalogKind) -> ExtractionRuleSet:
        """Return the extraction rule set configured for ``kind``."""
        return self.rule_sets[kind]
