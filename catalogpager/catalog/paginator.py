"""Page-by-page retrieval of Popular, Latest and Search listings."""

from __future__ import annotations

import logging
from typing import Iterator, Mapping

from catalogpager.catalog.dedup import DeduplicatingAggregator
from catalogpager.catalog.extraction import extract_entries
from catalogpager.catalog.session import CatalogSession
from catalogpager.constants import CatalogKind
from catalogpager.domain.models import CatalogEntry, CatalogPage, ListingEndpoint, PageRequest
from catalogpager.domain.models import SourceDefinition
from catalogpager.types import BaseUrlProvider, PageFetcher
from catalogpager.utils import join_base_url, normalize_base_url

log = logging.getLogger(__name__)


def build_listing_url(
    base_url: str,
    endpoint: ListingEndpoint,
    page_number: int,
    query: str | None = None,
) -> str:
    """
    Build the listing URL for one page.

    Page 1 always uses the bare listing path; later pages add the page
    parameter exactly once. The search query is appended verbatim.
    """
    url = join_base_url(normalize_base_url(base_url), endpoint.path)
    params: list[str] = []
    if query is not None:
        params.append(f"{endpoint.query_parameter}={query}")
    if page_number > 1:
        params.append(f"{endpoint.page_parameter}={page_number}")
    if not params:
        return url
    separator = "&" if "?" in url else "?"
    return url + separator + "&".join(params)


class CatalogPaginator:
    """Fetch, extract and (for Latest) de-duplicate listing pages of one source."""

    def __init__(
        self,
        fetcher: PageFetcher,
        source: SourceDefinition,
        *,
        base_url: BaseUrlProvider | None = None,
        headers: Mapping[str, str] | None = None,
        session: CatalogSession | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.source = source
        self._base_url = base_url or (lambda: source.default_base_url)
        self.headers = {**source.headers, **(headers or {})}
        self.session = session if session is not None else CatalogSession()

    @property
    def base_url(self) -> str:
        """Return the current base URL; read on every request."""
        return normalize_base_url(self._base_url())

    def build_request(
        self,
        kind: CatalogKind,
        page_number: int,
        query: str | None = None,
    ) -> PageRequest:
        """Build the fetcher request for ``page_number`` of listing ``kind``."""
        if page_number < 1:
            raise ValueError(f"Page numbers start at 1, got {page_number}")
        if kind is CatalogKind.SEARCH:
            if query is None:
                raise ValueError("Search requests need a query")
        else:
            query = None

        base_url = self.base_url
        url = build_listing_url(base_url, self.source.endpoint_for(kind), page_number, query)
        return PageRequest(url=url, headers={**self.headers, "Referer": f"{base_url}/"})

    def fetch_page(
        self,
        kind: CatalogKind,
        page_number: int,
        query: str | None = None,
        *,
        session: CatalogSession | None = None,
    ) -> CatalogPage:
        """
        Return one page of listing ``kind``.

        Transport errors from the fetcher propagate unchanged. Latest pages
        are filtered through ``session`` (the paginator's own session when
        omitted), which is reset whenever page 1 is requested. The next-page
        flag always comes from the document, even when filtering empties the page.
        """
        request = self.build_request(kind, page_number, query)
        log.debug("Fetching %s page %d: %s", kind.value, page_number, request.url)
        content = self.fetcher.fetch(request.url, request.headers)
        entries, has_next_page = extract_entries(content, self.source.rules_for(kind))

        if kind is CatalogKind.LATEST:
            latest_session = session if session is not None else self.session
            if page_number == 1:
                if not latest_session.is_fresh:
                    log.debug("Restarting latest walk after %d pages", latest_session.pages_consumed)
                latest_session.reset()
            entries = DeduplicatingAggregator.filter(entries, latest_session)

        return CatalogPage(entries=tuple(entries), has_next_page=has_next_page)

    def iter_pages(
        self,
        kind: CatalogKind,
        query: str | None = None,
        *,
        start_page: int = 1,
        max_pages: int | None = None,
        session: CatalogSession | None = None,
    ) -> Iterator[CatalogPage]:
        """Lazily yield pages until the source reports no next page or ``max_pages`` is hit."""
        page_number = start_page
        fetched = 0
        while max_pages is None or fetched < max_pages:
            page = self.fetch_page(kind, page_number, query, session=session)
            fetched += 1
            yield page
            if not page.has_next_page:
                return
            page_number += 1

    def iter_entries(
        self,
        kind: CatalogKind,
        query: str | None = None,
        *,
        start_page: int = 1,
        max_pages: int | None = None,
        session: CatalogSession | None = None,
    ) -> Iterator[CatalogEntry]:
        """Lazily yield entries across pages in listing order."""
        for page in self.iter_pages(
            kind,
            query,
            start_page=start_page,
            max_pages=max_pages,
            session=session,
        ):
            yield from page.entries
