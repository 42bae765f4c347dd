"""Host-facing facade bundling listings, details, chapters and pages of one source."""

from __future__ import annotations

import logging
from typing import Mapping

from catalogpager.catalog import details as detail_parsers
from catalogpager.catalog.paginator import CatalogPaginator
from catalogpager.catalog.session import CatalogSession
from catalogpager.constants import CatalogKind
from catalogpager.domain.models import CatalogPage, Chapter, MangaDetails, PageImage
from catalogpager.domain.models import SourceDefinition
from catalogpager.types import BaseUrlProvider, PageFetcher
from catalogpager.utils import join_base_url

log = logging.getLogger(__name__)


class CatalogSource:
    """
    Compose a fetcher and a source definition into the operations a host needs.

    The base URL provider is consulted for every request, so overrides made by
    the host apply once the host rebuilds or reloads this object.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        definition: SourceDefinition,
        *,
        base_url: BaseUrlProvider | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.definition = definition
        self.fetcher = fetcher
        self.paginator = CatalogPaginator(
            fetcher,
            definition,
            base_url=base_url,
            headers=headers,
        )

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def base_url(self) -> str:
        return self.paginator.base_url

    def popular(self, page: int = 1) -> CatalogPage:
        return self.paginator.fetch_page(CatalogKind.POPULAR, page)

    def latest(self, page: int = 1, session: CatalogSession | None = None) -> CatalogPage:
        """Return one Latest page; pass a dedicated ``session`` per independent walk."""
        return self.paginator.fetch_page(CatalogKind.LATEST, page, session=session)

    def search(self, query: str, page: int = 1) -> CatalogPage:
        return self.paginator.fetch_page(CatalogKind.SEARCH, page, query)

    def _fetch_document(self, relative_path: str) -> str:
        """Fetch a title or chapter page addressed relative to the base URL."""
        base_url = self.base_url
        url = join_base_url(base_url, relative_path)
        log.debug("Fetching document %s", url)
        return self.fetcher.fetch(url, {**self.paginator.headers, "Referer": f"{base_url}/"})

    def details(self, relative_path: str) -> MangaDetails:
        content = self._fetch_document(relative_path)
        return detail_parsers.parse_manga_details(content, self.definition.details)

    def chapters(self, relative_path: str) -> list[Chapter]:
        content = self._fetch_document(relative_path)
        return detail_parsers.parse_chapter_list(content, self.definition.details)

    def pages(self, chapter_path: str) -> list[PageImage]:
        content = self._fetch_document(chapter_path)
        return detail_parsers.parse_page_list(content, self.definition.details)

    def image_url(self, page: PageImage) -> str:
        """Always fail; ``page.image_url`` is already final."""
        return detail_parsers.parse_image_url(page.image_url)
