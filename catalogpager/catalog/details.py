"""Extraction of title details, chapter lists and reader page images."""

from __future__ import annotations

from typing import NoReturn

from catalogpager.catalog.extraction import (
    parse_document,
    select_attribute,
    select_text,
    select_texts,
)
from catalogpager.domain.models import Chapter, DetailRuleSet, MangaDetails, PageImage
from catalogpager.errors import UnsupportedOperationError
from catalogpager.utils import url_without_domain


def parse_manga_details(content: str | bytes, rules: DetailRuleSet) -> MangaDetails:
    """Extract title metadata from a title page."""
    document = parse_document(content)
    return MangaDetails(
        title=select_text(document, rules.title_selector),
        description=select_text(document, rules.description_selector),
        genres=tuple(select_texts(document, rules.genre_selector)),
        thumbnail_url=select_attribute(
            document, rules.thumbnail_selector, rules.thumbnail_attribute
        ),
        status=rules.status_for(select_text(document, rules.status_selector)),
    )


def parse_chapter_list(content: str | bytes, rules: DetailRuleSet) -> list[Chapter]:
    """Extract chapter links from a title page in document order."""
    document = parse_document(content)
    chapters: list[Chapter] = []
    for node in document.select(rules.chapter_selector):
        link = node.get(rules.chapter_link_attribute) or ""
        chapters.append(
            Chapter(
                name=" ".join(node.get_text(" ", strip=True).split()),
                relative_path=url_without_domain(str(link)),
            )
        )
    return chapters


def parse_page_list(content: str | bytes, rules: DetailRuleSet) -> list[PageImage]:
    """Extract reader page images, indexed from zero in document order."""
    document = parse_document(content)
    return [
        PageImage(index=index, image_url=str(node.get(rules.page_image_attribute) or ""))
        for index, node in enumerate(document.select(rules.page_image_selector))
    ]


def parse_image_url(content: str | bytes) -> NoReturn:
    """Always fail: page lists already carry final image URLs."""
    del content
    raise UnsupportedOperationError(
        "Image URLs are embedded in the chapter page; there is no image page to resolve"
    )
