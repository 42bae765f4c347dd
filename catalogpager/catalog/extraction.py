"""Selector-driven extraction of catalog entries from listing pages."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from catalogpager.domain.models import CatalogEntry, ExtractionRuleSet
from catalogpager.errors import MalformedDocumentError
from catalogpager.utils import url_without_domain

log = logging.getLogger(__name__)

HTML_PARSER = "lxml"


def parse_document(content: str | bytes) -> BeautifulSoup:
    """Parse page content into a document, rejecting content that has no structure."""
    if not isinstance(content, (str, bytes)):
        raise MalformedDocumentError(
            f"Expected page content as text or bytes, got {type(content).__name__}"
        )
    if not content.strip():
        raise MalformedDocumentError("Page content is empty")

    try:
        document = BeautifulSoup(content, HTML_PARSER)
    except ParserRejectedMarkup as exc:
        raise MalformedDocumentError(f"Page content could not be parsed: {exc}") from exc

    if document.find() is None:
        raise MalformedDocumentError("Page content contains no elements")
    return document


def select_text(node: Tag, selector: str) -> str:
    """Return the whitespace-normalized text of every node matching ``selector``."""
    if not selector:
        return ""
    texts = (match.get_text(" ", strip=True) for match in node.select(selector))
    return " ".join(" ".join(texts).split())


def select_texts(node: Tag, selector: str) -> list[str]:
    """Return the non-empty text of each node matching ``selector`` separately."""
    if not selector:
        return []
    texts = (" ".join(match.get_text(" ", strip=True).split()) for match in node.select(selector))
    return [text for text in texts if text]


def select_attribute(node: Tag, selector: str, attribute: str) -> str:
    """Return the raw ``attribute`` of the first node matching ``selector`` that carries it."""
    if not selector:
        return ""
    for match in node.select(selector):
        if not match.has_attr(attribute):
            continue
        value = match[attribute]
        if isinstance(value, list):
            return " ".join(value)
        return value
    return ""


def entry_from_node(node: Tag, rules: ExtractionRuleSet) -> CatalogEntry:
    """Build one entry from a candidate node; missing fields become empty strings."""
    return CatalogEntry(
        title=select_text(node, rules.title_selector),
        relative_path=url_without_domain(
            select_attribute(node, rules.link_selector, rules.link_attribute)
        ),
        thumbnail_url=select_attribute(node, rules.thumbnail_selector, rules.thumbnail_attribute),
    )


def has_next_page(document: BeautifulSoup, rules: ExtractionRuleSet) -> bool:
    """Return whether the next-page selector matches at least one node."""
    if not rules.next_page_selector:
        return False
    return document.select_one(rules.next_page_selector) is not None


def extract_entries(
    content: str | bytes,
    rules: ExtractionRuleSet,
) -> tuple[list[CatalogEntry], bool]:
    """
    Extract listing entries in document order and the next-page flag.

    Individual missing fields never fail extraction; only content that
    cannot be parsed as a document raises ``MalformedDocumentError``.
    """
    document = parse_document(content)
    entries = [entry_from_node(node, rules) for node in document.select(rules.entry_selector)]
    next_page = has_next_page(document, rules)
    log.debug("Extracted %d entries (has_next_page=%s)", len(entries), next_page)
    return entries, next_page
