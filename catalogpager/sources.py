"""Load source definitions (endpoints and selectors) from TOML files."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping

from catalogpager.constants import DEFAULT_PAGE_PARAMETER, DEFAULT_QUERY_PARAMETER, CatalogKind
from catalogpager.domain.models import (
    DetailRuleSet,
    ExtractionRuleSet,
    ListingEndpoint,
    SourceDefinition,
)
from catalogpager.errors import SourceDefinitionError
from catalogpager.utils import normalize_base_url

# TOML key -> ExtractionRuleSet field
RULE_KEYS: dict[str, str] = {
    "entry": "entry_selector",
    "next_page": "next_page_selector",
    "title": "title_selector",
    "link": "link_selector",
    "thumbnail": "thumbnail_selector",
    "link_attribute": "link_attribute",
    "thumbnail_attribute": "thumbnail_attribute",
}
REQUIRED_RULE_KEYS = ("entry", "next_page", "title", "link", "thumbnail")

DETAIL_KEYS: dict[str, str] = {
    "title": "title_selector",
    "description": "description_selector",
    "genres": "genre_selector",
    "thumbnail": "thumbnail_selector",
    "status": "status_selector",
    "chapters": "chapter_selector",
    "pages": "page_image_selector",
    "thumbnail_attribute": "thumbnail_attribute",
    "chapter_link_attribute": "chapter_link_attribute",
    "page_image_attribute": "page_image_attribute",
}


def _table(data: Mapping[str, Any], key: str, *, where: str) -> Mapping[str, Any]:
    """Return sub-table ``key`` of ``data`` or raise a descriptive error."""
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise SourceDefinitionError(f"[{where}{key}] must be a table")
    return value


def _string(data: Mapping[str, Any], key: str, *, where: str, default: str | None = None) -> str:
    """Return string value ``key`` of ``data`` or raise a descriptive error."""
    value = data.get(key, default)
    if value is None:
        raise SourceDefinitionError(f"Missing required key '{key}' in [{where}]")
    if not isinstance(value, str):
        raise SourceDefinitionError(f"Key '{key}' in [{where}] must be a string")
    return value


def _labels(data: Mapping[str, Any], key: str) -> frozenset[str]:
    """Return a label list as a frozenset of strings."""
    value = data.get(key, [])
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise SourceDefinitionError(f"[details.status] {key} must be a list of strings")
    return frozenset(value)


def _parse_rule_set(shared: Mapping[str, Any], overrides: Mapping[str, Any], kind: str) -> ExtractionRuleSet:
    """Merge per-kind overrides onto shared rules and build a rule set."""
    merged = {**shared, **overrides}
    unknown = set(merged) - set(RULE_KEYS)
    if unknown:
        raise SourceDefinitionError(
            f"Unknown keys in [rules.{kind}]: {', '.join(sorted(unknown))}"
        )
    for key in REQUIRED_RULE_KEYS:
        _string(merged, key, where=f"rules.{kind}")
    return ExtractionRuleSet(**{
        RULE_KEYS[key]: _string(merged, key, where=f"rules.{kind}")
        for key in merged
    })


def _parse_listing(data: Mapping[str, Any], kind: str) -> ListingEndpoint:
    """Build the listing endpoint for one catalog kind."""
    where = f"listings.{kind}"
    return ListingEndpoint(
        path=_string(data, "path", where=where),
        query_parameter=_string(data, "query_parameter", where=where, default=DEFAULT_QUERY_PARAMETER),
        page_parameter=_string(data, "page_parameter", where=where, default=DEFAULT_PAGE_PARAMETER),
    )


def _parse_details(data: Mapping[str, Any]) -> DetailRuleSet:
    """Build the detail rule set from the ``[details]`` table."""
    status_labels = _table(data, "status_labels", where="details.")
    selectors = {key: value for key, value in data.items() if key != "status_labels"}
    unknown = set(selectors) - set(DETAIL_KEYS)
    if unknown:
        raise SourceDefinitionError(f"Unknown keys in [details]: {', '.join(sorted(unknown))}")
    fields = {
        DETAIL_KEYS[key]: _string(selectors, key, where="details", default="")
        for key in DETAIL_KEYS
        if key in selectors or not key.endswith("_attribute")
    }
    return DetailRuleSet(
        **fields,
        ongoing_labels=_labels(status_labels, "ongoing"),
        completed_labels=_labels(status_labels, "completed"),
    )


def parse_source_definition(data: Mapping[str, Any]) -> SourceDefinition:
    """Build a ``SourceDefinition`` from an already-decoded TOML mapping."""
    source = _table(data, "source", where="")
    listings = _table(data, "listings", where="")
    rules = _table(data, "rules", where="")
    shared_rules = _table(rules, "default", where="rules.")

    headers = _table(source, "headers", where="source.")
    if not all(isinstance(value, str) for value in headers.values()):
        raise SourceDefinitionError("[source.headers] values must be strings")

    endpoints: dict[CatalogKind, ListingEndpoint] = {}
    rule_sets: dict[CatalogKind, ExtractionRuleSet] = {}
    for kind in CatalogKind:
        endpoints[kind] = _parse_listing(_table(listings, kind.value, where="listings."), kind.value)
        rule_sets[kind] = _parse_rule_set(
            shared_rules,
            _table(rules, kind.value, where="rules."),
            kind.value,
        )

    return SourceDefinition(
        name=_string(source, "name", where="source"),
        default_base_url=normalize_base_url(_string(source, "base_url", where="source")),
        language=_string(source, "language", where="source", default=""),
        headers=dict(headers),
        listings=endpoints,
        rule_sets=rule_sets,
        details=_parse_details(_table(data, "details", where="")),
    )


def load_source_definition(path: str | Path) -> SourceDefinition:
    """Read and validate a TOML source definition file."""
    path = Path(path)
    try:
        with path.open("rb") as file_obj:
            data = tomllib.load(file_obj)
    except FileNotFoundError as exc:
        raise SourceDefinitionError(f"Source definition not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise SourceDefinitionError(f"Invalid TOML in {path}: {exc}") from exc
    return parse_source_definition(data)
