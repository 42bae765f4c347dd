"""Tests for TOML source definition loading."""

from __future__ import annotations

import copy
import tomllib
from pathlib import Path
from typing import Any

import pytest

from catalogpager.constants import CatalogKind, MangaStatus
from catalogpager.errors import SourceDefinitionError
from catalogpager.sources import load_source_definition, parse_source_definition

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def raw_definition() -> dict[str, Any]:
    """Return the decoded fixture definition for mutation in tests."""
    with (FIXTURES / "source.toml").open("rb") as file_obj:
        return tomllib.load(file_obj)


def test_load_source_definition_reads_fixture() -> None:
    """Verify a complete definition is loaded with normalized base URL."""
    definition = load_source_definition(FIXTURES / "source.toml")

    assert definition.name == "Fixture"
    assert definition.default_base_url == "https://catalog.example"
    assert definition.language == "ar"
    assert dict(definition.headers) == {"Accept-Language": "ar"}
    assert definition.endpoint_for(CatalogKind.POPULAR).path == "/manga-list"
    assert definition.endpoint_for(CatalogKind.SEARCH).query_parameter == "query"
    assert definition.endpoint_for(CatalogKind.LATEST).page_parameter == "page"


def test_kind_rules_override_shared_rules() -> None:
    """Verify per-kind rule tables override single keys of the shared rules."""
    definition = load_source_definition(FIXTURES / "source.toml")

    latest = definition.rules_for(CatalogKind.LATEST)
    popular = definition.rules_for(CatalogKind.POPULAR)

    assert latest.thumbnail_attribute == "data-src"
    assert popular.thumbnail_attribute == "src"
    assert latest.entry_selector == popular.entry_selector == "div.manga-card"


def test_detail_rules_and_status_labels() -> None:
    """Verify detail selectors and status labels are loaded."""
    rules = load_source_definition(FIXTURES / "source.toml").details

    assert rules.chapter_selector == "ul.chapter-list li a"
    assert rules.chapter_link_attribute == "href"
    assert rules.status_for("مكتمل") is MangaStatus.COMPLETED
    assert rules.status_for("قادم قريبًا") is MangaStatus.ONGOING


def test_definition_mappings_are_read_only() -> None:
    """Verify rule set mappings cannot be mutated after loading."""
    definition = load_source_definition(FIXTURES / "source.toml")

    with pytest.raises(TypeError):
        definition.rule_sets[CatalogKind.LATEST] = None  # type: ignore[index]


def test_missing_listing_is_rejected(raw_definition: dict[str, Any]) -> None:
    """Verify every catalog kind needs a listing path."""
    del raw_definition["listings"]["search"]

    with pytest.raises(SourceDefinitionError, match="listings.search"):
        parse_source_definition(raw_definition)


def test_missing_required_rule_is_rejected(raw_definition: dict[str, Any]) -> None:
    """Verify required selectors must be present after merging."""
    del raw_definition["rules"]["default"]["entry"]

    with pytest.raises(SourceDefinitionError, match="entry"):
        parse_source_definition(raw_definition)


def test_unknown_rule_key_is_rejected(raw_definition: dict[str, Any]) -> None:
    """Verify typos in rule tables are reported."""
    raw_definition["rules"]["popular"] = {"titel": "h3"}

    with pytest.raises(SourceDefinitionError, match="titel"):
        parse_source_definition(raw_definition)


def test_unknown_detail_key_is_rejected(raw_definition: dict[str, Any]) -> None:
    """Verify typos in the details table are reported."""
    raw_definition["details"]["cover"] = "img"

    with pytest.raises(SourceDefinitionError, match="cover"):
        parse_source_definition(raw_definition)


def test_non_string_selector_is_rejected(raw_definition: dict[str, Any]) -> None:
    """Verify selector values must be strings."""
    raw_definition["rules"]["default"]["title"] = 3

    with pytest.raises(SourceDefinitionError, match="must be a string"):
        parse_source_definition(raw_definition)


def test_status_labels_accept_single_string(raw_definition: dict[str, Any]) -> None:
    """Verify a single status label string is accepted."""
    raw_definition["details"]["status_labels"] = {"completed": "done"}

    rules = parse_source_definition(raw_definition).details

    assert rules.completed_labels == frozenset({"done"})
    assert rules.ongoing_labels == frozenset()


def test_missing_source_name_is_rejected(raw_definition: dict[str, Any]) -> None:
    """Verify the source table requires a name."""
    broken = copy.deepcopy(raw_definition)
    del broken["source"]["name"]

    with pytest.raises(SourceDefinitionError, match="name"):
        parse_source_definition(broken)


def test_missing_file_is_reported(tmp_path: Path) -> None:
    """Verify a missing definition file raises a source definition error."""
    with pytest.raises(SourceDefinitionError, match="not found"):
        load_source_definition(tmp_path / "missing.toml")


def test_invalid_toml_is_reported(tmp_path: Path) -> None:
    """Verify TOML syntax errors are wrapped."""
    path = tmp_path / "broken.toml"
    path.write_text("[source\nname = 1", encoding="utf-8")

    with pytest.raises(SourceDefinitionError, match="Invalid TOML"):
        load_source_definition(path)
