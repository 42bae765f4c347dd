"""Tests for the persisted base URL preference store."""

from __future__ import annotations

import json
from pathlib import Path

from catalogpager.preferences import BaseUrlPreferences


def _load(path: Path) -> dict[str, object]:
    """Read preference JSON payload from ``path``."""
    return json.loads(path.read_text(encoding="utf-8"))


def test_first_load_records_default(tmp_path: Path) -> None:
    """Verify a new store writes the source default as override and default."""
    path = tmp_path / "prefs.json"

    preferences = BaseUrlPreferences(path, "Fixture", "https://catalog.example/")

    assert preferences.base_url == "https://catalog.example"
    assert _load(path) == {
        "Fixture": {
            "default_base_url": "https://catalog.example",
            "override_base_url": "https://catalog.example",
        }
    }


def test_override_persists_across_reloads(tmp_path: Path) -> None:
    """Verify a stored override is returned by later instances."""
    path = tmp_path / "prefs.json"
    BaseUrlPreferences(path, "Fixture", "https://catalog.example").set_override("https://mirror.example/")

    reloaded = BaseUrlPreferences(path, "Fixture", "https://catalog.example")

    assert reloaded.override_base_url == "https://mirror.example"
    assert reloaded.base_url == "https://mirror.example"


def test_changed_default_replaces_stale_override(tmp_path: Path) -> None:
    """Verify a new source default resets a previously stored override."""
    path = tmp_path / "prefs.json"
    BaseUrlPreferences(path, "Fixture", "https://old.example").set_override("https://mirror.example")

    preferences = BaseUrlPreferences(path, "Fixture", "https://new.example")

    assert preferences.base_url == "https://new.example"
    assert _load(path)["Fixture"] == {
        "default_base_url": "https://new.example",
        "override_base_url": "https://new.example",
    }


def test_reset_restores_default(tmp_path: Path) -> None:
    """Verify reset stores the default as override again."""
    preferences = BaseUrlPreferences(tmp_path / "prefs.json", "Fixture", "https://catalog.example")
    preferences.set_override("https://mirror.example")

    preferences.reset()

    assert preferences.base_url == "https://catalog.example"


def test_sources_do_not_overwrite_each_other(tmp_path: Path) -> None:
    """Verify several sources share one preference file."""
    path = tmp_path / "prefs.json"
    BaseUrlPreferences(path, "One", "https://one.example").set_override("https://one-mirror.example")
    BaseUrlPreferences(path, "Two", "https://two.example")

    assert BaseUrlPreferences(path, "One", "https://one.example").base_url == "https://one-mirror.example"
    assert set(_load(path)) == {"One", "Two"}


def test_unreadable_file_falls_back_to_default(tmp_path: Path) -> None:
    """Verify corrupt preference files are replaced instead of failing."""
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")

    preferences = BaseUrlPreferences(path, "Fixture", "https://catalog.example")

    assert preferences.base_url == "https://catalog.example"
    assert _load(path)["Fixture"]["override_base_url"] == "https://catalog.example"


def test_set_override_logs_restart_notice(tmp_path: Path, caplog) -> None:
    """Verify changing the override tells the user a restart is needed."""
    preferences = BaseUrlPreferences(tmp_path / "prefs.json", "Fixture", "https://catalog.example")

    with caplog.at_level("INFO", logger="catalogpager.preferences"):
        preferences.set_override("https://mirror.example")

    assert "restart" in caplog.text
