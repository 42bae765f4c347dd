"""Tests for importable runtime entrypoint modules."""

from __future__ import annotations

import importlib


def test_import_catalogpager_dunder_main_module() -> None:
    """Verify the ``python -m`` entrypoint module can be imported."""
    module = importlib.reload(importlib.import_module("catalogpager.__main__"))
    assert callable(module.main)


def test_import_cli_main_module() -> None:
    """Verify the CLI module exports the main command group."""
    module = importlib.import_module("catalogpager.cli.main")
    assert callable(module.main)
    assert set(module.main.commands) == {
        "popular",
        "latest",
        "search",
        "details",
        "chapters",
        "pages",
        "base-url",
    }
