"""Tests for environment-backed host settings."""

from __future__ import annotations

import importlib
from pathlib import Path

import pytest

import catalogpager.config as config
from catalogpager.constants import DEFAULT_USER_AGENT


def test_defaults_without_environment() -> None:
    """Ensure defaults apply when no variables are set."""
    settings = config.load_host_settings({})

    assert settings.override_base_url is None
    assert settings.request_timeout == (15.0, 30.0)
    assert settings.rate_limit == 10
    assert settings.rate_period == 1.0
    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.preferences_file == config.DEFAULT_PREFERENCES_FILE


def test_environment_overrides(tmp_path: Path) -> None:
    """Ensure every variable is honored."""
    settings = config.load_host_settings(
        {
            "CATALOGPAGER_BASE_URL": "https://mirror.example",
            "CATALOGPAGER_CONNECT_TIMEOUT": "2.5",
            "CATALOGPAGER_READ_TIMEOUT": "10",
            "CATALOGPAGER_RATE_LIMIT": "3",
            "CATALOGPAGER_RATE_PERIOD": "0.5",
            "CATALOGPAGER_USER_AGENT": "Agent/2",
            "CATALOGPAGER_PREFERENCES": str(tmp_path / "prefs.json"),
        }
    )

    assert settings.override_base_url == "https://mirror.example"
    assert settings.request_timeout == (2.5, 10.0)
    assert settings.rate_limit == 3
    assert settings.rate_period == 0.5
    assert settings.user_agent == "Agent/2"
    assert settings.preferences_file == tmp_path / "prefs.json"


def test_empty_base_url_means_no_override() -> None:
    """Ensure an empty override variable is ignored."""
    assert config.load_host_settings({"CATALOGPAGER_BASE_URL": ""}).override_base_url is None


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("CATALOGPAGER_CONNECT_TIMEOUT", "soon"),
        ("CATALOGPAGER_READ_TIMEOUT", "-1"),
        ("CATALOGPAGER_RATE_LIMIT", "1.5"),
        ("CATALOGPAGER_RATE_LIMIT", "0"),
    ],
)
def test_invalid_numbers_name_the_variable(name: str, value: str) -> None:
    """Ensure invalid numeric settings raise errors naming the variable."""
    with pytest.raises(ValueError, match=name):
        config.load_host_settings({name: value})


def test_process_environment_is_used_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure the process environment is read when no mapping is passed."""
    monkeypatch.setenv("CATALOGPAGER_RATE_LIMIT", "7")

    reloaded = importlib.reload(config)

    assert reloaded.load_host_settings().rate_limit == 7
