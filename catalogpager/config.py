import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from catalogpager.constants import DEFAULT_USER_AGENT

# Load environment variables from .env file
load_dotenv()

DEFAULT_PREFERENCES_FILE = Path.home() / ".catalogpager" / "preferences.json"


@dataclass(frozen=True, slots=True)
class HostSettings:
    """Transport and base URL settings supplied by the host environment."""

    override_base_url: str | None
    request_timeout: tuple[float, float]
    rate_limit: int
    rate_period: float
    user_agent: str
    preferences_file: Path


def _float(environ: Mapping[str, str], name: str, default: float) -> float:
    """Read a positive float variable, naming it in the error when invalid."""
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _int(environ: Mapping[str, str], name: str, default: int) -> int:
    """Read a positive integer variable, naming it in the error when invalid."""
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def load_host_settings(environ: Mapping[str, str] | None = None) -> HostSettings:
    """Build host settings from ``environ`` (the process environment by default)."""
    if environ is None:
        environ = os.environ
    return HostSettings(
        override_base_url=environ.get("CATALOGPAGER_BASE_URL") or None,
        request_timeout=(
            _float(environ, "CATALOGPAGER_CONNECT_TIMEOUT", 15.0),
            _float(environ, "CATALOGPAGER_READ_TIMEOUT", 30.0),
        ),
        rate_limit=_int(environ, "CATALOGPAGER_RATE_LIMIT", 10),
        rate_period=_float(environ, "CATALOGPAGER_RATE_PERIOD", 1.0),
        user_agent=environ.get("CATALOGPAGER_USER_AGENT") or DEFAULT_USER_AGENT,
        preferences_file=Path(
            environ.get("CATALOGPAGER_PREFERENCES") or DEFAULT_PREFERENCES_FILE
        ).expanduser(),
    )
