"""Persisted base URL override with reset on changed source defaults."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from filelock import FileLock

from catalogpager.utils import normalize_base_url

log = logging.getLogger(__name__)

OVERRIDE_BASE_URL_KEY = "override_base_url"
DEFAULT_BASE_URL_KEY = "default_base_url"


class BaseUrlPreferences:
    """
    Store a per-source "override base URL" setting on disk.

    Whenever the source's default base URL differs from the default recorded
    in the file, the stored override is replaced by the new default so that a
    stale override never outlives a domain change shipped with the source.
    """

    def __init__(
        self,
        path: Path,
        source_name: str,
        default_base_url: str,
        *,
        lock_timeout: float = 30.0,
    ) -> None:
        self.path = Path(path)
        self.lock_path = self.path.with_name(f"{self.path.name}.lock")
        self.source_name = source_name
        self.default_base_url = normalize_base_url(default_base_url)
        self._lock = FileLock(str(self.lock_path), timeout=lock_timeout)
        self._values: dict[str, str] = {}
        with self._lock:
            self._load_unlocked()

    def _read_all_unlocked(self) -> dict[str, Any]:
        """Return the decoded preference file, or an empty payload when unreadable."""
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            log.warning("Ignoring unreadable preference file %s", self.path)
            return {}
        return payload if isinstance(payload, dict) else {}

    def _load_unlocked(self) -> None:
        """Load this source's values and apply the default-URL migration."""
        raw = self._read_all_unlocked().get(self.source_name)
        values = {
            key: value
            for key, value in (raw.items() if isinstance(raw, dict) else ())
            if isinstance(value, str)
        }
        if values.get(DEFAULT_BASE_URL_KEY) != self.default_base_url:
            values[OVERRIDE_BASE_URL_KEY] = self.default_base_url
            values[DEFAULT_BASE_URL_KEY] = self.default_base_url
            self._values = values
            self._save_unlocked()
            return
        self._values = values

    def _save_unlocked(self) -> None:
        """Persist this source's values atomically, keeping other sources intact."""
        payload = self._read_all_unlocked()
        payload[self.source_name] = dict(self._values)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile("w", encoding="utf-8", delete=False, dir=self.path.parent) as tmp:
            json.dump(payload, tmp, ensure_ascii=False, indent=2, sort_keys=True)
            temp_path = Path(tmp.name)
        temp_path.replace(self.path)

    @property
    def override_base_url(self) -> str | None:
        return self._values.get(OVERRIDE_BASE_URL_KEY) or None

    @property
    def base_url(self) -> str:
        """Return the override when set, otherwise the source default."""
        return self.override_base_url or self.default_base_url

    def set_override(self, url: str) -> None:
        """Persist a new override; hosts pick it up after a restart or reload."""
        with self._lock:
            self._load_unlocked()
            self._values[OVERRIDE_BASE_URL_KEY] = normalize_base_url(url)
            self._save_unlocked()
        log.info("Base URL for %s set to %s; restart to apply the new setting", self.source_name, url)

    def reset(self) -> None:
        """Restore the override to the source default."""
        self.set_override(self.default_base_url)
