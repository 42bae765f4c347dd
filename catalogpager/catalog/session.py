"""Resettable seen-title state for one deduplicated pagination walk."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(slots=True)
class CatalogSession:
    """Titles already surfaced during one Latest walk; append-only until reset."""

    seen_titles: set[str] = field(default_factory=set)
    pages_consumed: int = 0

    @property
    def is_fresh(self) -> bool:
        """Return whether no page has been consumed since the last reset."""
        return self.pages_consumed == 0

    def reset(self) -> None:
        """Forget all seen titles and start a new walk."""
        self.seen_titles.clear()
        self.pages_consumed = 0

    def has_seen(self, title: str) -> bool:
        """Return whether ``title`` was already surfaced in this walk."""
        return title in self.seen_titles

    def remember(self, titles: Iterable[str]) -> None:
        """Record the titles surfaced by one consumed page, which may be none."""
        self.seen_titles.update(titles)
        self.pages_consumed += 1

    def __len__(self) -> int:
        return len(self.seen_titles)
