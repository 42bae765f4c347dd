"""Title-based de-duplication of listing entries across one session."""

from __future__ import annotations

import logging
from typing import Iterable

from catalogpager.catalog.session import CatalogSession
from catalogpager.domain.models import CatalogEntry

log = logging.getLogger(__name__)


class DeduplicatingAggregator:
    """Suppress entries whose title was already surfaced in the session."""

    @staticmethod
    def filter(entries: Iterable[CatalogEntry], session: CatalogSession) -> list[CatalogEntry]:
        """
        Return entries with unseen titles, first occurrence wins, and record them.

        Identity is the exact title string, so distinct titles that share a
        name collapse into one entry.
        """
        batch_titles: set[str] = set()
        kept: list[CatalogEntry] = []
        dropped = 0
        for entry in entries:
            if entry.title in batch_titles or session.has_seen(entry.title):
                dropped += 1
                continue
            batch_titles.add(entry.title)
            kept.append(entry)

        session.remember(batch_titles)
        if dropped:
            log.debug("Dropped %d duplicate entries (%d seen in session)", dropped, len(session))
        return kept
