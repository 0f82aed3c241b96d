"""
WindowedQuery - candidate pools for the classifiers.

Wraps a ContentSource and hands back eligible ContentSnapshots bounded by a
creation-time cutoff and an optional owner filter.
"""
from datetime import datetime, timedelta
from typing import Any, List, Optional, Sequence

from loguru import logger

from .models import ContentSnapshot
from .sources import ContentSource


def to_snapshots(rows: Sequence[Any]) -> List[ContentSnapshot]:
    """Snapshot rows and drop anything not approved-and-not-rejected."""
    snapshots = [ContentSnapshot.from_entity(row) for row in rows]
    return [s for s in snapshots if s.is_eligible]


class WindowedQuery:
    """Candidate pool fetcher for one content category."""

    def __init__(self, source: ContentSource, max_pool_size: int):
        """
        Args:
            source: Repository for the category
            max_pool_size: Upper bound on rows fetched per call
        """
        self.source = source
        self.max_pool_size = max(1, max_pool_size)

    async def since(
        self,
        owner_id: Optional[Any],
        now: datetime,
        window_days: int
    ) -> List[ContentSnapshot]:
        """Eligible items created within the last window_days."""
        cutoff = now - timedelta(days=window_days)
        rows = await self.source.find_approved_since(owner_id, cutoff, self.max_pool_size)
        self._warn_if_bounded(rows, f"window={window_days}d, owner={owner_id}")
        return to_snapshots(rows)

    async def by_genre(self, owner_id: Optional[Any], genre: str) -> List[ContentSnapshot]:
        """Eligible items of one genre."""
        if not genre:
            return []
        rows = await self.source.find_approved_by_genre(owner_id, genre, self.max_pool_size)
        self._warn_if_bounded(rows, f"genre={genre!r}, owner={owner_id}")
        return to_snapshots(rows)

    async def by_tags(self, owner_id: Optional[Any], aliases: Sequence[str]) -> List[ContentSnapshot]:
        """Eligible items tagged with any of aliases."""
        aliases = [a for a in aliases if a]
        if not aliases:
            return []
        rows = await self.source.find_approved_by_tags(owner_id, aliases, self.max_pool_size)
        self._warn_if_bounded(rows, f"tags={aliases}, owner={owner_id}")
        return to_snapshots(rows)

    def _warn_if_bounded(self, rows: Sequence[Any], context: str) -> None:
        if len(rows) >= self.max_pool_size:
            logger.warning(
                f"Candidate pool hit the {self.max_pool_size} row bound "
                f"({context}); totals may be truncated"
            )

    async def newest(self, owner_id: Optional[Any], limit: int) -> List[ContentSnapshot]:
        """The newest eligible items regardless of age."""
        rows = await self.source.find_approved_ordered_by_created_desc(
            owner_id, min(max(1, limit), self.max_pool_size)
        )
        return to_snapshots(rows)

    async def by_ids(self, ids: Sequence[Any]) -> List[ContentSnapshot]:
        """Eligible items among ids."""
        if not ids:
            return []
        rows = await self.source.find_approved_by_ids(list(ids))
        return to_snapshots(rows)
