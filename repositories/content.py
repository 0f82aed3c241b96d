"""
Content Repositories

Read access for the ranking engine plus the counter writes made by the
play-tracking and like collaborators.
"""
from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import Select, select, update, desc, func, or_

from constants import TargetType
from database.models import Track, Bundle, Kit
from ranking.sources import ContentSource
from .base import BaseRepository, ModelT


class ContentRepository(BaseRepository[ModelT], ContentSource):
    """
    Shared queries for tracks, bundles and kits.

    Every finder returns approved, non-rejected rows only, newest first
    (created_at desc, then id desc).
    """

    def _eligible(self, owner_id: Optional[Any] = None) -> Select:
        stmt = select(self.model).where(
            self.model.approved.is_(True),
            self.model.rejected.is_(False),
        )
        if owner_id is not None:
            stmt = stmt.where(self.model.owner_id == owner_id)
        return stmt

    def _newest_first(self, stmt: Select) -> Select:
        return stmt.order_by(desc(self.model.created_at), desc(self.model.id))

    # ============================================
    # RANKING QUERIES
    # ============================================

    async def find_approved_since(
        self,
        owner_id: Optional[Any],
        cutoff: datetime,
        limit: int
    ) -> Sequence[ModelT]:
        stmt = self._newest_first(
            self._eligible(owner_id).where(self.model.created_at >= cutoff)
        ).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def find_approved_ordered_by_created_desc(
        self,
        owner_id: Optional[Any],
        limit: int
    ) -> Sequence[ModelT]:
        stmt = self._newest_first(self._eligible(owner_id)).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def find_approved_by_ids(self, ids: Sequence[Any]) -> Sequence[ModelT]:
        if not ids:
            return []
        stmt = self._eligible().where(self.model.id.in_(list(ids)))
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def find_approved_by_genre(
        self,
        owner_id: Optional[Any],
        genre: str,
        limit: int
    ) -> Sequence[ModelT]:
        stmt = self._newest_first(
            self._eligible(owner_id).where(func.lower(self.model.genre) == genre.lower())
        ).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def find_approved_by_tags(
        self,
        owner_id: Optional[Any],
        aliases: Sequence[str],
        limit: int
    ) -> Sequence[ModelT]:
        if not aliases:
            return []
        matches = or_(*[
            self.model.tags.icontains(alias, autoescape=True) for alias in aliases
        ])
        stmt = self._newest_first(
            self._eligible(owner_id).where(self.model.tags.is_not(None), matches)
        ).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    # ============================================
    # COUNTER WRITES
    # ============================================

    async def increment_play_count(self, entity_id: int, by: int = 1) -> None:
        """Add plays to one item."""
        stmt = (
            update(self.model)
            .where(self.model.id == entity_id)
            .values(play_count=self.model.play_count + by)
        )
        await self.session.execute(stmt)

    async def set_like_count(self, entity_id: int, like_count: int) -> None:
        """Overwrite the like counter of one item (never below zero)."""
        stmt = (
            update(self.model)
            .where(self.model.id == entity_id)
            .values(like_count=max(0, like_count))
        )
        await self.session.execute(stmt)


class TrackRepository(ContentRepository[Track]):
    """Repository for tracks."""

    model = Track


class BundleRepository(ContentRepository[Bundle]):
    """Repository for bundles."""

    model = Bundle


class KitRepository(ContentRepository[Kit]):
    """Repository for sound-kits."""

    model = Kit


CONTENT_REPOSITORIES = {
    TargetType.TRACK: TrackRepository,
    TargetType.BUNDLE: BundleRepository,
    TargetType.KIT: KitRepository,
}


def content_sources(session) -> dict:
    """One repository per content category, all sharing session."""
    return {
        target_type: repo_class(session)
        for target_type, repo_class in CONTENT_REPOSITORIES.items()
    }
