"""
SQLAlchemy-based Repositories

This package provides async repository pattern using SQLAlchemy ORM.
The content repositories implement ranking.sources.ContentSource and the
promotion repository implements ranking.sources.PromotionStore.

Usage:
    from repositories import TrackRepository, PromotionRepository
    from database import get_session

    async with get_session() as session:
        tracks = TrackRepository(session)
        recent = await tracks.find_approved_ordered_by_created_desc(None, 20)
"""

from .base import BaseRepository
from .content import (
    ContentRepository,
    TrackRepository,
    BundleRepository,
    KitRepository,
    CONTENT_REPOSITORIES,
    content_sources,
)
from .promotions import PromotionRepository

__all__ = [
    "BaseRepository",
    # Content
    "ContentRepository",
    "TrackRepository",
    "BundleRepository",
    "KitRepository",
    "CONTENT_REPOSITORIES",
    "content_sources",
    # Promotions
    "PromotionRepository",
]
