"""
Content Models

Marketplace listings that the ranking engine scores: tracks, bundles and
sound-kits. Upload, storage and moderation code maintain these rows; the
engine only reads them.
"""
from typing import Optional

from sqlalchemy import String, Integer, Boolean, Text, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class ContentMixin(TimestampMixin):
    """
    Columns shared by every rankable content category.

    created_at comes from TimestampMixin and is never changed after insert.
    play_count and like_count are bumped by the play-tracking and like
    collaborators.
    """
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    preview_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Style
    genre: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)
    tags: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # comma-separated, free text

    # Engagement
    play_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    like_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Moderation
    approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    rejected: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class Track(Base, ContentMixin):
    """A single track (beat)."""
    __tablename__ = "tracks"

    __table_args__ = (
        Index('idx_tracks_moderation_created', 'approved', 'rejected', 'created_at'),
    )


class Bundle(Base, ContentMixin):
    """A bundle of tracks (pack)."""
    __tablename__ = "bundles"

    __table_args__ = (
        Index('idx_bundles_moderation_created', 'approved', 'rejected', 'created_at'),
    )


class Kit(Base, ContentMixin):
    """A sound-kit."""
    __tablename__ = "kits"

    __table_args__ = (
        Index('idx_kits_moderation_created', 'approved', 'rejected', 'created_at'),
    )
