"""
SQLAlchemy Base Model and Mixins

Every table (tracks, bundles, kits, promotions) derives from Base and carries
TimestampMixin; created_at is what the New / Popular / Trending windows
filter on.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all ranking tables."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


class TimestampMixin:
    """
    created_at / updated_at columns, naive UTC.

    created_at is indexed for the listing window scans.
    """
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        default=func.now(),
        nullable=True,
        index=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        default=func.now(),
        onupdate=func.now(),
        nullable=True
    )
