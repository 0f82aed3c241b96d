"""
SQLAlchemy ORM Models

This module defines all database models using SQLAlchemy ORM.
Models are organized by domain:
- Content: Tracks, bundles and kits that the engine ranks
- Promotions: Paid feature windows
"""

from .base import Base, TimestampMixin
from .content import ContentMixin, Track, Bundle, Kit
from .promotions import Promotion

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Content
    "ContentMixin",
    "Track",
    "Bundle",
    "Kit",
    # Promotions
    "Promotion",
]
