"""
Constants package for the Content Ranking Engine.

Contains shared enums. Per-category ranking constants live in
ranking/classifier/config.py.
"""

from .enums import (
    TargetType,
    PromotionTier,
    ListingCategory,
    PromotionStatus,
    TIER_RANKS,
)

__all__ = [
    # Enums
    "TargetType",
    "PromotionTier",
    "ListingCategory",
    "PromotionStatus",
    "TIER_RANKS",
]
