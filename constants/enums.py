"""
Shared Enums

Application-wide enums used across multiple modules.
"""
from enum import Enum
from typing import Optional


class TargetType(str, Enum):
    """Content categories that can be ranked and promoted."""
    TRACK = "TRACK"
    BUNDLE = "BUNDLE"
    KIT = "KIT"

    @classmethod
    def parse(cls, value) -> Optional["TargetType"]:
        """
        Resolve a target type from user input.

        Accepts enum members, names in any case and the legacy marketplace
        names (BEAT, PACK). Returns None for anything else.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().upper()
        key = _TARGET_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None


_TARGET_ALIASES = {
    "BEAT": "TRACK",
    "BEATS": "TRACK",
    "TRACKS": "TRACK",
    "PACK": "BUNDLE",
    "PACKS": "BUNDLE",
    "BUNDLES": "BUNDLE",
    "KITS": "KIT",
}


class PromotionTier(str, Enum):
    """Paid promotion tiers, lowest to highest."""
    STANDARD = "standard"
    PREMIUM = "premium"
    SPOTLIGHT = "spotlight"

    @property
    def rank(self) -> int:
        return TIER_RANKS[self]

    @classmethod
    def parse(cls, value) -> "PromotionTier":
        """Resolve a tier from user input; anything unknown is standard."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.STANDARD


TIER_RANKS = {
    PromotionTier.STANDARD: 1,
    PromotionTier.PREMIUM: 2,
    PromotionTier.SPOTLIGHT: 3,
}


class ListingCategory(str, Enum):
    """Dynamic listings the engine can build."""
    NEW = "new"
    POPULAR = "popular"
    TRENDING = "trending"
    FEATURED = "featured"


class PromotionStatus(str, Enum):
    """Computed status of a promotion record."""
    ACTIVE = "active"
    SUPERSEDED = "superseded"
    EXPIRED = "expired"
    SCHEDULED = "scheduled"
