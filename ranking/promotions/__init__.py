"""
Promotions Module - paid Featured windows

Components:
- PromotionLedger: start/extend windows and list active ones
- PromotionRecord / OwnerPromotion: immutable window records
- plan_renewal / current_windows: the pure renewal and listing rules
"""

from .models import PromotionRecord, OwnerPromotion
from .config import RATE_PER_DAY, MIN_PROMOTION_DAYS
from .ledger import (
    PromotionLedger,
    clamp_days,
    higher_tier,
    plan_renewal,
    superseded_ids,
    current_windows,
    quote_price,
)


__all__ = [
    # Main classes
    "PromotionLedger",
    # Models
    "PromotionRecord",
    "OwnerPromotion",
    # Config
    "RATE_PER_DAY",
    "MIN_PROMOTION_DAYS",
    # Rules
    "clamp_days",
    "higher_tier",
    "plan_renewal",
    "superseded_ids",
    "current_windows",
    "quote_price",
]
