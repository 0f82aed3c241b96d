"""
Configuration for paid promotions.
"""
from decimal import Decimal

from constants import PromotionTier


# Price per day by tier
RATE_PER_DAY = {
    PromotionTier.STANDARD: Decimal("1.50"),
    PromotionTier.PREMIUM: Decimal("3.00"),
    PromotionTier.SPOTLIGHT: Decimal("6.00"),
}

MIN_PROMOTION_DAYS = 1
