"""
PromotionLedger - paid feature windows

Tracks tiered, time-boxed promotions per content item, independent of the
organic classifiers. Per target the state runs NONE -> ACTIVE -> EXPIRED;
buying again while ACTIVE extends the running window, buying after it
expired opens a fresh one.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, List, Optional

from loguru import logger

from config import settings
from constants import TargetType, PromotionTier
from ..sources import PromotionStore
from .config import RATE_PER_DAY, MIN_PROMOTION_DAYS
from .models import PromotionRecord, OwnerPromotion


# ============================================
# PURE RULES
# ============================================

def clamp_days(days, max_days: int) -> int:
    """Coerce a requested duration into [MIN_PROMOTION_DAYS, max_days]."""
    try:
        days = int(days)
    except (TypeError, ValueError):
        days = MIN_PROMOTION_DAYS
    return max(MIN_PROMOTION_DAYS, min(max_days, days))


def higher_tier(a: PromotionTier, b: PromotionTier) -> PromotionTier:
    """The higher ranked of two tiers."""
    return a if a.rank >= b.rank else b


def plan_renewal(
    current: Optional[PromotionRecord],
    target_type: TargetType,
    target_id: Any,
    tier,
    days,
    owner_id: Optional[Any],
    now: datetime,
    max_days: int,
    max_window_days: int
) -> PromotionRecord:
    """
    Decide the record a purchase writes.

    If current is active at now the new record keeps current.start_date,
    adds the requested days (total capped at max_window_days, never below the
    current duration) and takes the higher tier. Otherwise the window starts
    now.

    Args:
        current: Non-superseded record for the target, if any
        target_type: Content category
        target_id: Content item id
        tier: Requested tier, any input; unknown becomes standard
        days: Requested days, any input; clamped to [1, max_days]
        owner_id: Purchaser
        now: Decision time
        max_days: Longest single purchase
        max_window_days: Longest extended window

    Returns:
        Unsaved PromotionRecord
    """
    tier = PromotionTier.parse(tier)
    days = clamp_days(days, max_days)

    if current is not None and current.is_active_at(now):
        extended = min(current.duration_days + days, max_window_days)
        return PromotionRecord(
            target_type=target_type,
            target_id=target_id,
            tier=higher_tier(current.tier, tier),
            start_date=current.start_date,
            duration_days=max(current.duration_days, extended),
            owner_id=owner_id,
            extends_id=current.id,
        )

    return PromotionRecord(
        target_type=target_type,
        target_id=target_id,
        tier=tier,
        start_date=now,
        duration_days=days,
        owner_id=owner_id,
    )


def superseded_ids(records: Iterable[PromotionRecord]) -> set:
    """Ids that some other record extends."""
    return {r.extends_id for r in records if r.extends_id is not None}


def _recency_key(record: PromotionRecord):
    return (record.start_date, record.end_date, record.id or 0)


def current_windows(records: Iterable[PromotionRecord], now: datetime) -> List[PromotionRecord]:
    """
    Featured ordering over a set of records.

    Keeps active, non-superseded records; one per target (later start_date
    wins, then later end_date, then higher id); orders by tier rank desc,
    start_date desc, id desc.
    """
    records = list(records)
    replaced = superseded_ids(records)

    per_target = {}
    for record in records:
        if record.id in replaced or not record.is_active_at(now):
            continue
        held = per_target.get(record.target_id)
        if held is None or _recency_key(record) > _recency_key(held):
            per_target[record.target_id] = record

    return sorted(
        per_target.values(),
        key=lambda r: (r.tier.rank, r.start_date, r.id or 0),
        reverse=True
    )


def quote_price(tier, days, max_days: int) -> Decimal:
    """Price of a purchase: per-day tier rate times clamped days."""
    rate = RATE_PER_DAY[PromotionTier.parse(tier)]
    return rate * clamp_days(days, max_days)


# ============================================
# LEDGER
# ============================================

class PromotionLedger:
    """
    Promotion bookkeeping over a PromotionStore.

    The store's per-target lock makes start_promotion's read-decide-write
    atomic, so two concurrent renewals extend one after the other rather
    than both extending the same window.
    """

    def __init__(
        self,
        store: PromotionStore,
        max_days: Optional[int] = None,
        max_window_days: Optional[int] = None,
        pool_size: Optional[int] = None
    ):
        """
        Args:
            store: Promotion persistence
            max_days: Longest single purchase (default PROMOTION_MAX_DAYS)
            max_window_days: Longest extended window (default PROMOTION_MAX_WINDOW_DAYS)
            pool_size: Most active records read per listing (default RANKING_MAX_POOL_SIZE)
        """
        self.store = store
        self.max_days = max_days or settings.PROMOTION_MAX_DAYS
        self.max_window_days = max(self.max_days, max_window_days or settings.PROMOTION_MAX_WINDOW_DAYS)
        self.pool_size = pool_size or settings.RANKING_MAX_POOL_SIZE

    async def start_promotion(
        self,
        target_type: TargetType,
        target_id: Any,
        tier,
        days,
        owner_id: Optional[Any],
        now: datetime
    ) -> PromotionRecord:
        """Open or extend the feature window of one target."""
        async with self.store.locked(target_type, target_id):
            current = await self.store.get_current_window(target_type, target_id, now, for_update=True)
            record = plan_renewal(
                current, target_type, target_id, tier, days, owner_id, now,
                self.max_days, self.max_window_days
            )
            saved = await self.store.save_promotion(record)

        if saved.extends_id is not None:
            logger.info(
                f"Extended {target_type.value} #{target_id} promotion to {saved.duration_days}d "
                f"({saved.tier.value}, ends {saved.end_date:%Y-%m-%d %H:%M})"
            )
        else:
            logger.info(
                f"Started {saved.tier.value} promotion for {target_type.value} #{target_id} "
                f"({saved.duration_days}d)"
            )
        return saved

    async def active_listing(self, target_type: TargetType, now: datetime) -> List[PromotionRecord]:
        """Current windows of a target type in Featured order."""
        records = await self.store.get_active_promotions(target_type, now, self.pool_size)
        return current_windows(records, now)

    async def is_featured(self, target_type: TargetType, target_id: Any, now: datetime) -> bool:
        """Whether the target has an active window right now."""
        current = await self.store.get_current_window(target_type, target_id, now)
        return current is not None and current.is_active_at(now)

    async def count_active(self, target_type: TargetType, now: datetime) -> int:
        """Number of targets with an active window."""
        return len(await self.active_listing(target_type, now))

    async def owner_promotions(self, owner_id: Any, now: datetime) -> List[OwnerPromotion]:
        """A purchaser's records with their computed status."""
        records = list(await self.store.get_by_owner(owner_id))
        replaced = superseded_ids(records)
        return [
            OwnerPromotion(record, record.status_at(now, superseded=record.id in replaced))
            for record in records
        ]

    async def ended_between(self, since: datetime, until: datetime) -> List[PromotionRecord]:
        """Windows that closed in (since, until]."""
        return list(await self.store.get_ended_between(since, until))

    def quote(self, tier, days) -> Decimal:
        return quote_price(tier, days, self.max_days)
