"""
Promotion Repository

Append-only storage of feature windows. Superseded rows (rows some later
renewal extends) are filtered out in SQL, so every finder except
get_by_owner sees only the current record of each renewal chain.
"""
import asyncio
import weakref
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, List, Optional

from sqlalchemy import Select, select, desc, case, and_
from sqlalchemy.orm import aliased

from constants import TargetType, TIER_RANKS
from database.models import Promotion
from ranking.promotions import PromotionRecord
from ranking.sources import PromotionStore
from .base import BaseRepository


# Per event loop, per (target_type, target_id)
_TARGET_LOCKS: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, weakref.WeakValueDictionary]" = (
    weakref.WeakKeyDictionary()
)


def _target_lock(target_type: TargetType, target_id: Any) -> asyncio.Lock:
    """The process-wide lock guarding one promotion target."""
    loop = asyncio.get_running_loop()
    locks = _TARGET_LOCKS.get(loop)
    if locks is None:
        locks = weakref.WeakValueDictionary()
        _TARGET_LOCKS[loop] = locks
    key = (target_type.value, target_id)
    lock = locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        locks[key] = lock
    return lock


_successor = aliased(Promotion)

NOT_SUPERSEDED = ~select(_successor.id).where(_successor.extends_id == Promotion.id).exists()

TIER_RANK = case(
    {tier.value: rank for tier, rank in TIER_RANKS.items()},
    value=Promotion.tier,
    else_=1,
)


def _active_at(as_of: datetime):
    return and_(Promotion.start_date <= as_of, Promotion.end_date > as_of)


def current_window_query(
    target_type: TargetType,
    target_id: Any,
    as_of: datetime,
    for_update: bool = False
) -> Select:
    """Latest active, non-superseded row of one target; FOR UPDATE only when asked."""
    stmt = (
        select(Promotion)
        .where(
            Promotion.target_type == target_type.value,
            Promotion.target_id == target_id,
            _active_at(as_of),
            NOT_SUPERSEDED,
        )
        .order_by(desc(Promotion.start_date), desc(Promotion.end_date), desc(Promotion.id))
        .limit(1)
    )
    return stmt.with_for_update() if for_update else stmt


class PromotionRepository(BaseRepository[Promotion], PromotionStore):
    """Repository for promotion records."""

    model = Promotion

    # ============================================
    # WINDOW QUERIES
    # ============================================

    async def get_active_promotions(
        self,
        target_type: TargetType,
        as_of: datetime,
        limit: int
    ) -> List[PromotionRecord]:
        """Current windows of target_type, spotlight first, then newest start."""
        stmt = (
            select(Promotion)
            .where(
                Promotion.target_type == target_type.value,
                _active_at(as_of),
                NOT_SUPERSEDED,
            )
            .order_by(desc(TIER_RANK), desc(Promotion.start_date), desc(Promotion.id))
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [PromotionRecord.from_entity(row) for row in result.scalars().all()]

    async def get_current_window(
        self,
        target_type: TargetType,
        target_id: Any,
        as_of: datetime,
        for_update: bool = False
    ) -> Optional[PromotionRecord]:
        """
        Active, non-superseded window of one target.

        for_update row-locks it where the backend supports it; only the
        renewal path inside locked() asks for that.
        """
        stmt = current_window_query(target_type, target_id, as_of, for_update)
        result = await self.session.execute(stmt)
        row = result.scalars().first()
        return PromotionRecord.from_entity(row) if row else None

    async def get_by_owner(self, owner_id: Any) -> List[PromotionRecord]:
        stmt = (
            select(Promotion)
            .where(Promotion.owner_id == owner_id)
            .order_by(desc(Promotion.created_at), desc(Promotion.id))
        )
        result = await self.session.execute(stmt)
        return [PromotionRecord.from_entity(row) for row in result.scalars().all()]

    async def get_ended_between(self, since: datetime, until: datetime) -> List[PromotionRecord]:
        stmt = (
            select(Promotion)
            .where(
                Promotion.end_date > since,
                Promotion.end_date <= until,
                NOT_SUPERSEDED,
            )
            .order_by(Promotion.end_date, Promotion.id)
        )
        result = await self.session.execute(stmt)
        return [PromotionRecord.from_entity(row) for row in result.scalars().all()]

    # ============================================
    # WRITES
    # ============================================

    async def save_promotion(self, record: PromotionRecord) -> PromotionRecord:
        """Insert record as a new row and return it with its id."""
        row = Promotion(
            target_type=record.target_type.value,
            target_id=record.target_id,
            tier=record.tier.value,
            start_date=record.start_date,
            duration_days=record.duration_days,
            end_date=record.end_date,
            owner_id=record.owner_id,
            extends_id=record.extends_id,
        )
        await self.add(row)
        return record.with_id(row.id)

    @asynccontextmanager
    async def locked(self, target_type: TargetType, target_id: Any) -> AsyncIterator[None]:
        """
        Hold the target's lock for the block and commit before releasing it.

        The next holder therefore always reads the row this block wrote.
        """
        async with _target_lock(target_type, target_id):
            try:
                yield
                await self.session.commit()
            except Exception:
                await self.session.rollback()
                raise
