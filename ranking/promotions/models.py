"""
Data models for the promotion ledger.
"""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any, Optional

from constants import TargetType, PromotionTier, PromotionStatus


@dataclass(frozen=True)
class PromotionRecord:
    """One immutable feature window."""
    target_type: TargetType
    target_id: Any
    tier: PromotionTier
    start_date: datetime
    duration_days: int
    owner_id: Optional[Any] = None
    id: Optional[int] = None
    extends_id: Optional[int] = None

    @property
    def end_date(self) -> datetime:
        return self.start_date + timedelta(days=self.duration_days)

    def is_active_at(self, moment: datetime) -> bool:
        """start_date <= moment < end_date"""
        return self.start_date <= moment < self.end_date

    def status_at(self, moment: datetime, superseded: bool = False) -> PromotionStatus:
        if superseded:
            return PromotionStatus.SUPERSEDED
        if moment < self.start_date:
            return PromotionStatus.SCHEDULED
        if self.is_active_at(moment):
            return PromotionStatus.ACTIVE
        return PromotionStatus.EXPIRED

    def with_id(self, record_id: int) -> "PromotionRecord":
        return replace(self, id=record_id)

    @classmethod
    def from_entity(cls, entity) -> "PromotionRecord":
        """Build a record from a Promotion row."""
        return cls(
            target_type=TargetType(entity.target_type),
            target_id=entity.target_id,
            tier=PromotionTier.parse(entity.tier),
            start_date=entity.start_date,
            duration_days=entity.duration_days,
            owner_id=entity.owner_id,
            id=entity.id,
            extends_id=entity.extends_id,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "target_type": self.target_type.value,
            "target_id": self.target_id,
            "tier": self.tier.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "duration_days": self.duration_days,
            "owner_id": self.owner_id,
            "extends_id": self.extends_id,
        }


@dataclass(frozen=True)
class OwnerPromotion:
    """A purchaser's view of one record."""
    record: PromotionRecord
    status: PromotionStatus

    def to_dict(self) -> dict:
        return {
            **self.record.to_dict(),
            "status": self.status.value,
        }
