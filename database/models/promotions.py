"""
Promotion Model

Paid, time-boxed feature windows for content items.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Integer, DateTime, Index, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Promotion(Base, TimestampMixin):
    """
    One purchased feature window.

    Rows are append-only. Renewing a window that is still running inserts a
    new row that keeps the original start_date, carries the extended
    duration and points at its predecessor through extends_id. A row that
    some other row extends is superseded and never listed.

    end_date is start_date + duration_days, stored so the active-window
    queries stay in SQL.
    """
    __tablename__ = "promotions"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Target
    target_type: Mapped[str] = mapped_column(String(20), nullable=False)  # 'TRACK', 'BUNDLE', 'KIT'
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # Window
    tier: Mapped[str] = mapped_column(String(20), default='standard', nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    # Purchaser
    owner_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    # Renewal chain
    extends_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("promotions.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Indexes
    __table_args__ = (
        Index('idx_promotions_target', 'target_type', 'target_id'),
        Index('idx_promotions_window', 'target_type', 'start_date', 'end_date'),
    )
