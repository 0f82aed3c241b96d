"""
Collaborator interfaces consumed by the ranking engine.

The engine never talks to SQLAlchemy directly; repositories in
repositories/ implement these and tests plug in in-memory versions.
"""
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Any, Optional, Sequence

from constants import TargetType


class ContentSource(ABC):
    """Read access to one content category. Only eligible items are returned."""

    @abstractmethod
    async def find_approved_since(
        self,
        owner_id: Optional[Any],
        cutoff: datetime,
        limit: int
    ) -> Sequence[Any]:
        """Approved, non-rejected items created at or after cutoff, newest first."""

    @abstractmethod
    async def find_approved_ordered_by_created_desc(
        self,
        owner_id: Optional[Any],
        limit: int
    ) -> Sequence[Any]:
        """Newest approved, non-rejected items regardless of age."""

    @abstractmethod
    async def find_approved_by_ids(self, ids: Sequence[Any]) -> Sequence[Any]:
        """Approved, non-rejected items among ids, in any order."""

    @abstractmethod
    async def find_approved_by_genre(
        self,
        owner_id: Optional[Any],
        genre: str,
        limit: int
    ) -> Sequence[Any]:
        """Eligible items whose genre equals genre, ignoring case, newest first."""

    @abstractmethod
    async def find_approved_by_tags(
        self,
        owner_id: Optional[Any],
        aliases: Sequence[str],
        limit: int
    ) -> Sequence[Any]:
        """Eligible items whose tags contain any alias, ignoring case, newest first."""


class PromotionStore(ABC):
    """Persistence for the promotion ledger."""

    @abstractmethod
    async def get_active_promotions(
        self,
        target_type: TargetType,
        as_of: datetime,
        limit: int
    ) -> Sequence[Any]:
        """Non-superseded records of target_type whose window contains as_of."""

    @abstractmethod
    async def get_current_window(
        self,
        target_type: TargetType,
        target_id: Any,
        as_of: datetime,
        for_update: bool = False
    ) -> Optional[Any]:
        """
        The non-superseded active record for one target, if any.

        for_update is set only by the read-decide-write inside locked(); plain
        reads must not take row locks.
        """

    @abstractmethod
    async def save_promotion(self, record: Any) -> Any:
        """Persist a new record and return it with its id set."""

    @abstractmethod
    def locked(self, target_type: TargetType, target_id: Any) -> AbstractAsyncContextManager:
        """
        Serialize the read-decide-write of one target.

        Everything read and written inside the block must be durable before
        the block exits.
        """

    @abstractmethod
    async def get_by_owner(self, owner_id: Any) -> Sequence[Any]:
        """Every record purchased by owner_id, newest first."""

    @abstractmethod
    async def get_ended_between(self, since: datetime, until: datetime) -> Sequence[Any]:
        """Non-superseded records whose window closed in (since, until]."""
