"""
Data models shared by the ranking layers.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional


@dataclass(frozen=True)
class ContentSnapshot:
    """
    Read-only view of one content item, whatever its category.

    Taken from a repository row at query time, so scoring never touches a
    live ORM object and counters are read once per request.
    """
    id: Any
    owner_id: Optional[Any]
    created_at: Optional[datetime]
    play_count: int = 0
    like_count: int = 0
    approved: bool = True
    rejected: bool = False
    preview_url: Optional[str] = None
    genre: Optional[str] = None
    tags: Optional[str] = None

    @property
    def is_eligible(self) -> bool:
        """Approved and not rejected."""
        return self.approved and not self.rejected

    @classmethod
    def from_entity(cls, entity) -> "ContentSnapshot":
        """Build a snapshot from a content row (Track, Bundle, Kit or a test double)."""
        if isinstance(entity, cls):
            return entity
        return cls(
            id=entity.id,
            owner_id=entity.owner_id,
            created_at=entity.created_at,
            play_count=max(0, entity.play_count or 0),
            like_count=max(0, entity.like_count or 0),
            approved=bool(entity.approved),
            rejected=bool(entity.rejected),
            preview_url=entity.preview_url,
            genre=entity.genre,
            tags=entity.tags,
        )


@dataclass
class Page:
    """One page of an ordered listing."""
    items: List[Any] = field(default_factory=list)
    total_count: int = 0
    page: int = 0
    limit: int = 1

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.limit) if self.limit else 0

    @classmethod
    def empty(cls, page: int, limit: int) -> "Page":
        return cls(items=[], total_count=0, page=page, limit=limit)

    def to_dict(self) -> dict:
        return {
            "items": list(self.items),
            "total_count": self.total_count,
            "page": self.page,
            "limit": self.limit,
            "total_pages": self.total_pages,
        }
