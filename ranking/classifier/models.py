"""
Data models for the Classifier module.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from constants import ListingCategory
from ..models import ContentSnapshot


@dataclass
class ClassifiedList:
    """Fully ordered members of one listing; style lists carry no category."""
    category: Optional[ListingCategory]
    items: List[ContentSnapshot] = field(default_factory=list)
    window_days: Optional[int] = None  # window that produced the list, after any widening
    style: Optional[str] = None

    @property
    def ids(self) -> List[Any]:
        return [item.id for item in self.items]

    def __len__(self) -> int:
        return len(self.items)
