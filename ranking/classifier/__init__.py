"""
Classifier Module - listing membership

Decides which items are New, Popular or Trending, or belong to a style,
and in what order.

Components:
- Classifier: per-category classifier over a WindowedQuery
- ClassifiedList: ordered members of one listing
- CategoryPolicy / POLICIES: windows, floors and page ceilings per category
- STYLES / resolve_style: style slugs mapped to a genre and tag aliases
"""

from .models import ClassifiedList
from .config import (
    CategoryPolicy,
    POLICIES,
    get_policy,
    widening_windows,
    StyleDef,
    STYLES,
    STYLE_MAX_PAGE_SIZE,
    normalize_style,
    resolve_style,
)
from .classifier import (
    Classifier,
    order_desc,
    passes_trending_floors,
    is_trending,
    rank_trending,
    passes_popular_floors,
    rank_popular,
    merge_new,
    merge_style,
)


__all__ = [
    # Main classes
    "Classifier",
    # Models
    "ClassifiedList",
    # Config
    "CategoryPolicy",
    "POLICIES",
    "get_policy",
    "widening_windows",
    "StyleDef",
    "STYLES",
    "STYLE_MAX_PAGE_SIZE",
    "normalize_style",
    "resolve_style",
    # Utilities
    "order_desc",
    "passes_trending_floors",
    "is_trending",
    "rank_trending",
    "passes_popular_floors",
    "rank_popular",
    "merge_new",
    "merge_style",
]
