"""
Classifier - New / Popular / Trending membership

Applies windows, floors and exclusivity to candidate pools and returns each
listing fully ordered. Ordering is deterministic for a fixed snapshot:
primary score desc, then created_at desc, then id desc.
"""
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, List, Optional

from loguru import logger

from constants import ListingCategory
from ..models import ContentSnapshot
from ..pool import WindowedQuery
from ..scorer import popularity_score, trending_score
from .config import CategoryPolicy, StyleDef, resolve_style, widening_windows
from .models import ClassifiedList


def _created(item: ContentSnapshot, now: datetime) -> datetime:
    return item.created_at or now


def order_desc(
    items: Iterable[ContentSnapshot],
    now: datetime,
    score: Optional[Callable[[ContentSnapshot], Any]] = None
) -> List[ContentSnapshot]:
    """
    Sort by score desc, created_at desc, id desc.

    Two stable passes: id first, then the composite key.
    """
    by_id = sorted(items, key=lambda item: item.id, reverse=True)
    if score is None:
        return sorted(by_id, key=lambda item: _created(item, now), reverse=True)
    return sorted(by_id, key=lambda item: (score(item), _created(item, now)), reverse=True)


# ============================================
# TRENDING
# ============================================

def passes_trending_floors(item: ContentSnapshot, policy: CategoryPolicy) -> bool:
    """Either floor is enough; keeps single-digit noise out."""
    return (item.play_count >= policy.trending_min_plays
            or item.like_count >= policy.trending_min_likes)


def is_trending(item: ContentSnapshot, now: datetime, policy: CategoryPolicy) -> bool:
    """
    Whether an item is "hot right now".

    Used both to build the Trending list and to keep Trending items out of
    Popular within the same request.
    """
    if item.created_at is None:
        return False
    if item.created_at < now - timedelta(days=policy.trending_pool_days):
        return False
    if not passes_trending_floors(item, policy):
        return False
    return trending_score(item, now, policy.trending_half_life_days) > 0


def rank_trending(
    pool: Iterable[ContentSnapshot],
    now: datetime,
    policy: CategoryPolicy
) -> List[ContentSnapshot]:
    """Trending members of pool, highest decayed score first."""
    cutoff = now - timedelta(days=policy.trending_pool_days)
    members = [
        item for item in pool
        if item.is_eligible
        and _created(item, now) >= cutoff
        and passes_trending_floors(item, policy)
    ]
    return order_desc(
        members, now,
        score=lambda item: trending_score(item, now, policy.trending_half_life_days)
    )


# ============================================
# POPULAR
# ============================================

def passes_popular_floors(item: ContentSnapshot, policy: CategoryPolicy) -> bool:
    """(plays >= min_plays or likes >= min_likes) and score >= min_score"""
    meets_floor = (item.play_count >= policy.popular_min_plays
                   or item.like_count >= policy.popular_min_likes)
    return meets_floor and popularity_score(item) >= policy.popular_min_score


def rank_popular(
    pool: Iterable[ContentSnapshot],
    now: datetime,
    policy: CategoryPolicy,
    window_days: int
) -> List[ContentSnapshot]:
    """
    Popular members of pool for one evaluation window.

    Steps: evaluation window, hard max age, floors, Trending exclusion,
    then popularity desc.
    """
    eval_cutoff = now - timedelta(days=window_days)
    max_age_cutoff = now - timedelta(days=policy.popular_max_age_days)

    members = []
    for item in pool:
        if not item.is_eligible or item.created_at is None:
            continue
        if item.created_at < eval_cutoff or item.created_at < max_age_cutoff:
            continue
        if not passes_popular_floors(item, policy):
            continue
        if is_trending(item, now, policy):
            continue
        members.append(item)

    return order_desc(members, now, score=popularity_score)


# ============================================
# NEW
# ============================================

def merge_new(
    windowed: Iterable[ContentSnapshot],
    newest: Iterable[ContentSnapshot],
    page_size: int,
    now: datetime
) -> List[ContentSnapshot]:
    """
    Windowed items first, topped up from newest when short of one page.

    Windowed items keep their order and are never duplicated; top-up stops
    once the first page is full or newest is exhausted.
    """
    merged = {item.id: item for item in order_desc(windowed, now)}
    if len(merged) >= page_size:
        return list(merged.values())

    for item in order_desc(newest, now):
        if len(merged) >= page_size:
            break
        merged.setdefault(item.id, item)
    return list(merged.values())


# ============================================
# STYLE
# ============================================

def merge_style(
    exact: Iterable[ContentSnapshot],
    tagged: Iterable[ContentSnapshot],
    now: datetime,
    half_life_days: float
) -> List[ContentSnapshot]:
    """
    Genre matches plus tag-alias matches, ranked by trending score.

    An item matching both is kept once, as its genre match. No floors or
    pool window apply; old items simply score near zero and fall back to
    recency.
    """
    merged = {item.id: item for item in exact}
    for item in tagged:
        merged.setdefault(item.id, item)
    return order_desc(
        merged.values(), now,
        score=lambda item: trending_score(item, now, half_life_days)
    )


class Classifier:
    """
    New / Popular / Trending for one content category.

    One instance per category, parameterized by its CategoryPolicy.
    """

    def __init__(self, policy: CategoryPolicy, query: WindowedQuery):
        """
        Args:
            policy: Windows, floors and page ceiling for the category
            query: Candidate pool fetcher for the category
        """
        self.policy = policy
        self.query = query

    async def new(self, owner_id: Optional[Any], now: datetime, page_size: int) -> ClassifiedList:
        """Newest items in the New window, topped up to one page."""
        windowed = await self.query.since(owner_id, now, self.policy.new_window_days)
        newest = []
        if len(windowed) < page_size:
            newest = await self.query.newest(owner_id, page_size)
        items = merge_new(windowed, newest, page_size, now)
        return ClassifiedList(ListingCategory.NEW, items, self.policy.new_window_days)

    async def popular(self, owner_id: Optional[Any], now: datetime) -> ClassifiedList:
        """
        Sustained-popular items, widening the evaluation window while empty.

        The window doubles from popular_window_days up to
        popular_widen_cap_days and stops there even if nothing qualifies.
        """
        windows = widening_windows(self.policy.popular_window_days, self.policy.popular_widen_cap_days)
        for window_days in windows:
            pool = await self.query.since(owner_id, now, window_days)
            items = rank_popular(pool, now, self.policy, window_days)
            if items:
                return ClassifiedList(ListingCategory.POPULAR, items, window_days)
            logger.debug(
                f"No popular {self.policy.target_type.value} items in {window_days}d window "
                f"(owner={owner_id})"
            )
        return ClassifiedList(ListingCategory.POPULAR, [], windows[-1])

    async def trending(self, owner_id: Optional[Any], now: datetime) -> ClassifiedList:
        """Items with the highest decayed engagement in the trending pool."""
        pool = await self.query.since(owner_id, now, self.policy.trending_pool_days)
        items = rank_trending(pool, now, self.policy)
        return ClassifiedList(ListingCategory.TRENDING, items, self.policy.trending_pool_days)

    async def by_style(self, style, owner_id: Optional[Any], now: datetime) -> ClassifiedList:
        """
        Items of one style: genre matches first, topped up with tag-alias matches.

        Args:
            style: Style slug; unregistered slugs match on genre only
            owner_id: Restrict to one creator's items
            now: Scoring reference time
        """
        style_def: StyleDef = resolve_style(style)
        exact = await self.query.by_genre(owner_id, style_def.genre)
        tagged = await self.query.by_tags(owner_id, style_def.aliases)
        items = merge_style(exact, tagged, now, self.policy.trending_half_life_days)
        logger.debug(
            f"Style {style_def.genre!r} for {self.policy.target_type.value}: "
            f"{len(exact)} genre + {len(tagged)} tag matches -> {len(items)} items"
        )
        return ClassifiedList(None, items, style=style_def.genre)
