"""
RankingEngine - New / Popular / Trending / Featured and style listings, and promotions

Entry point used by the API and the scheduler. Wires one Classifier per
content category to its repository and shares one PromotionLedger across
categories.

Flow per listing request:
    resolve target type -> clamp page/limit -> classify -> assemble page

Every read degrades to an empty page on failure; nothing here raises to the
caller.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from loguru import logger

from config import settings
from constants import TargetType, ListingCategory
from utils.clock import utcnow
from .models import Page
from .pool import WindowedQuery
from .sources import ContentSource, PromotionStore
from .classifier import Classifier, CategoryPolicy, POLICIES
from .classifier.config import DEFAULT_MAX_PAGE_SIZE, STYLE_MAX_PAGE_SIZE
from .promotions import PromotionLedger, PromotionRecord, OwnerPromotion
from .ranker import clamp_request, assemble_page


class RankingError(Exception):
    """Raised when a listing cannot be built for a content category."""
    pass


class RankingEngine:
    """
    Listings and promotions for every configured content category.

    Stateless between calls: each request reads a fresh snapshot through
    the content sources, so concurrent callers never share results.
    """

    def __init__(
        self,
        content_sources: Mapping[TargetType, ContentSource],
        promotions: PromotionStore,
        clock: Callable[[], datetime] = utcnow,
        max_pool_size: Optional[int] = None,
        default_page_size: Optional[int] = None,
        policies: Optional[Mapping[TargetType, CategoryPolicy]] = None
    ):
        """
        Initialize engine.

        Args:
            content_sources: Repository per content category
            promotions: Promotion persistence
            clock: Returns naive-UTC now; injectable for tests
            max_pool_size: Candidate pool bound (default RANKING_MAX_POOL_SIZE)
            default_page_size: Limit used when none is given (default RANKING_DEFAULT_PAGE_SIZE)
            policies: Per-category overrides of POLICIES
        """
        self.clock = clock
        self.max_pool_size = max_pool_size or settings.RANKING_MAX_POOL_SIZE
        self.default_page_size = default_page_size or settings.RANKING_DEFAULT_PAGE_SIZE
        policies = {**POLICIES, **(policies or {})}

        self.classifiers: Dict[TargetType, Classifier] = {
            target_type: Classifier(policies[target_type], WindowedQuery(source, self.max_pool_size))
            for target_type, source in content_sources.items()
        }
        self.ledger = PromotionLedger(promotions, pool_size=self.max_pool_size)

    # ============================================
    # LISTINGS
    # ============================================

    async def get_new(self, target_type, owner_id: Optional[Any] = None, page=0, limit=None) -> Page:
        """Recently created items, newest first."""
        return await self.get_listing(ListingCategory.NEW, target_type, owner_id, page, limit)

    async def get_popular(self, target_type, owner_id: Optional[Any] = None, page=0, limit=None) -> Page:
        """Sustained engagement, excluding anything currently Trending."""
        return await self.get_listing(ListingCategory.POPULAR, target_type, owner_id, page, limit)

    async def get_trending(self, target_type, owner_id: Optional[Any] = None, page=0, limit=None) -> Page:
        """Recent engagement with half-life decay."""
        return await self.get_listing(ListingCategory.TRENDING, target_type, owner_id, page, limit)

    async def get_featured(self, target_type, owner_id: Optional[Any] = None, page=0, limit=None) -> Page:
        """Items with an active paid window, by tier then start date."""
        return await self.get_listing(ListingCategory.FEATURED, target_type, owner_id, page, limit)

    async def get_listing(
        self,
        category: ListingCategory,
        target_type,
        owner_id: Optional[Any] = None,
        page=0,
        limit=None
    ) -> Page:
        """
        One page of a listing.

        Args:
            category: Which listing
            target_type: TargetType or its name; unknown gives an empty page
            owner_id: Restrict to one creator's items
            page: 0-based page index, clamped to >= 0
            limit: Page size, clamped to the category ceiling

        Returns:
            Page of item ids
        """
        async def ordered_ids(kind, classifier, now, size):
            return await self._ordered_ids(category, kind, classifier, owner_id, now, size)

        return await self._paged(f"{category.value} listing", target_type, page, limit, ordered_ids)

    async def get_by_style(
        self,
        target_type,
        style,
        owner_id: Optional[Any] = None,
        page=0,
        limit=None
    ) -> Page:
        """
        One page of a style: genre matches topped up with tag-alias matches,
        ranked by trending score then recency.

        The page size ceiling is STYLE_MAX_PAGE_SIZE for every content type.
        """
        async def ordered_ids(kind, classifier, now, size):
            return (await classifier.by_style(style, owner_id, now)).ids

        return await self._paged(
            f"style {style!r} listing", target_type, page, limit, ordered_ids,
            max_page_size=STYLE_MAX_PAGE_SIZE
        )

    async def _paged(
        self,
        label: str,
        target_type,
        page,
        limit,
        ordered_ids: Callable[[TargetType, Classifier, datetime, int], Awaitable[List[Any]]],
        max_page_size: Optional[int] = None
    ) -> Page:
        """Resolve the type, clamp paging, order ids and cut the page."""
        kind = TargetType.parse(target_type)
        try:
            classifier = self._classifier_for(kind, target_type)
        except RankingError as e:
            logger.warning(str(e))
            index, size = clamp_request(page, limit, max_page_size or DEFAULT_MAX_PAGE_SIZE, self.default_page_size)
            return Page.empty(index, size)

        max_page_size = max_page_size or classifier.policy.max_page_size
        index, size = clamp_request(page, limit, max_page_size, self.default_page_size)
        now = self.clock()

        try:
            ids = await ordered_ids(kind, classifier, now, size)
        except Exception as e:
            logger.exception(f"Failed to build {label} for {kind.value}: {e}")
            return Page.empty(index, size)

        return assemble_page(ids, index, size, max_page_size, self.default_page_size)

    async def _ordered_ids(
        self,
        category: ListingCategory,
        kind: TargetType,
        classifier: Classifier,
        owner_id: Optional[Any],
        now: datetime,
        page_size: int
    ) -> List[Any]:
        if category == ListingCategory.NEW:
            return (await classifier.new(owner_id, now, page_size)).ids
        if category == ListingCategory.POPULAR:
            return (await classifier.popular(owner_id, now)).ids
        if category == ListingCategory.TRENDING:
            return (await classifier.trending(owner_id, now)).ids
        return await self._featured_ids(kind, classifier, owner_id, now)

    async def _featured_ids(
        self,
        kind: TargetType,
        classifier: Classifier,
        owner_id: Optional[Any],
        now: datetime
    ) -> List[Any]:
        """Active windows whose target still exists and is eligible."""
        windows = await self.ledger.active_listing(kind, now)
        target_ids = [w.target_id for w in windows]
        items = await classifier.query.by_ids(target_ids)
        live = {
            item.id for item in items
            if owner_id is None or item.owner_id == owner_id
        }
        dropped = len(target_ids) - len(live)
        if dropped and owner_id is None:
            logger.debug(f"{dropped} featured {kind.value} targets missing or not approved")
        return [target_id for target_id in target_ids if target_id in live]

    def _classifier_for(self, kind: Optional[TargetType], raw) -> Classifier:
        if kind is None:
            raise RankingError(f"Unknown target type {raw!r}")
        if kind not in self.classifiers:
            raise RankingError(f"No content source configured for {kind.value}")
        return self.classifiers[kind]

    # ============================================
    # PROMOTIONS
    # ============================================

    async def start_promotion(
        self,
        target_type,
        target_id: Any,
        tier,
        days,
        purchaser_owner_id: Optional[Any] = None
    ) -> Optional[PromotionRecord]:
        """
        Buy or extend a Featured window.

        Unknown tiers become standard and days are clamped to
        [1, PROMOTION_MAX_DAYS]. A missing or unapproved target is still
        recorded; it just never shows up in Featured.

        Returns:
            The written record, or None for an unknown target type or a
            storage failure
        """
        kind = TargetType.parse(target_type)
        if kind is None:
            logger.warning(f"Refusing promotion for unknown target type {target_type!r}")
            return None

        now = self.clock()
        try:
            if kind in self.classifiers:
                found = await self.classifiers[kind].query.by_ids([target_id])
                if not found:
                    logger.warning(
                        f"Promotion target {kind.value} #{target_id} is missing or not approved; "
                        f"recording anyway"
                    )
            return await self.ledger.start_promotion(kind, target_id, tier, days, purchaser_owner_id, now)
        except Exception as e:
            logger.exception(f"Failed to start promotion for {kind.value} #{target_id}: {e}")
            return None

    async def is_featured(self, target_type, target_id: Any) -> bool:
        kind = TargetType.parse(target_type)
        if kind is None:
            return False
        try:
            return await self.ledger.is_featured(kind, target_id, self.clock())
        except Exception as e:
            logger.exception(f"Failed to check promotion for {kind.value} #{target_id}: {e}")
            return False

    async def count_active_promotions(self, target_type) -> int:
        kind = TargetType.parse(target_type)
        if kind is None:
            return 0
        try:
            return await self.ledger.count_active(kind, self.clock())
        except Exception as e:
            logger.exception(f"Failed to count active {kind.value} promotions: {e}")
            return 0

    async def list_owner_promotions(self, owner_id: Any) -> List[OwnerPromotion]:
        """Every promotion a purchaser bought, with its status now."""
        try:
            return await self.ledger.owner_promotions(owner_id, self.clock())
        except Exception as e:
            logger.exception(f"Failed to list promotions for owner {owner_id}: {e}")
            return []

    async def ended_promotions(self, since: datetime, until: datetime) -> List[PromotionRecord]:
        """Windows that closed in (since, until]."""
        try:
            return await self.ledger.ended_between(since, until)
        except Exception as e:
            logger.exception(f"Failed to read ended promotions: {e}")
            return []

    def quote_price(self, tier, days) -> Decimal:
        """Price of a purchase before it is made."""
        return self.ledger.quote(tier, days)
