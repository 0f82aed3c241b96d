"""
API Routes - endpoint definitions for the Content Ranking Engine

Endpoints organized by:
- Health Check
- Promotions (purchase, owner history, status, price quote)
- Listings (new, popular, trending, featured and styles per content type)

Paging input is never rejected for range; the engine clamps it.
"""
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from constants import TargetType, PromotionTier, ListingCategory
from database import get_session_dependency
from ranking import RankingEngine
from ranking.classifier import normalize_style
from ranking.promotions import clamp_days
from repositories import PromotionRepository, content_sources
from utils.clock import utcnow

router = APIRouter()


async def get_engine(session: AsyncSession = Depends(get_session_dependency)) -> RankingEngine:
    """Engine bound to the request's session."""
    return RankingEngine(content_sources(session), PromotionRepository(session))


class PromotionRequest(BaseModel):
    """Body of a promotion purchase."""
    target_type: str
    target_id: int
    # Loosely typed: unknown tiers and bad durations are defaulted, not rejected
    tier: Optional[Any] = PromotionTier.STANDARD.value
    days: Optional[Any] = None
    owner_id: Optional[int] = None


# ============================================================
# Health Check
# ============================================================
@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": utcnow().isoformat(),
        "database": str(settings.DATABASE_PATH)
    }


# ============================================================
# Promotions
# ============================================================
@router.post("/promotions")
async def start_promotion(request: PromotionRequest, engine: RankingEngine = Depends(get_engine)):
    """
    Buy or extend a Featured window.

    Buying while a window is running extends it; afterwards it opens a new one.
    """
    record = await engine.start_promotion(
        request.target_type,
        request.target_id,
        request.tier,
        request.days,
        request.owner_id,
    )
    if record is None:
        raise HTTPException(status_code=400, detail="Promotion could not be recorded")
    return record.to_dict()


@router.get("/promotions/mine")
async def list_my_promotions(
    owner_id: int = Query(..., description="Purchaser id"),
    engine: RankingEngine = Depends(get_engine)
):
    """Every promotion a purchaser bought, with its current status."""
    promotions = await engine.list_owner_promotions(owner_id)
    return {
        "promotions": [p.to_dict() for p in promotions],
        "total": len(promotions)
    }


@router.get("/promotions/quote")
async def quote_promotion(
    tier: Optional[str] = None,
    days: Optional[str] = None,
    engine: RankingEngine = Depends(get_engine)
):
    """Price of a promotion before buying it."""
    return {
        "tier": PromotionTier.parse(tier).value,
        "days": clamp_days(days, engine.ledger.max_days),
        "price": str(engine.quote_price(tier, days)),
    }


@router.get("/promotions/{target_type}/{target_id}/active")
async def get_promotion_status(
    target_type: str,
    target_id: int,
    engine: RankingEngine = Depends(get_engine)
):
    """Whether an item is featured right now."""
    kind = TargetType.parse(target_type)
    if kind is None:
        raise HTTPException(status_code=404, detail="Unknown target type")
    return {
        "target_type": kind.value,
        "target_id": target_id,
        "active": await engine.is_featured(kind, target_id),
        "active_in_type": await engine.count_active_promotions(kind),
    }


# ============================================================
# Listings
# ============================================================
@router.get("/{target_type}/{category}")
async def get_listing(
    target_type: str,
    category: ListingCategory,
    owner_id: Optional[int] = None,
    page: Optional[str] = Query(default=None, description="0-based page index"),
    limit: Optional[str] = Query(default=None, description="Page size"),
    engine: RankingEngine = Depends(get_engine)
):
    """
    One page of a listing.

    Unknown target types give an empty page rather than an error.
    """
    result = await engine.get_listing(category, target_type, owner_id, page, limit)
    return {
        "target_type": target_type.upper(),
        "category": category.value,
        **result.to_dict()
    }


@router.get("/{target_type}/styles/{style}")
async def get_style_listing(
    target_type: str,
    style: str,
    owner_id: Optional[int] = None,
    page: Optional[str] = Query(default=None, description="0-based page index"),
    limit: Optional[str] = Query(default=None, description="Page size, at most 200"),
    engine: RankingEngine = Depends(get_engine)
):
    """
    One page of a style, e.g. /TRACK/styles/uk-drill.

    Genre matches come first, then items tagged with one of the style's
    aliases; all are ranked by trending score.
    """
    result = await engine.get_by_style(target_type, style, owner_id, page, limit)
    return {
        "target_type": target_type.upper(),
        "style": normalize_style(style),
        **result.to_dict()
    }
