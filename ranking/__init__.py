"""
Ranking Package

Builds the New, Popular, Trending and Featured listings for tracks, bundles
and kits, and manages paid promotion windows.

Layers:
- scorer: engagement and decayed scores
- classifier: listing membership and order per category
- promotions: paid Featured windows
- ranker: page assembly
- engine: RankingEngine tying them together

Usage:
    from ranking import RankingEngine

    engine = RankingEngine(content_sources, promotion_store)
    page = await engine.get_trending("TRACK", page=0, limit=20)
"""

from .models import ContentSnapshot, Page
from .sources import ContentSource, PromotionStore
from .pool import WindowedQuery
from .engine import RankingEngine, RankingError


__all__ = [
    "RankingEngine",
    "RankingError",
    "ContentSnapshot",
    "Page",
    "ContentSource",
    "PromotionStore",
    "WindowedQuery",
]
