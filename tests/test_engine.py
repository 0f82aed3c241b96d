from datetime import timedelta
from decimal import Decimal

import pytest

from constants import TargetType, PromotionTier
from ranking import Page
from tests.conftest import NOW
from tests.fakes import (
    FailingContentSource,
    FailingPromotionStore,
    InMemoryContentSource,
)
from ranking import RankingEngine


# ─────────────────────────────────────────────────────────────────────
# Listings
# ─────────────────────────────────────────────────────────────────────
async def test_get_new_pages(make_engine, make_item):
    tracks = [make_item(age_days=d) for d in range(1, 26)]
    engine = make_engine(tracks=tracks)

    first = await engine.get_new(TargetType.TRACK, page=0, limit=10)
    last = await engine.get_new("TRACK", page=2, limit=10)

    assert isinstance(first, Page)
    assert first.items == [t.id for t in tracks[:10]]
    assert first.total_count == 25
    assert last.items == [t.id for t in tracks[20:]]


async def test_legacy_type_names_resolve(make_engine, make_item):
    engine = make_engine(tracks=[make_item()], bundles=[make_item()])
    assert (await engine.get_new("beat")).total_count == 1
    assert (await engine.get_new("pack")).total_count == 1


async def test_unknown_type_gives_empty_page(make_engine, make_item):
    engine = make_engine(tracks=[make_item()])

    page = await engine.get_trending("VIDEO", page=3, limit=5)

    assert page.items == []
    assert page.total_count == 0
    assert (page.page, page.limit) == (3, 5)


async def test_page_size_ceiling_depends_on_type(make_engine):
    engine = make_engine()
    assert (await engine.get_new(TargetType.TRACK, limit=500)).limit == 100
    assert (await engine.get_new(TargetType.BUNDLE, limit=500)).limit == 200
    assert (await engine.get_new(TargetType.KIT, limit=500)).limit == 100
    assert (await engine.get_new(TargetType.KIT, limit="lots")).limit == 20


async def test_popular_and_trending_disjoint(make_engine, make_item):
    tracks = [
        make_item(age_days=2, plays=300),
        make_item(age_days=10, plays=120, likes=10),
        make_item(age_days=35, plays=400),
        make_item(age_days=50, plays=90),
    ]
    engine = make_engine(tracks=tracks)

    popular = await engine.get_popular(TargetType.TRACK)
    trending = await engine.get_trending(TargetType.TRACK)

    assert set(popular.items).isdisjoint(trending.items)
    assert trending.items == [tracks[0].id, tracks[1].id]
    assert popular.items == [tracks[2].id, tracks[3].id]


async def test_owner_scoped_listing(make_engine, make_item):
    mine = make_item(age_days=3, owner_id=5)
    theirs = make_item(age_days=1, owner_id=6)
    engine = make_engine(tracks=[mine, theirs])

    assert (await engine.get_new(TargetType.TRACK, owner_id=5)).items == [mine.id]


async def test_read_failure_degrades_to_empty_page(store):
    engine = RankingEngine({TargetType.TRACK: FailingContentSource()}, store, clock=lambda: NOW)

    for get in (engine.get_new, engine.get_popular, engine.get_trending, engine.get_featured):
        page = await get(TargetType.TRACK, limit=7)
        assert page.items == []
        assert page.limit == 7


async def test_type_without_source_gives_empty_page(store, make_item):
    engine = RankingEngine({TargetType.TRACK: InMemoryContentSource([make_item()])}, store, clock=lambda: NOW)
    assert (await engine.get_new(TargetType.KIT)).items == []


# ─────────────────────────────────────────────────────────────────────
# Styles
# ─────────────────────────────────────────────────────────────────────
async def test_get_by_style_pages(make_engine, make_item):
    tracks = [make_item(age_days=d, genre="dutch drill") for d in range(1, 6)]
    tracks.append(make_item(age_days=1, plays=500, tags="dutch, melodic"))
    engine = make_engine(tracks=tracks)

    first = await engine.get_by_style("TRACK", "dutch-drill", page=0, limit=4)
    second = await engine.get_by_style("TRACK", "dutch-drill", page=1, limit=4)

    assert first.items == [tracks[5].id] + [t.id for t in tracks[:3]]
    assert second.items == [t.id for t in tracks[3:5]]
    assert first.total_count == 6


async def test_style_page_size_capped_at_200(make_engine):
    engine = make_engine()
    assert (await engine.get_by_style(TargetType.TRACK, "uk-drill", limit=500)).limit == 200
    assert (await engine.get_by_style(TargetType.KIT, "uk-drill", limit=0)).limit == 1
    assert (await engine.get_by_style(TargetType.KIT, "uk-drill", limit="x")).limit == 20


async def test_style_unknown_type_or_failure_is_empty(store):
    engine = RankingEngine({TargetType.TRACK: FailingContentSource()}, store, clock=lambda: NOW)

    failed = await engine.get_by_style(TargetType.TRACK, "uk-drill", limit=150)
    unknown = await engine.get_by_style("VIDEO", "uk-drill", limit=150)

    assert failed.items == [] and failed.limit == 150
    assert unknown.items == [] and unknown.limit == 150


# ─────────────────────────────────────────────────────────────────────
# Featured
# ─────────────────────────────────────────────────────────────────────
async def test_featured_by_tier_then_start(make_engine, make_item, store):
    tracks = [make_item(owner_id=1) for _ in range(4)]
    clock = {"now": NOW - timedelta(days=3)}
    engine = make_engine(tracks=tracks, clock=lambda: clock["now"])

    await engine.start_promotion(TargetType.TRACK, tracks[0].id, "spotlight", 30, 1)
    clock["now"] = NOW - timedelta(days=2)
    await engine.start_promotion(TargetType.TRACK, tracks[1].id, "standard", 30, 1)
    clock["now"] = NOW - timedelta(days=1)
    await engine.start_promotion(TargetType.TRACK, tracks[2].id, "premium", 30, 1)
    await engine.start_promotion(TargetType.TRACK, tracks[3].id, "standard", 30, 1)
    clock["now"] = NOW

    page = await engine.get_featured(TargetType.TRACK)

    assert page.items == [tracks[0].id, tracks[2].id, tracks[3].id, tracks[1].id]
    assert page.total_count == 4


async def test_featured_skips_rejected_targets(make_engine, make_item):
    good = make_item()
    rejected = make_item(rejected=True)
    engine = make_engine(tracks=[good, rejected])

    assert await engine.start_promotion(TargetType.TRACK, rejected.id, "spotlight", 5, 1) is not None
    await engine.start_promotion(TargetType.TRACK, good.id, "standard", 5, 1)

    page = await engine.get_featured(TargetType.TRACK)
    assert page.items == [good.id]
    assert page.total_count == 1


async def test_featured_owner_filter(make_engine, make_item):
    mine = make_item(owner_id=3)
    theirs = make_item(owner_id=4)
    engine = make_engine(tracks=[mine, theirs])
    await engine.start_promotion(TargetType.TRACK, mine.id, "standard", 5, 3)
    await engine.start_promotion(TargetType.TRACK, theirs.id, "spotlight", 5, 4)

    assert (await engine.get_featured(TargetType.TRACK, owner_id=3)).items == [mine.id]


async def test_missing_target_is_recorded_but_not_listed(make_engine):
    engine = make_engine()

    promotion = await engine.start_promotion(TargetType.KIT, 999, "premium", 5, 1)

    assert promotion is not None
    assert await engine.is_featured(TargetType.KIT, 999)
    assert (await engine.get_featured(TargetType.KIT)).items == []


# ─────────────────────────────────────────────────────────────────────
# Promotions
# ─────────────────────────────────────────────────────────────────────
async def test_start_promotion_unknown_type_returns_none(make_engine, store):
    engine = make_engine()
    assert await engine.start_promotion("VIDEO", 1, "standard", 5, 1) is None
    assert store.records == []


async def test_start_promotion_clamps_input(make_engine, make_item):
    track = make_item()
    engine = make_engine(tracks=[track])

    promotion = await engine.start_promotion("track", track.id, "diamond", 1000, 1)

    assert promotion.tier == PromotionTier.STANDARD
    assert promotion.duration_days == 90
    assert promotion.start_date == NOW


async def test_write_failure_returns_none(make_item):
    engine = RankingEngine(
        {TargetType.TRACK: InMemoryContentSource([make_item()])},
        FailingPromotionStore(),
        clock=lambda: NOW,
    )
    assert await engine.start_promotion(TargetType.TRACK, 1, "standard", 5, 1) is None
    assert (await engine.get_featured(TargetType.TRACK)).items == []
    assert await engine.count_active_promotions(TargetType.TRACK) == 0


async def test_supplementary_queries(make_engine, make_item):
    tracks = [make_item(), make_item()]
    engine = make_engine(tracks=tracks)
    await engine.start_promotion(TargetType.TRACK, tracks[0].id, "standard", 5, 1)
    await engine.start_promotion(TargetType.TRACK, tracks[0].id, "premium", 5, 1)
    await engine.start_promotion(TargetType.TRACK, tracks[1].id, "standard", 5, 2)

    assert await engine.count_active_promotions("TRACK") == 2
    assert await engine.is_featured("TRACK", tracks[1].id)
    assert not await engine.is_featured("VIDEO", tracks[1].id)
    assert [p.status.value for p in await engine.list_owner_promotions(1)] == ["active", "superseded"]
    assert engine.quote_price("premium", 10) == Decimal("30.00")


@pytest.mark.parametrize("days", [0, -1, None])
async def test_quote_never_below_one_day(make_engine, days):
    assert make_engine().quote_price("spotlight", days) == Decimal("6.00")
