import asyncio
from datetime import timedelta

import pytest
from sqlalchemy.dialects import postgresql

from constants import TargetType, PromotionTier
from database.models import Track, Kit, Promotion
from ranking import RankingEngine
from ranking.promotions import PromotionLedger, PromotionRecord
from repositories import (
    KitRepository,
    PromotionRepository,
    TrackRepository,
    content_sources,
)
from repositories.promotions import current_window_query
from tests.conftest import NOW


async def add_tracks(session, *rows_fields):
    rows = [
        Track(
            title=f"track {n}",
            owner_id=fields.get("owner_id", 1),
            created_at=NOW - timedelta(days=fields.get("age_days", 1)),
            play_count=fields.get("plays", 0),
            like_count=fields.get("likes", 0),
            approved=fields.get("approved", True),
            rejected=fields.get("rejected", False),
            genre=fields.get("genre"),
            tags=fields.get("tags"),
        )
        for n, fields in enumerate(rows_fields)
    ]
    session.add_all(rows)
    await session.flush()
    return rows


# ─────────────────────────────────────────────────────────────────────
# Content
# ─────────────────────────────────────────────────────────────────────
async def test_find_approved_since_filters_and_orders(session):
    old, recent, newest, rejected, pending = await add_tracks(
        session,
        {"age_days": 90},
        {"age_days": 5},
        {"age_days": 1},
        {"age_days": 1, "rejected": True},
        {"age_days": 1, "approved": False},
    )
    repo = TrackRepository(session)

    rows = await repo.find_approved_since(None, NOW - timedelta(days=60), 100)

    assert [r.id for r in rows] == [newest.id, recent.id]


async def test_newest_regardless_of_age_and_owner(session):
    a, b, c = await add_tracks(
        session,
        {"age_days": 400, "owner_id": 2},
        {"age_days": 200, "owner_id": 3},
        {"age_days": 300, "owner_id": 2},
    )
    repo = TrackRepository(session)

    assert [r.id for r in await repo.find_approved_ordered_by_created_desc(None, 2)] == [b.id, c.id]
    assert [r.id for r in await repo.find_approved_ordered_by_created_desc(2, 10)] == [c.id, a.id]


async def test_same_created_at_orders_by_id_desc(session):
    first, second = await add_tracks(session, {"age_days": 3}, {"age_days": 3})
    rows = await TrackRepository(session).find_approved_ordered_by_created_desc(None, 10)
    assert [r.id for r in rows] == [second.id, first.id]


async def test_find_by_ids_only_eligible(session):
    good, bad = await add_tracks(session, {}, {"rejected": True})
    rows = await TrackRepository(session).find_approved_by_ids([good.id, bad.id, 12345])
    assert [r.id for r in rows] == [good.id]


async def test_style_finders(session):
    exact, upper, tagged, percent, rejected, other = await add_tracks(
        session,
        {"age_days": 3, "genre": "uk drill"},
        {"age_days": 1, "genre": "UK Drill", "owner_id": 2},
        {"age_days": 2, "tags": "Dark,UKDrill"},
        {"age_days": 2, "tags": "100% uk"},
        {"age_days": 1, "genre": "uk drill", "rejected": True},
        {"age_days": 1, "genre": "trap", "tags": "atl"},
    )
    repo = TrackRepository(session)

    assert [r.id for r in await repo.find_approved_by_genre(None, "uk drill", 10)] == [upper.id, exact.id]
    assert [r.id for r in await repo.find_approved_by_genre(2, "uk drill", 10)] == [upper.id]
    assert [r.id for r in await repo.find_approved_by_tags(None, ["ukdrill"], 10)] == [tagged.id]
    assert [r.id for r in await repo.find_approved_by_tags(None, ["0%"], 10)] == [percent.id]
    assert await repo.find_approved_by_tags(None, [], 10) == []


async def test_counter_writes(session):
    (track,) = await add_tracks(session, {"plays": 3, "likes": 1})
    repo = TrackRepository(session)

    await repo.increment_play_count(track.id, by=4)
    await repo.set_like_count(track.id, -2)
    await session.refresh(track)

    stored = await repo.get(track.id)
    assert stored.play_count == 7
    assert stored.like_count == 0
    assert await repo.get(98765) is None


async def test_repositories_are_per_type(session):
    session.add(Kit(title="kit", owner_id=1, created_at=NOW, approved=True))
    await session.flush()

    assert await TrackRepository(session).count() == 0
    assert await KitRepository(session).count() == 1
    assert set(content_sources(session)) == set(TargetType)


# ─────────────────────────────────────────────────────────────────────
# Promotions
# ─────────────────────────────────────────────────────────────────────
def _record(target_id, tier=PromotionTier.STANDARD, start=NOW, days=10, extends_id=None):
    return PromotionRecord(
        target_type=TargetType.TRACK,
        target_id=target_id,
        tier=tier,
        start_date=start,
        duration_days=days,
        owner_id=1,
        extends_id=extends_id,
    )


async def test_save_and_read_back(session):
    repo = PromotionRepository(session)

    saved = await repo.save_promotion(_record(7, PromotionTier.PREMIUM))
    current = await repo.get_current_window(TargetType.TRACK, 7, NOW + timedelta(days=1))

    assert saved.id is not None
    assert current == saved
    assert current.end_date == NOW + timedelta(days=10)
    assert await repo.get_current_window(TargetType.TRACK, 7, NOW + timedelta(days=10)) is None
    assert await repo.get_current_window(TargetType.KIT, 7, NOW) is None


def test_current_window_query_locks_only_on_request():
    dialect = postgresql.dialect()

    read = str(current_window_query(TargetType.TRACK, 1, NOW).compile(dialect=dialect))
    renewal = str(current_window_query(TargetType.TRACK, 1, NOW, for_update=True).compile(dialect=dialect))

    assert "FOR UPDATE" not in read
    assert renewal.rstrip().endswith("FOR UPDATE")


async def test_superseded_rows_are_hidden(session):
    repo = PromotionRepository(session)
    first = await repo.save_promotion(_record(1))
    renewal = await repo.save_promotion(_record(1, days=20, extends_id=first.id))

    current = await repo.get_current_window(TargetType.TRACK, 1, NOW)
    active = await repo.get_active_promotions(TargetType.TRACK, NOW, 100)

    assert current.id == renewal.id
    assert [r.id for r in active] == [renewal.id]
    assert [r.id for r in await repo.get_by_owner(1)] == [renewal.id, first.id]


async def test_active_promotions_order_by_tier_then_start(session):
    repo = PromotionRepository(session)
    standard = await repo.save_promotion(_record(1, start=NOW - timedelta(hours=1)))
    spotlight = await repo.save_promotion(_record(2, PromotionTier.SPOTLIGHT, start=NOW - timedelta(days=4)))
    premium = await repo.save_promotion(_record(3, PromotionTier.PREMIUM, start=NOW - timedelta(days=2)))
    newer_standard = await repo.save_promotion(_record(4, start=NOW - timedelta(minutes=5)))

    active = await repo.get_active_promotions(TargetType.TRACK, NOW, 100)

    assert [r.id for r in active] == [spotlight.id, premium.id, newer_standard.id, standard.id]


async def test_ended_between(session):
    repo = PromotionRepository(session)
    short = await repo.save_promotion(_record(1, days=1))
    await repo.save_promotion(_record(2, days=30))

    ended = await repo.get_ended_between(NOW, NOW + timedelta(days=2))

    assert [r.id for r in ended] == [short.id]


async def test_locked_block_commits(session):
    repo = PromotionRepository(session)

    async with repo.locked(TargetType.TRACK, 1):
        await repo.save_promotion(_record(1))

    await session.rollback()
    assert await repo.count() == 1


async def test_locked_block_rolls_back_on_error(session):
    repo = PromotionRepository(session)

    with pytest.raises(RuntimeError):
        async with repo.locked(TargetType.TRACK, 1):
            await repo.save_promotion(_record(1))
            raise RuntimeError("payment declined")

    assert await repo.count() == 0


async def test_concurrent_renewals_through_sql(session):
    ledger = PromotionLedger(PromotionRepository(session), max_days=90, max_window_days=365)

    await asyncio.gather(*[
        ledger.start_promotion(TargetType.TRACK, 1, "standard", 10, 1, NOW + timedelta(minutes=n))
        for n in range(5)
    ])

    listing = await ledger.active_listing(TargetType.TRACK, NOW + timedelta(hours=1))
    assert len(listing) == 1
    assert listing[0].duration_days == 50
    assert listing[0].start_date == NOW


async def test_engine_over_sqlite(session):
    tracks = await add_tracks(
        session,
        {"age_days": 2, "plays": 300},
        {"age_days": 40, "plays": 200},
        {"age_days": 1},
    )
    await session.commit()
    engine = RankingEngine(content_sources(session), PromotionRepository(session), clock=lambda: NOW)

    assert (await engine.get_trending(TargetType.TRACK)).items == [tracks[0].id]
    assert (await engine.get_popular(TargetType.TRACK)).items == [tracks[1].id]
    assert (await engine.get_new(TargetType.TRACK)).items == [tracks[2].id, tracks[0].id, tracks[1].id]

    promotion = await engine.start_promotion(TargetType.TRACK, tracks[2].id, "spotlight", 7, 1)
    assert promotion.tier == PromotionTier.SPOTLIGHT
    assert (await engine.get_featured(TargetType.TRACK)).items == [tracks[2].id]

    rows = (await session.execute(Promotion.__table__.select())).all()
    assert len(rows) == 1
