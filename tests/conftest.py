# tests/conftest.py
from datetime import datetime, timedelta
from itertools import count

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from constants import TargetType
from database.models import Base
from ranking import RankingEngine
from tests.fakes import FakeItem, InMemoryContentSource, InMemoryPromotionStore


NOW = datetime(2026, 3, 1, 12, 0, 0)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def make_item():
    """FakeItem factory; age is relative to NOW, ids are sequential from 1."""
    ids = count(1)

    def _make(age_days: float = 1, plays: int = 0, likes: int = 0, owner_id: int = 1, **kwargs):
        created_at = kwargs.pop("created_at", NOW - timedelta(days=age_days))
        item_id = kwargs.pop("id", None) or next(ids)
        return FakeItem(
            id=item_id,
            owner_id=owner_id,
            created_at=created_at,
            play_count=plays,
            like_count=likes,
            **kwargs,
        )

    return _make


@pytest.fixture()
def store() -> InMemoryPromotionStore:
    return InMemoryPromotionStore()


@pytest.fixture()
def make_engine(store):
    """Engine over in-memory sources with the clock pinned to NOW."""

    def _make(tracks=(), bundles=(), kits=(), promotions=None, clock=lambda: NOW, **kwargs):
        sources = {
            TargetType.TRACK: InMemoryContentSource(tracks),
            TargetType.BUNDLE: InMemoryContentSource(bundles),
            TargetType.KIT: InMemoryContentSource(kits),
        }
        return RankingEngine(sources, promotions or store, clock=clock, **kwargs)

    return _make


@pytest.fixture()
async def session():
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as db_session:
        yield db_session

    await engine.dispose()
