"""
Database Session Management

One async engine per process (API or scheduler). Repositories get an
AsyncSession from get_session() or, in routes, get_session_dependency().
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
)
from loguru import logger

from config import settings
from .models import Base


# Global engine instance
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_database_url() -> str:
    """aiosqlite URL of the configured marketplace database."""
    return f"sqlite+aiosqlite:///{settings.DATABASE_PATH}"


async def init_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create the process-wide engine; later calls return it unchanged.

    Args:
        database_url: Override for the configured SQLite file
    """
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    database_url = database_url or get_database_url()
    logger.info(f"Initializing database engine: {database_url}")

    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    _engine = create_async_engine(
        database_url,
        echo=settings.DATABASE_ECHO,
        connect_args=connect_args,
    )
    _session_factory = async_sessionmaker(bind=_engine, class_=AsyncSession, expire_on_commit=False)

    logger.info("Database engine initialized successfully")
    return _engine


async def close_engine() -> None:
    """Dispose the engine; the next init_engine() starts fresh."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database engine closed")


async def create_tables() -> None:
    """Create missing tables from the models. Migrations remain the source of truth."""
    engine = await init_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Session scoped to one unit of work.

    Usage:
        async with get_session() as session:
            engine = RankingEngine(content_sources(session), PromotionRepository(session))
            page = await engine.get_trending("TRACK")

    Commits on success, rolls back and re-raises on error.
    """
    if _session_factory is None:
        await init_engine()

    session = _session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_session_dependency() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    async with get_session() as session:
        yield session
