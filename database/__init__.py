"""
Database Module - Content Ranking Engine

This module provides database access for the marketplace content and the
promotion ledger.

Structure:
    database/
    ├── __init__.py      # This file - public API
    ├── session.py       # SQLAlchemy async session management
    ├── init.py          # Database initialization utilities
    └── models/          # SQLAlchemy ORM models
        ├── __init__.py
        ├── base.py
        ├── content.py
        └── promotions.py

Usage:
    from database import get_session
    from database.models import Track, Promotion

    async with get_session() as session:
        result = await session.execute(select(Track))
        tracks = result.scalars().all()
"""

# SQLAlchemy Models
from .models import (
    # Base
    Base,
    TimestampMixin,
    # Content
    ContentMixin,
    Track,
    Bundle,
    Kit,
    # Promotions
    Promotion,
)

# Session Management
from .session import (
    init_engine,
    close_engine,
    create_tables,
    get_session,
    get_session_dependency,
)

# Initialization utilities
from .init import (
    init_database_async,
    get_table_counts_async,
    check_database_exists,
    run_migrations,
)

__all__ = [
    # SQLAlchemy Models
    "Base",
    "TimestampMixin",
    "ContentMixin",
    "Track",
    "Bundle",
    "Kit",
    "Promotion",
    # Session Management
    "init_engine",
    "close_engine",
    "create_tables",
    "get_session",
    "get_session_dependency",
    # Init utilities
    "init_database_async",
    "get_table_counts_async",
    "check_database_exists",
    "run_migrations",
]
