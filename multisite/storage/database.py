# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Database Connection Management — Async central database via SQLAlchemy 2.0.

The central database holds tenants, their domains and their views.
Tenant-owned databases are handled by multisite.tenancy.manager.
"""

from __future__ import annotations

from typing import Any, AsyncGenerator, Dict, List, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import text

from multisite.core.config import settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all central ORM models."""
    pass


def engine_options(url: str) -> Dict[str, Any]:
    """Pool options for an async engine; SQLite does not take pool sizing."""
    if make_url(url).get_backend_name() == "sqlite":
        return {"echo": False}
    return {"pool_size": 20, "max_overflow": 5, "echo": False}


# ── Engine & Session Factory ────────────────────────────────

_engine: Optional[AsyncEngine] = None
_engine_url: Optional[str] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None
# Engines replaced by configure_engine(), disposed by close_db()
_retired: List[AsyncEngine] = []


def _normalize(url) -> str:
    return make_url(url).render_as_string(hide_password=False)


def configure_engine(database_url: str) -> None:
    """Point the central engine at `database_url`; the engine is created lazily."""
    global _engine, _engine_url, _session_factory
    url = _normalize(database_url)
    if url == _engine_url:
        return
    if _engine is not None:
        _retired.append(_engine)
        _engine = None
        _session_factory = None
    _engine_url = url


def get_engine() -> AsyncEngine:
    """Get or create the async engine singleton."""
    global _engine, _engine_url
    if _engine is None:
        url = _engine_url or _normalize(settings.DATABASE_URL)
        _engine = create_async_engine(url, **engine_options(url))
        _engine_url = url
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory singleton."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an async DB session."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle ───────────────────────────────────────────────

async def init_db() -> None:
    """Verify database connection on startup."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))


async def close_db() -> None:
    """Dispose engines on shutdown."""
    global _engine, _engine_url, _session_factory
    while _retired:
        await _retired.pop().dispose()
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _engine_url = None
    _session_factory = None


async def create_all_tables() -> None:
    """Create all tables from ORM metadata."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_all_tables() -> None:
    """Drop all tables (test cleanup only)."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ── Test Support ────────────────────────────────────────────

def override_engine_for_test(engine: AsyncEngine) -> None:
    """Inject a test engine (e.g. SQLite in a temp dir)."""
    global _engine, _engine_url, _session_factory
    _engine = engine
    _engine_url = _normalize(engine.url)
    _session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
