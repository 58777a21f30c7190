# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Tenancy — switch the active database to the resolved tenant's store.

Each tenant owns a database named {TENANT_DB_PREFIX}{tenant_id}{TENANT_DB_SUFFIX}
(or `tenancy_db_name` from the tenant's data), reachable through the
TENANT_DATABASE_URL template. Initialization state lives in a ContextVar,
so concurrent requests each see only their own tenant.
"""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from multisite.core.config import MultisiteSettings, settings as default_settings
from multisite.storage.database import engine_options
from multisite.storage.models import Tenant

logger = logging.getLogger("multisite.tenancy")

_DB_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


class TenancyError(Exception):
    """Raised when a tenant database cannot be addressed or created."""


class TenancyNotInitializedError(TenancyError):
    def __init__(self) -> None:
        super().__init__("Tenancy is not initialized for the current context")


class TenantDatabaseMissingError(TenancyError):
    def __init__(self, database: str) -> None:
        self.database = database
        super().__init__(f"Tenant database does not exist: {database}")


@dataclass(frozen=True)
class TenancyState:
    tenant: Tenant
    database: str
    url: str
    engine: AsyncEngine


_state: ContextVar[Optional[TenancyState]] = ContextVar("multisite_tenancy", default=None)


def tenancy_initialized() -> bool:
    return _state.get() is not None


def current_tenancy() -> Optional[TenancyState]:
    return _state.get()


class Tenancy:
    """Initializes and ends tenant database context."""

    def __init__(self, settings: Optional[MultisiteSettings] = None) -> None:
        self.settings = settings or default_settings
        self._engines: Dict[str, AsyncEngine] = {}
        self._session_factories: Dict[str, async_sessionmaker[AsyncSession]] = {}

    # ── State ───────────────────────────────────────────────────

    @property
    def initialized(self) -> bool:
        return tenancy_initialized()

    @property
    def tenant(self) -> Optional[Tenant]:
        state = _state.get()
        return state.tenant if state is not None else None

    # ── Naming ──────────────────────────────────────────────────

    def database_name(self, tenant: Tenant) -> str:
        name = tenant.get_internal("tenancy_db_name") or (
            f"{self.settings.TENANT_DB_PREFIX}{tenant.id}{self.settings.TENANT_DB_SUFFIX}"
        )
        if not _DB_NAME_PATTERN.match(name):
            raise TenancyError(f"Invalid tenant database name: {name!r}")
        return name

    def database_url(self, tenant: Tenant) -> str:
        return self.settings.TENANT_DATABASE_URL.format(database=self.database_name(tenant))

    def get_engine(self, url: str) -> AsyncEngine:
        engine = self._engines.get(url)
        if engine is None:
            engine = create_async_engine(url, **engine_options(url))
            self._engines[url] = engine
            self._session_factories[url] = async_sessionmaker(
                bind=engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return engine

    # ── Lifecycle ───────────────────────────────────────────────

    async def initialize(self, tenant: Tenant) -> TenancyState:
        """Make `tenant` the active tenant for the current context."""
        current = _state.get()
        if current is not None:
            if current.tenant.id == tenant.id:
                return current
            self.end()

        url = self.database_url(tenant)
        engine = self.get_engine(url)
        if self.settings.TENANCY_VERIFY_CONNECTION:
            # SQLite would create a missing file on connect
            if make_url(url).get_backend_name() == "sqlite" and not await self.database_exists(tenant):
                raise TenantDatabaseMissingError(self.database_name(tenant))
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

        state = TenancyState(
            tenant=tenant,
            database=self.database_name(tenant),
            url=url,
            engine=engine,
        )
        _state.set(state)
        logger.debug("Tenancy initialized", extra={"tenant_id": tenant.id})
        return state

    def end(self) -> None:
        """Leave tenant context; the central database is active again."""
        state = _state.get()
        if state is not None:
            _state.set(None)
            logger.debug("Tenancy ended", extra={"tenant_id": state.tenant.id})

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session bound to the active tenant database."""
        state = _state.get()
        if state is None:
            raise TenancyNotInitializedError()
        self.get_engine(state.url)
        async with self._session_factories[state.url]() as session:
            yield session

    async def dispose(self) -> None:
        for engine in self._engines.values():
            await engine.dispose()
        self._engines.clear()
        self._session_factories.clear()

    # ── Database management ─────────────────────────────────────

    async def database_exists(self, tenant: Tenant) -> bool:
        url = make_url(self.database_url(tenant))
        backend = url.get_backend_name()
        if backend == "sqlite":
            return bool(url.database) and Path(url.database).exists()
        if backend == "postgresql":
            engine = create_async_engine(url.set(database="postgres"), isolation_level="AUTOCOMMIT")
            try:
                async with engine.connect() as conn:
                    result = await conn.execute(
                        text("SELECT 1 FROM pg_database WHERE datname = :name"),
                        {"name": url.database},
                    )
                    return result.scalar() is not None
            finally:
                await engine.dispose()
        raise TenancyError(f"Unsupported tenant database backend: {backend}")

    async def create_database(self, tenant: Tenant) -> bool:
        """Create the tenant database. Returns False if it already existed."""
        if await self.database_exists(tenant):
            return False

        url = make_url(self.database_url(tenant))
        if url.get_backend_name() == "sqlite":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            engine = create_async_engine(url)
            try:
                async with engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
            finally:
                await engine.dispose()
        else:
            engine = create_async_engine(url.set(database="postgres"), isolation_level="AUTOCOMMIT")
            try:
                async with engine.connect() as conn:
                    await conn.execute(text(f'CREATE DATABASE "{url.database}"'))
            finally:
                await engine.dispose()

        logger.info("Created tenant database %s", url.database, extra={"tenant_id": tenant.id})
        return True
