# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Shared test fixtures for all Multisite tests.

The central database is a SQLite file per test; tenant databases are
SQLite files next to it, named by the tenancy naming rules.
"""

from contextlib import contextmanager

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from multisite.core.config import MultisiteSettings
from multisite.core.context import init_app_context
from multisite.core.tenant import bind_tenant_context, reset_tenant_context
from multisite.storage.database import (
    close_db,
    create_all_tables,
    drop_all_tables,
    get_session_factory,
    override_engine_for_test,
)
from multisite.storage.repositories import (
    DomainRepository,
    TenantRepository,
    TenantViewRepository,
)
from multisite.tenancy.manager import Tenancy

# Import models so tables are registered
import multisite.storage.models  # noqa


@pytest.fixture
def test_settings(tmp_path) -> MultisiteSettings:
    """Settings pointing the central and tenant databases at tmp_path."""
    return MultisiteSettings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'central.sqlite'}",
        TENANT_DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path}/{{database}}.sqlite",
        DOMAIN_TENANT_ID=None,
        DOMAIN_CODE="default",
        DOMAIN_CONFIG_SYNC=False,
    )


@pytest.fixture
async def central_db(test_settings):
    """Fresh central database with all tables."""
    engine = create_async_engine(test_settings.DATABASE_URL)
    override_engine_for_test(engine)
    await create_all_tables()
    yield engine
    await drop_all_tables()
    await close_db()


@pytest.fixture
async def db_session(central_db):
    async with get_session_factory()() as session:
        yield session


@pytest.fixture
async def app_context(test_settings, central_db):
    """Initialize AppContext the way the lifespan does."""
    ctx = init_app_context(test_settings)
    yield ctx
    await ctx.close()


@pytest.fixture
def seed(test_settings, central_db):
    """Create a tenant, its database and (domain, code) views; returns the tenant."""

    async def _seed(tenant_id, *views, data=None):
        async with get_session_factory()() as db:
            tenants = TenantRepository(db)
            tenant = await tenants.get(tenant_id) or await tenants.create(tenant_id, data)
            for domain, code in views:
                await DomainRepository(db).first_or_create(tenant_id, domain)
                await TenantViewRepository(db).create(
                    tenant_id=tenant_id, name=code, domain=domain, code=code,
                )
            await db.commit()
        await Tenancy(test_settings).create_database(tenant)
        return tenant

    return _seed


@contextmanager
def _bound(context):
    token = bind_tenant_context(context)
    try:
        yield context
    finally:
        reset_tenant_context(token)


@pytest.fixture
def bind_context():
    """Context manager binding a TenantContext as the request's context."""
    return _bound
