# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.
"""Unit tests for Tenancy (tenant database context)."""

from pathlib import Path

import pytest
from sqlalchemy import text

from multisite.storage.models import Tenant
from multisite.tenancy.manager import (
    Tenancy,
    TenancyError,
    TenancyNotInitializedError,
    TenantDatabaseMissingError,
    current_tenancy,
    tenancy_initialized,
)


@pytest.fixture
async def tenancy(test_settings):
    t = Tenancy(test_settings)
    for tenant_id in ("lapp", "other"):
        await t.create_database(Tenant(id=tenant_id))
    yield t
    t.end()
    await t.dispose()


class TestNaming:
    def test_prefix_and_suffix(self, test_settings):
        settings = test_settings.model_copy(update={"TENANT_DB_PREFIX": "t_", "TENANT_DB_SUFFIX": "_db"})
        assert Tenancy(settings).database_name(Tenant(id="lapp")) == "t_lapp_db"

    def test_default_name(self, test_settings):
        assert Tenancy(test_settings).database_name(Tenant(id="lapp")) == "tenantlapp"

    def test_tenancy_db_name_override(self, test_settings):
        tenant = Tenant(id="lapp", data={"tenancy_db_name": "custom"})
        assert Tenancy(test_settings).database_name(tenant) == "custom"

    def test_invalid_name_rejected(self, test_settings):
        with pytest.raises(TenancyError):
            Tenancy(test_settings).database_name(Tenant(id="bad name; drop"))

    def test_database_url(self, test_settings, tmp_path):
        url = Tenancy(test_settings).database_url(Tenant(id="lapp"))
        assert url == f"sqlite+aiosqlite:///{tmp_path}/tenantlapp.sqlite"


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_initialize_and_end(self, tenancy):
        assert tenancy.initialized is False

        state = await tenancy.initialize(Tenant(id="lapp"))
        assert state.database == "tenantlapp"
        assert tenancy.initialized is True
        assert tenancy_initialized() is True
        assert tenancy.tenant.id == "lapp"
        assert current_tenancy() is state

        tenancy.end()
        assert tenancy.initialized is False
        assert tenancy.tenant is None

    @pytest.mark.asyncio
    async def test_same_tenant_reuses_state(self, tenancy):
        tenant = Tenant(id="lapp")
        first = await tenancy.initialize(tenant)
        second = await tenancy.initialize(tenant)
        assert first is second

    @pytest.mark.asyncio
    async def test_switching_tenants(self, tenancy):
        await tenancy.initialize(Tenant(id="lapp"))
        state = await tenancy.initialize(Tenant(id="other"))
        assert state.database == "tenantother"
        assert tenancy.tenant.id == "other"

    @pytest.mark.asyncio
    async def test_session_uses_tenant_database(self, tenancy):
        await tenancy.initialize(Tenant(id="lapp"))
        async with tenancy.session() as session:
            result = await session.execute(text("SELECT 1"))
            assert result.scalar() == 1

    @pytest.mark.asyncio
    async def test_session_requires_initialization(self, tenancy):
        with pytest.raises(TenancyNotInitializedError):
            async with tenancy.session():
                pass

    @pytest.mark.asyncio
    async def test_failed_verification_leaves_no_state(self, test_settings, tmp_path):
        settings = test_settings.model_copy(update={
            "TENANT_DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path}/missing/dir/{{database}}.sqlite",
        })
        tenancy = Tenancy(settings)
        try:
            with pytest.raises(TenantDatabaseMissingError):
                await tenancy.initialize(Tenant(id="lapp"))
            assert tenancy.initialized is False
        finally:
            await tenancy.dispose()

    @pytest.mark.asyncio
    async def test_missing_sqlite_database_is_not_created(self, test_settings, tmp_path):
        tenancy = Tenancy(test_settings)
        try:
            with pytest.raises(TenantDatabaseMissingError) as exc_info:
                await tenancy.initialize(Tenant(id="ghost"))
            assert exc_info.value.database == "tenantghost"
            assert not (tmp_path / "tenantghost.sqlite").exists()
            assert current_tenancy() is None
        finally:
            await tenancy.dispose()

    @pytest.mark.asyncio
    async def test_verification_can_be_disabled(self, test_settings, tmp_path):
        settings = test_settings.model_copy(update={
            "TENANT_DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path}/missing/dir/{{database}}.sqlite",
            "TENANCY_VERIFY_CONNECTION": False,
        })
        tenancy = Tenancy(settings)
        try:
            state = await tenancy.initialize(Tenant(id="lapp"))
            assert state.database == "tenantlapp"
        finally:
            tenancy.end()
            await tenancy.dispose()


class TestDatabaseManagement:
    @pytest.mark.asyncio
    async def test_create_sqlite_database(self, tenancy, tmp_path):
        tenant = Tenant(id="acme")
        assert await tenancy.database_exists(tenant) is False

        assert await tenancy.create_database(tenant) is True
        assert Path(tmp_path / "tenantacme.sqlite").exists()
        assert await tenancy.database_exists(tenant) is True
        assert await tenancy.create_database(tenant) is False

    @pytest.mark.asyncio
    async def test_unsupported_backend(self, test_settings):
        settings = test_settings.model_copy(update={"TENANT_DATABASE_URL": "mysql+aiomysql://u:p@h/{database}"})
        with pytest.raises(TenancyError):
            await Tenancy(settings).database_exists(Tenant(id="acme"))
