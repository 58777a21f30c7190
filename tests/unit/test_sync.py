# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.
"""Unit tests for DomainConfigSync."""

import pytest

from multisite.storage.repositories import (
    DomainRepository,
    TenantRepository,
    TenantViewRepository,
)
from multisite.tenancy.manager import Tenancy
from multisite.tenancy.sync import DomainConfigSync


class TestDomainConfigSync:
    @pytest.mark.asyncio
    async def test_noop_without_tenant_id(self, test_settings, db_session):
        await DomainConfigSync(test_settings).sync(db_session, "lapp.test")
        assert await TenantRepository(db_session).list_all() == []

    @pytest.mark.asyncio
    async def test_creates_tenant_domain_and_view(self, test_settings, db_session):
        settings = test_settings.model_copy(update={"DOMAIN_TENANT_ID": "lapp", "DOMAIN_CODE": "admin"})
        await DomainConfigSync(settings).sync(db_session, "admin.lapp.test")

        assert await TenantRepository(db_session).get("lapp") is not None
        assert (await DomainRepository(db_session).get_by_domain("admin.lapp.test")).tenant_id == "lapp"
        view = await TenantViewRepository(db_session).get_by_domain("admin.lapp.test")
        assert view.tenant_id == "lapp"
        assert view.code == "admin"
        assert view.name == "admin"

    @pytest.mark.asyncio
    async def test_new_tenant_gets_database(self, test_settings, db_session, tmp_path):
        settings = test_settings.model_copy(update={"DOMAIN_TENANT_ID": "lapp"})
        await DomainConfigSync(settings, tenancy=Tenancy(settings)).sync(db_session, "lapp.test")
        assert (tmp_path / "tenantlapp.sqlite").exists()

    @pytest.mark.asyncio
    async def test_new_tenant_without_tenancy_gets_no_database(self, test_settings, db_session, tmp_path):
        settings = test_settings.model_copy(update={"DOMAIN_TENANT_ID": "lapp"})
        await DomainConfigSync(settings).sync(db_session, "lapp.test")
        assert not (tmp_path / "tenantlapp.sqlite").exists()

    @pytest.mark.asyncio
    async def test_updates_existing_view_to_match(self, test_settings, seed, db_session):
        await seed("old", ("site.test", "default"))
        settings = test_settings.model_copy(update={"DOMAIN_TENANT_ID": "new", "DOMAIN_CODE": "admin"})

        await DomainConfigSync(settings).sync(db_session, "site.test")
        await db_session.commit()

        view = await TenantViewRepository(db_session).get_by_domain("site.test")
        assert view.tenant_id == "new"
        assert view.code == "admin"
        assert (await DomainRepository(db_session).get_by_domain("site.test")).tenant_id == "new"

    @pytest.mark.asyncio
    async def test_matching_view_untouched(self, test_settings, seed, db_session):
        await seed("lapp", ("lapp.test", "default"))
        settings = test_settings.model_copy(update={"DOMAIN_TENANT_ID": "lapp"})
        views = TenantViewRepository(db_session)
        before = (await views.get_by_domain("lapp.test")).updated_at

        await DomainConfigSync(settings).sync(db_session, "lapp.test")

        view = await views.get_by_domain("lapp.test")
        assert view.code == "default"
        assert view.updated_at == before
