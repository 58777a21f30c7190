# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.
"""Unit tests for TenantResolver (host → tenant, tenant + host → view)."""

import logging

import pytest

from multisite.tenancy.resolver import TenantResolver
from multisite.tenancy.sync import DomainConfigSync


def _settings(test_settings, **update):
    return test_settings.model_copy(update=update)


class TestResolveByHost:
    @pytest.mark.asyncio
    async def test_resolves_tenant_and_view(self, test_settings, seed, db_session):
        await seed("lapp", ("lapp.test", "default"), ("admin.lapp.test", "admin"))
        resolver = TenantResolver(test_settings)

        result = await resolver.resolve(db_session, "admin.lapp.test")
        assert result.has_tenant
        assert result.tenant.id == "lapp"
        assert result.view.code == "admin"

    @pytest.mark.asyncio
    async def test_unknown_host(self, test_settings, seed, db_session, caplog):
        await seed("lapp", ("lapp.test", "default"))
        caplog.set_level(logging.DEBUG, logger="multisite.tenancy.resolver")

        result = await TenantResolver(test_settings).resolve(db_session, "unknown.test")
        assert result.tenant is None
        assert result.view is None

        records = [r for r in caplog.records if "no view found for domain" in r.getMessage()]
        assert records
        assert records[0].host == "unknown.test"

    @pytest.mark.asyncio
    async def test_resolve_view_resolves_tenant_when_missing(self, test_settings, seed, db_session):
        await seed("lapp", ("lapp.test", "default"))
        view = await TenantResolver(test_settings).resolve_view(db_session, "lapp.test")
        assert view.tenant_id == "lapp"


class TestResolveByConfiguredTenant:
    @pytest.mark.asyncio
    async def test_configured_tenant_wins(self, test_settings, seed, db_session):
        await seed("lapp", ("lapp.test", "default"))
        await seed("other", ("other.test", "default"))
        resolver = TenantResolver(_settings(test_settings, DOMAIN_TENANT_ID="lapp"))

        tenant = await resolver.resolve_tenant(db_session, "other.test")
        assert tenant.id == "lapp"

    @pytest.mark.asyncio
    async def test_view_must_belong_to_configured_tenant(self, test_settings, seed, db_session, caplog):
        await seed("lapp", ("lapp.test", "default"))
        await seed("other", ("other.test", "default"))
        caplog.set_level(logging.DEBUG, logger="multisite.tenancy.resolver")
        resolver = TenantResolver(_settings(test_settings, DOMAIN_TENANT_ID="lapp"))

        result = await resolver.resolve(db_session, "other.test")
        assert result.tenant.id == "lapp"
        assert result.view is None
        assert any("no view for domain" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_configured_tenant_missing(self, test_settings, central_db, db_session, caplog):
        caplog.set_level(logging.DEBUG, logger="multisite.tenancy.resolver")
        resolver = TenantResolver(_settings(test_settings, DOMAIN_TENANT_ID="ghost"))

        result = await resolver.resolve(db_session, "ghost.test")
        assert result.has_tenant is False

        records = [r for r in caplog.records if "configured tenant not found" in r.getMessage()]
        assert records
        assert records[0].tenant_id_from_config == "ghost"
        assert records[0].host == "ghost.test"


class TestResolveWithSync:
    @pytest.mark.asyncio
    async def test_sync_runs_before_resolution(self, test_settings, central_db, db_session):
        settings = _settings(test_settings, DOMAIN_TENANT_ID="lapp", DOMAIN_CODE="admin")
        resolver = TenantResolver(settings, sync=DomainConfigSync(settings))

        result = await resolver.resolve(db_session, "admin.lapp.test")
        assert result.tenant.id == "lapp"
        assert result.view.code == "admin"
