# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Tenant Resolver — host → tenant, tenant + host → view.

Resolution order for the tenant:
  1. DOMAIN_TENANT_ID from the domain folder config → tenant by id
  2. otherwise the view registered for the host → its tenant

The view is always the tenant's view whose domain equals the host.
The resolver never creates tenants or views; that is the job of the
CLI (or DomainConfigSync, when DOMAIN_CONFIG_SYNC is enabled).
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from multisite.core.config import MultisiteSettings, settings as default_settings
from multisite.core.tenant import TenantResolutionResult
from multisite.storage.models import Tenant, TenantView
from multisite.storage.repositories import TenantRepository, TenantViewRepository
from multisite.tenancy.sync import DomainConfigSync

logger = logging.getLogger("multisite.tenancy.resolver")


class TenantResolver:
    """Resolves tenant and tenant view from the request host."""

    def __init__(
        self,
        settings: Optional[MultisiteSettings] = None,
        sync: Optional[DomainConfigSync] = None,
    ) -> None:
        self.settings = settings or default_settings
        self.sync = sync

    async def resolve_tenant(self, db: AsyncSession, host: str) -> Optional[Tenant]:
        tenant_id = self.settings.DOMAIN_TENANT_ID

        if tenant_id:
            tenant = await TenantRepository(db).get(tenant_id)
            if tenant is None:
                logger.debug(
                    "Tenant resolution failed: configured tenant not found",
                    extra={"tenant_id_from_config": tenant_id, "host": host},
                )
            return tenant

        view = await TenantViewRepository(db).get_by_domain(host)
        if view is None:
            logger.debug(
                "Tenant resolution failed: no view found for domain",
                extra={"host": host},
            )
            return None
        return await TenantRepository(db).get(view.tenant_id)

    async def resolve_view(
        self,
        db: AsyncSession,
        host: str,
        tenant: Optional[Tenant] = None,
    ) -> Optional[TenantView]:
        if tenant is None:
            tenant = await self.resolve_tenant(db, host)
        if tenant is None:
            return None

        view = await TenantViewRepository(db).get_for_tenant(tenant.id, host)
        if view is None:
            logger.debug(
                "Tenant view resolution failed: no view for domain",
                extra={"tenant_id": tenant.id, "host": host},
            )
        return view

    async def resolve(self, db: AsyncSession, host: str) -> TenantResolutionResult:
        """Resolve both tenant and view for a host."""
        if self.sync is not None:
            await self.sync.sync(db, host)

        tenant = await self.resolve_tenant(db, host)
        view = await self.resolve_view(db, host, tenant) if tenant is not None else None
        return TenantResolutionResult(tenant=tenant, view=view)
