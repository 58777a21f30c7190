# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Domain Config Sync — make the database match the domain folder config.

The domain folder (DOMAIN_TENANT_ID / DOMAIN_VIEW / DOMAIN_CODE) is the
source of truth:
  - unknown host: create the tenant if needed, the domain and the view
  - known host with another tenant or code: update the rows to match
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from multisite.core.config import MultisiteSettings, settings as default_settings
from multisite.storage.repositories import (
    DomainRepository,
    TenantRepository,
    TenantViewRepository,
)
from multisite.tenancy.manager import Tenancy

logger = logging.getLogger("multisite.tenancy.sync")


class DomainConfigSync:
    def __init__(
        self,
        settings: Optional[MultisiteSettings] = None,
        tenancy: Optional[Tenancy] = None,
    ) -> None:
        self.settings = settings or default_settings
        # Without tenancy, new tenants get central rows but no database
        self.tenancy = tenancy

    async def sync(self, db: AsyncSession, host: str) -> None:
        tenant_id = self.settings.DOMAIN_TENANT_ID
        code = self.settings.DOMAIN_CODE or "default"
        if not tenant_id:
            return

        tenants = TenantRepository(db)
        tenant = await tenants.get(tenant_id)
        if tenant is None:
            tenant = await tenants.create(tenant_id)
            if self.tenancy is not None:
                await self.tenancy.create_database(tenant)
            logger.debug(
                "DomainConfigSync: created tenant",
                extra={"domain": host, "tenant_id": tenant_id},
            )

        domains = DomainRepository(db)
        domain_row = await domains.get_by_domain(host)
        if domain_row is not None and domain_row.tenant_id != tenant_id:
            await domains.reassign(domain_row, tenant_id)
        await domains.first_or_create(tenant.id, host)

        views = TenantViewRepository(db)
        view = await views.get_by_domain(host)
        if view is None:
            await views.create(tenant_id=tenant.id, name=code, domain=host, code=code)
            logger.debug(
                "DomainConfigSync: created tenant view for domain",
                extra={"domain": host, "tenant_id": tenant_id, "view_code": code},
            )
            return

        changed = False
        if view.tenant_id != tenant_id:
            view.tenant_id = tenant_id
            changed = True
        if view.code != code:
            view.code = code
            view.name = code
            changed = True
        if changed:
            await views.save(view)
            logger.debug(
                "DomainConfigSync: updated tenant view to match config",
                extra={"domain": host, "tenant_id": tenant_id, "view_code": code},
            )
