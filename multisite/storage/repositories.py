# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Repository Layer — CRUD operations for the central tables.

Each repository takes an AsyncSession and provides typed access.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from multisite.storage.models import Tenant, Domain, TenantView


# ── Tenant Repository ───────────────────────────────────────

class TenantRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, tenant_id: str) -> Optional[Tenant]:
        """Get tenant by ID."""
        return await self.db.get(Tenant, tenant_id)

    async def create(self, tenant_id: str, data: Optional[Dict[str, Any]] = None) -> Tenant:
        """Create a tenant. Fails on duplicate ID at flush."""
        tenant = Tenant(id=tenant_id, data=data or {})
        self.db.add(tenant)
        await self.db.flush()
        return tenant

    async def first_or_create(self, tenant_id: str) -> Tenant:
        existing = await self.get(tenant_id)
        if existing is not None:
            return existing
        return await self.create(tenant_id)

    async def list_all(self) -> List[Tenant]:
        result = await self.db.execute(select(Tenant).order_by(Tenant.id))
        return list(result.scalars().all())


# ── Domain Repository ───────────────────────────────────────

class DomainRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_domain(self, domain: str) -> Optional[Domain]:
        result = await self.db.execute(
            select(Domain).where(Domain.domain == domain)
        )
        return result.scalar_one_or_none()

    async def first_or_create(self, tenant_id: str, domain: str) -> Domain:
        """Register `domain` for the tenant unless it already is."""
        result = await self.db.execute(
            select(Domain).where(Domain.tenant_id == tenant_id, Domain.domain == domain)
        )
        existing = result.scalar_one_or_none()
        if existing is not None:
            return existing
        row = Domain(tenant_id=tenant_id, domain=domain)
        self.db.add(row)
        await self.db.flush()
        return row

    async def reassign(self, row: Domain, tenant_id: str) -> None:
        """Move a domain to another tenant."""
        await self.db.execute(
            update(Domain)
            .where(Domain.id == row.id)
            .values(tenant_id=tenant_id, updated_at=datetime.now(timezone.utc))
        )
        row.tenant_id = tenant_id

    async def list_by_tenant(self, tenant_id: str) -> List[Domain]:
        result = await self.db.execute(
            select(Domain).where(Domain.tenant_id == tenant_id).order_by(Domain.domain)
        )
        return list(result.scalars().all())


# ── Tenant View Repository ──────────────────────────────────

class TenantViewRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_domain(self, domain: str) -> Optional[TenantView]:
        """Find the view bound to a domain, whatever tenant owns it."""
        result = await self.db.execute(
            select(TenantView).where(TenantView.domain == domain)
        )
        return result.scalar_one_or_none()

    async def get_for_tenant(self, tenant_id: str, domain: str) -> Optional[TenantView]:
        """Find a tenant's view by domain."""
        result = await self.db.execute(
            select(TenantView).where(
                TenantView.tenant_id == tenant_id,
                TenantView.domain == domain,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, tenant_id: str, name: str) -> Optional[TenantView]:
        result = await self.db.execute(
            select(TenantView)
            .where(TenantView.tenant_id == tenant_id, TenantView.name == name)
            .order_by(TenantView.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def domain_exists(self, domain: str) -> bool:
        return await self.get_by_domain(domain) is not None

    async def create(
        self,
        tenant_id: str,
        name: str,
        domain: str,
        code: str = "default",
        config: Optional[Dict[str, Any]] = None,
    ) -> TenantView:
        view = TenantView(
            tenant_id=tenant_id,
            name=name,
            domain=domain,
            code=code,
            config=config,
        )
        self.db.add(view)
        await self.db.flush()
        return view

    async def save(self, view: TenantView) -> None:
        """Persist attribute changes made on a loaded view."""
        view.updated_at = datetime.now(timezone.utc)
        self.db.add(view)
        await self.db.flush()

    async def list_by_tenant(self, tenant_id: str) -> List[TenantView]:
        result = await self.db.execute(
            select(TenantView)
            .where(TenantView.tenant_id == tenant_id)
            .order_by(TenantView.id)
        )
        return list(result.scalars().all())
