# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
ORM Models — Central database tables.

Tables:
  - tenants: one row per tenant, free-form attributes in `data`
  - domains: hostnames registered for a tenant
  - tenant_views: (tenant, view code) bound to exactly one domain
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, DateTime, ForeignKey, Index, JSON,
)

from multisite.storage.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


# ── Tenants ─────────────────────────────────────────────────

class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(String(64), primary_key=True)
    data = Column(JSON, nullable=True, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def get_internal(self, key: str, default=None):
        """Read a tenancy attribute stored in `data` (e.g. tenancy_db_name)."""
        return (self.data or {}).get(key, default)

    def __repr__(self):
        return f"<Tenant {self.id}>"


# ── Domains ─────────────────────────────────────────────────

class Domain(Base):
    __tablename__ = "domains"

    id = Column(Integer, primary_key=True, autoincrement=True)
    domain = Column(String(255), nullable=False, unique=True)
    tenant_id = Column(
        String(64),
        ForeignKey("tenants.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Domain {self.domain} → {self.tenant_id}>"


# ── Tenant Views ────────────────────────────────────────────

class TenantView(Base):
    __tablename__ = "tenant_views"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(
        String(64),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )
    name = Column(String(64), nullable=False)  # 'default', 'admin', 'api'
    domain = Column(String(255), nullable=False, unique=True)
    code = Column(String(64), nullable=False, default="default")
    config = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("idx_tenant_views_tenant_code", "tenant_id", "code"),
    )

    def __repr__(self):
        return f"<TenantView {self.tenant_id}:{self.code} @ {self.domain}>"
