# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Tenant Context — Multi-tenancy support.

A request served by Multisite belongs to at most one tenant and one of
that tenant's views. TenantResolver produces a TenantResolutionResult,
TenantViewMiddleware turns it into a TenantContext and binds it to the
request; everything downstream reads the tenant and view from there.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol, runtime_checkable

from multisite.api.errors import TenantContextUnavailableError

if TYPE_CHECKING:
    from multisite.storage.models import Tenant, TenantView
    from multisite.views.renderer import TemplateRenderer


@runtime_checkable
class CurrentTenant(Protocol):
    """Access to the tenant of the current request."""

    def get_tenant(self) -> Optional["Tenant"]: ...


@runtime_checkable
class CurrentTenantView(Protocol):
    """Access to the tenant view of the current request."""

    def get_view(self) -> Optional["TenantView"]: ...


@dataclass(frozen=True)
class TenantResolutionResult:
    """Immutable outcome of resolving a host."""

    tenant: Optional["Tenant"] = None
    view: Optional["TenantView"] = None

    @property
    def has_tenant(self) -> bool:
        return self.tenant is not None


class TenantContext:
    """Request-scoped holder of the resolved tenant and view."""

    def __init__(
        self,
        tenant: Optional["Tenant"] = None,
        view: Optional["TenantView"] = None,
    ) -> None:
        self._tenant = tenant
        self._view = view

    def get_tenant(self) -> Optional["Tenant"]:
        return self._tenant

    def get_view(self) -> Optional["TenantView"]:
        return self._view

    def set_tenant(self, tenant: Optional["Tenant"]) -> None:
        self._tenant = tenant

    def set_view(self, view: Optional["TenantView"]) -> None:
        self._view = view

    @property
    def tenant_id(self) -> Optional[str]:
        return self._tenant.id if self._tenant is not None else None

    @property
    def view_code(self) -> Optional[str]:
        return self._view.code if self._view is not None else None

    @property
    def is_complete(self) -> bool:
        return self._tenant is not None and self._view is not None

    def is_view(self, code: str) -> bool:
        """Check if the current view has the given code."""
        return self._view is not None and self._view.code == code

    def get_view_path(self, view_name: str) -> str:
        """
        Logical template path for the current tenant and view code.

        Format: tenants.{tenant_id}::{code}.{view_name}
        Falls back to the bare view name outside a tenant context.
        """
        if not self.is_complete:
            return view_name
        return f"tenants.{self._tenant.id}::{self._view.code}.{view_name}"

    def view(
        self,
        view_name: str,
        data: Optional[Dict[str, Any]] = None,
        renderer: Optional["TemplateRenderer"] = None,
    ) -> str:
        """Render a tenant-specific template for the current view."""
        if not self.is_complete:
            raise TenantContextUnavailableError()

        if renderer is None:
            from multisite.core.context import get_app_context
            renderer = get_app_context().renderer

        context = dict(data or {})
        context.setdefault("tenant", self._tenant)
        context.setdefault("view", self._view)
        return renderer.render_tenant_view(
            self._tenant.id, self._view.code, view_name, context
        )

    def __repr__(self) -> str:
        return f"TenantContext(tenant={self.tenant_id!r}, view={self.view_code!r})"


# ── Request scope ───────────────────────────────────────────

_current_context: ContextVar[Optional[TenantContext]] = ContextVar(
    "multisite_tenant_context", default=None
)


def bind_tenant_context(context: TenantContext) -> Token:
    """Bind the context for the current request; returns a reset token."""
    return _current_context.set(context)


def reset_tenant_context(token: Token) -> None:
    _current_context.reset(token)


def current_tenant_context() -> Optional[TenantContext]:
    return _current_context.get()
