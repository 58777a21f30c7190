# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Tenancy Helpers — read the request's tenant context from anywhere.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from multisite.api.errors import TenantContextUnavailableError
from multisite.core.tenant import current_tenant_context
from multisite.storage.models import Tenant, TenantView
from multisite.tenancy.manager import tenancy_initialized


def current_tenant() -> Optional[Tenant]:
    context = current_tenant_context()
    return context.get_tenant() if context is not None else None


def current_view() -> Optional[TenantView]:
    context = current_tenant_context()
    return context.get_view() if context is not None else None


def is_tenant_context() -> bool:
    """True once tenancy has been initialized for this request."""
    return tenancy_initialized()


def is_view_code(code: str) -> bool:
    view = current_view()
    return view is not None and view.code == code


def is_admin_view() -> bool:
    return is_view_code("admin")


def get_view_path(view_name: str) -> str:
    """Logical template path, `view_name` unchanged outside a tenant context."""
    context = current_tenant_context()
    if context is None:
        return view_name
    return context.get_view_path(view_name)


def view(view_name: str, data: Optional[Dict[str, Any]] = None) -> str:
    """Render a tenant-specific template for the current request."""
    context = current_tenant_context()
    if context is None:
        raise TenantContextUnavailableError()
    return context.view(view_name, data)
