# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
API Dependencies — FastAPI dependency injection.
"""

from __future__ import annotations

from fastapi import Request

from multisite.core.context import AppContext, get_app_context
from multisite.core.tenant import TenantContext
from multisite.pages.contracts import PageDataService


async def get_tenant_context(request: Request) -> TenantContext:
    """
    TenantContext bound by TenantViewMiddleware.

    Always returns a context; it is empty (no tenant, no view) when the
    host did not resolve or the middleware did not run.
    """
    context = getattr(request.state, "tenant_context", None)
    if context is None:
        return TenantContext()
    return context


def get_context() -> AppContext:
    return get_app_context()


async def get_page_data_service(request: Request) -> PageDataService:
    """PageDataService for the request's tenant and view."""
    context = await get_tenant_context(request)
    return get_app_context().page_services.resolve_from_context(context)
