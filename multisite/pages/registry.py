# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Page Data Registry — dispatch page data calls by method name.

Controllers ask for data by name ("get_page_data", ...) without knowing
which tenant or view they serve. The registry resolves the service for
the request's TenantContext and calls the method, returning None when
there is no context, the method is not dispatchable, or the result is
not a dict.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Optional

from multisite.core.tenant import TenantContext, current_tenant_context
from multisite.pages.contracts import PageDataService
from multisite.pages.factory import PageDataServiceFactory

DISPATCHABLE: FrozenSet[str] = frozenset({
    "get_page_data",
    "get_admin_dashboard_data",
    "get_admin_theme",
})


class PageDataRegistry:
    def __init__(self, factory: PageDataServiceFactory) -> None:
        self.factory = factory

    def get_data(
        self,
        method_name: str,
        context: Optional[TenantContext] = None,
    ) -> Optional[Dict[str, Any]]:
        context = context or current_tenant_context()
        if context is None or method_name not in DISPATCHABLE:
            return None

        service = self.factory.resolve_from_context(context)
        method = getattr(service, method_name, None)
        if not callable(method):
            return None
        result = method()
        return result if isinstance(result, dict) else None

    def has_method(
        self,
        method_name: Optional[str] = None,
        context: Optional[TenantContext] = None,
    ) -> bool:
        context = context or current_tenant_context()
        if context is None:
            return False

        service = self.factory.resolve_from_context(context)
        if method_name is None:
            return isinstance(service, PageDataService)
        return callable(getattr(service, method_name, None))
