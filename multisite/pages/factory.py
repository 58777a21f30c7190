# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Page Data Service Factory — tenant-specific first, base second.

A tenant provides its own services in `{TENANTS_PACKAGE}.{tenant_id}.pages`
as `DefaultPageDataService` and/or `AdminPageDataService`, or registers
them explicitly with `register()`.
"""

from __future__ import annotations

import importlib
import logging
from types import ModuleType
from typing import Dict, Optional, Tuple, Type

from multisite.core.config import MultisiteSettings, settings as default_settings
from multisite.core.tenant import TenantContext
from multisite.pages.base import AdminPageDataService, DefaultPageDataService
from multisite.pages.contracts import PageDataService

logger = logging.getLogger("multisite.pages.factory")

BASE_SERVICES: Dict[str, Type[PageDataService]] = {
    "Default": DefaultPageDataService,
    "Admin": AdminPageDataService,
}


def view_code_to_part(view_code: Optional[str]) -> str:
    """'admin' → 'Admin'; every other code shares the default service."""
    if (view_code or "default").lower() == "admin":
        return "Admin"
    return "Default"


class PageDataServiceFactory:
    """Resolves the PageDataService for a tenant and view code."""

    def __init__(self, settings: Optional[MultisiteSettings] = None) -> None:
        self.settings = settings or default_settings
        self._registered: Dict[Tuple[str, str], Type[PageDataService]] = {}
        self._modules: Dict[str, Optional[ModuleType]] = {}

    # ── Registration ────────────────────────────────────────────

    def register(self, tenant_id: str, view_code: str, service_cls: Type[PageDataService]) -> None:
        """Register a tenant-specific service class."""
        part = view_code_to_part(view_code)
        self._registered[(tenant_id, part)] = service_cls
        logger.info("Registered page data service: %s/%s -> %s", tenant_id, part, service_cls.__name__)

    # ── Lookup ──────────────────────────────────────────────────

    def _tenant_module(self, tenant_id: str) -> Optional[ModuleType]:
        if tenant_id in self._modules:
            return self._modules[tenant_id]

        module = None
        if tenant_id.isidentifier():
            module_name = f"{self.settings.TENANTS_PACKAGE}.{tenant_id}.pages"
            try:
                module = importlib.import_module(module_name)
            except ModuleNotFoundError as e:
                # Only a missing tenant module means "no tenant code";
                # a broken import inside it must surface.
                if e.name is None or not (module_name == e.name or module_name.startswith(e.name + ".")):
                    raise
        self._modules[tenant_id] = module
        return module

    def service_class(self, tenant_id: Optional[str], view_code: Optional[str]) -> Type[PageDataService]:
        part = view_code_to_part(view_code)

        if tenant_id:
            registered = self._registered.get((tenant_id, part))
            if registered is not None:
                return registered

            module = self._tenant_module(tenant_id)
            tenant_cls = getattr(module, f"{part}PageDataService", None) if module else None
            if isinstance(tenant_cls, type) and issubclass(tenant_cls, PageDataService):
                return tenant_cls

        return BASE_SERVICES[part]

    def resolve(
        self,
        tenant_id: Optional[str],
        view_code: Optional[str],
        context: Optional[TenantContext] = None,
    ) -> PageDataService:
        service_cls = self.service_class(tenant_id, view_code)
        return service_cls(context or TenantContext())

    def resolve_from_context(self, context: TenantContext) -> PageDataService:
        return self.resolve(context.tenant_id, context.view_code or "default", context)
