# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Pages API — landing page and admin login for every tenant view.

Page data is layered: base view logic first, then whatever the tenant's
PageDataService returns for the current view.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from multisite.api.deps import get_tenant_context
from multisite.core.context import get_app_context
from multisite.core.tenant import TenantContext
from multisite.pages.logic import PageLogic
from multisite.pages.registry import PageDataRegistry

router = APIRouter(tags=["pages"])


class PageController(PageLogic):
    def __init__(
        self,
        context: TenantContext,
        registry: Optional[PageDataRegistry] = None,
    ) -> None:
        super().__init__()
        self.context = context
        self.registry = registry or get_app_context().page_registry
        self.init_default_view()

    def _data(self, method_name: str) -> Dict[str, Any]:
        return self.registry.get_data(method_name, self.context) or {}

    def home(self) -> str:
        if self.context.is_view("admin"):
            return self.admin_login()

        page_data = {**self.get_page_data(), **self._data("get_page_data")}
        return self.context.view("home", page_data)

    def admin_login(self) -> str:
        self.init_admin_view()

        tenant_data = self._data("get_page_data")
        dashboard = self._data("get_admin_dashboard_data") or self.get_admin_dashboard_data()
        theme = self._data("get_admin_theme") or self.get_admin_theme()

        page_data = {
            **self.get_page_data(),
            **tenant_data,
            "dashboard": dashboard,
            "theme": theme,
        }
        # Template path is tenants.{id}::{code}.login, so the name is just "login"
        return self.context.view("login", page_data)


@router.get("/", response_class=HTMLResponse)
async def home(context: TenantContext = Depends(get_tenant_context)):
    return HTMLResponse(PageController(context).home())


@router.get("/login", name="admin.login", response_class=HTMLResponse)
async def admin_login(context: TenantContext = Depends(get_tenant_context)):
    return HTMLResponse(PageController(context).admin_login())
