# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Lapp routes — loaded when the deployment serves DOMAIN_TENANT_ID=lapp.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from multisite.api.deps import get_page_data_service
from multisite.api.errors import PageNotFoundError
from multisite.pages.contracts import PageDataService
from multisite.tenancy import helpers
from multisite.tenancy.manager import current_tenancy

router = APIRouter(tags=["lapp"])


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    service: PageDataService = Depends(get_page_data_service),
):
    """Admin dashboard; only the admin view has one."""
    if not helpers.is_admin_view():
        raise PageNotFoundError(request.url.path)

    state = current_tenancy()
    page_data = {
        **service.get_page_data(),
        "dashboard": service.get_admin_dashboard_data(),
        "theme": service.get_admin_theme(),
        "tenant_database": state.database if state else None,
    }
    return HTMLResponse(helpers.view("dashboard", page_data))
