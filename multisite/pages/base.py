# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Base Page Data Services — used when a tenant ships no service of its own.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List

from multisite.core.tenant import TenantContext
from multisite.pages.contracts import PageDataService

DEFAULT_VIEW_CONFIG: Dict[str, Any] = {
    "type": "landing",
    "show_navigation": True,
    "show_footer": True,
    "meta_title": "Welcome",
}

ADMIN_VIEW_CONFIG: Dict[str, Any] = {
    "type": "cms",
    "show_navigation": False,
    "show_footer": False,
    "meta_title": "Admin CMS",
    "requires_auth": True,
    "theme": "default",
    "show_sidebar": True,
}

ADMIN_PERMISSIONS: List[str] = ["view_all", "edit_all", "delete_all"]

ADMIN_DASHBOARD: Dict[str, Any] = {
    "stats": {},
    "recent_activity": [],
    "notifications": [],
}

ADMIN_THEME: Dict[str, str] = {
    "primary_color": "#6366f1",
    "secondary_color": "#8b5cf6",
    "accent_color": "#10b981",
}


class DefaultPageDataService(PageDataService):
    """Landing view page data."""

    def get_page_data(self) -> Dict[str, Any]:
        return {
            "view_config": dict(DEFAULT_VIEW_CONFIG),
            "is_landing": True,
        }

    def get_admin_dashboard_data(self) -> Dict[str, Any]:
        return {}

    def get_admin_theme(self) -> Dict[str, Any]:
        return {}


class AdminPageDataService(PageDataService):
    """Admin (CMS) view page data."""

    def __init__(self, tenant_context: TenantContext) -> None:
        super().__init__(tenant_context)
        self.admin_config: Dict[str, Any] = dict(ADMIN_VIEW_CONFIG)
        self.admin_permissions: List[str] = list(ADMIN_PERMISSIONS)

    def get_page_data(self) -> Dict[str, Any]:
        return {
            "view_config": self.admin_config,
            "permissions": self.admin_permissions,
            "is_admin": True,
        }

    def get_admin_dashboard_data(self) -> Dict[str, Any]:
        return copy.deepcopy(ADMIN_DASHBOARD)

    def get_admin_theme(self) -> Dict[str, Any]:
        return dict(ADMIN_THEME)
