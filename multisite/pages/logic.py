# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Page Logic — accumulated page data for controllers.

The default view logic seeds landing data; the admin view logic merges
CMS data on top of whatever is already there.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List

from multisite.pages.base import (
    ADMIN_DASHBOARD,
    ADMIN_PERMISSIONS,
    ADMIN_THEME,
    ADMIN_VIEW_CONFIG,
    DEFAULT_VIEW_CONFIG,
)


class PageLogic:
    def __init__(self) -> None:
        self.page_data: Dict[str, Any] = {}
        self.default_view_config: Dict[str, Any] = {}
        self.admin_config: Dict[str, Any] = {}
        self.admin_permissions: List[str] = []

    def get_page_data(self) -> Dict[str, Any]:
        return dict(self.page_data)

    def set_page_data(self, data: Dict[str, Any]) -> None:
        self.page_data.update(data)

    def init_default_view(self) -> None:
        self.default_view_config = dict(DEFAULT_VIEW_CONFIG)
        self.set_page_data({
            "view_config": self.default_view_config,
            "is_landing": True,
        })

    def init_admin_view(self) -> None:
        self.admin_config = dict(ADMIN_VIEW_CONFIG)
        self.admin_permissions = list(ADMIN_PERMISSIONS)
        self.set_page_data({
            "view_config": self.admin_config,
            "permissions": self.admin_permissions,
            "is_admin": True,
        })

    def has_admin_permission(self, permission: str) -> bool:
        return permission in self.admin_permissions

    def get_admin_dashboard_data(self) -> Dict[str, Any]:
        return copy.deepcopy(ADMIN_DASHBOARD)

    def get_admin_theme(self) -> Dict[str, Any]:
        return dict(ADMIN_THEME)
