# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Lapp page data — landing and admin views.
"""

from __future__ import annotations

from typing import Any, Dict, List

from multisite.core.tenant import TenantContext
from multisite.pages import base

LAPP_CONFIG: Dict[str, Any] = {
    "name": "Lapp",
    "tagline": "Your Business Solution",
    "theme_color": "#3b82f6",
    "logo": "/images/lapp-logo.png",
}

LAPP_BRANDING: Dict[str, str] = {
    "primary_color": "#3b82f6",
    "secondary_color": "#8b5cf6",
    "accent_color": "#10b981",
}


class DefaultPageDataService(base.DefaultPageDataService):
    """Lapp landing view."""

    def __init__(self, tenant_context: TenantContext) -> None:
        super().__init__(tenant_context)
        self.lapp_config = dict(LAPP_CONFIG)
        self.lapp_branding = dict(LAPP_BRANDING)

    def get_page_data(self) -> Dict[str, Any]:
        return {
            **super().get_page_data(),
            "tenant": self.tenant_context.get_tenant(),
            "config": self.lapp_config,
            "branding": self.lapp_branding,
        }


class AdminPageDataService(base.AdminPageDataService):
    """Lapp admin CMS view."""

    def __init__(self, tenant_context: TenantContext) -> None:
        super().__init__(tenant_context)
        self.lapp_admin_config = {
            "custom_theme": "lapp-blue",
            "show_custom_widgets": True,
            "enable_advanced_features": True,
            "custom_branding": True,
        }
        self.admin_config.update({
            "theme": "lapp-blue",
            "meta_title": "Lapp Admin CMS",
            "custom_features": self.lapp_admin_config,
        })

    def get_page_data(self) -> Dict[str, Any]:
        return {
            **super().get_page_data(),
            "config": dict(LAPP_CONFIG),
            "lapp_admin_config": self.lapp_admin_config,
        }

    def get_admin_dashboard_data(self) -> Dict[str, Any]:
        return {
            **super().get_admin_dashboard_data(),
            "stats": {
                "lapp_specific_metric": 100,
                "custom_widgets": self._widgets(),
                "advanced_features_enabled": True,
            },
            "recent_activity": self._recent_activity(),
            "custom_branding": self._admin_branding(),
        }

    def get_admin_theme(self) -> Dict[str, Any]:
        return {
            "primary_color": "#3b82f6",
            "secondary_color": "#8b5cf6",
            "accent_color": "#10b981",
            "background_color": "#f8fafc",
        }

    def _widgets(self) -> List[str]:
        return ["sales_overview", "customer_metrics", "revenue_chart"]

    def _recent_activity(self) -> List[str]:
        return ["User logged in", "Product updated", "Order created"]

    def _admin_branding(self) -> Dict[str, str]:
        return {
            "logo": "/images/lapp-admin-logo.png",
            "favicon": "/images/lapp-favicon.ico",
            "company_name": "Lapp",
        }
