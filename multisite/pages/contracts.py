# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Page Data Service Contract — data behind each tenant view.

Implementations are picked by PageDataServiceFactory from the tenant id
and view code, and constructed with the request's TenantContext.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from multisite.core.tenant import TenantContext


class PageDataService(ABC):
    """
    Abstract base for page data providers.

    Subclasses must implement all three accessors. Admin accessors return
    an empty dict for views that are not admin views.
    """

    def __init__(self, tenant_context: TenantContext) -> None:
        self.tenant_context = tenant_context

    @abstractmethod
    def get_page_data(self) -> Dict[str, Any]:
        """Page data for the current view."""
        ...

    @abstractmethod
    def get_admin_dashboard_data(self) -> Dict[str, Any]:
        """Admin dashboard data."""
        ...

    @abstractmethod
    def get_admin_theme(self) -> Dict[str, Any]:
        """Admin theme colors."""
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.tenant_context!r}>"
