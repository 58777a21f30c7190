# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
App Context — Singleton that holds all core component references.

Initialized at startup, read by middleware, dependencies and helpers.
"""

from __future__ import annotations

from typing import Optional

from multisite.core.config import MultisiteSettings, settings as default_settings
from multisite.pages.factory import PageDataServiceFactory
from multisite.pages.registry import PageDataRegistry
from multisite.storage.database import configure_engine
from multisite.tenancy.manager import Tenancy
from multisite.tenancy.resolver import TenantResolver
from multisite.tenancy.sync import DomainConfigSync
from multisite.views.renderer import TemplateRenderer


class AppContext:
    """
    Holds all runtime references for the application.
    Created once at startup, used by every request.
    """

    def __init__(self, settings: Optional[MultisiteSettings] = None) -> None:
        self.settings = settings or default_settings
        configure_engine(self.settings.DATABASE_URL)
        self.tenancy = Tenancy(self.settings)
        sync = (
            DomainConfigSync(self.settings, tenancy=self.tenancy)
            if self.settings.DOMAIN_CONFIG_SYNC else None
        )
        self.resolver = TenantResolver(self.settings, sync=sync)
        self.renderer = TemplateRenderer(self.settings)
        self.page_services = PageDataServiceFactory(self.settings)
        self.page_registry = PageDataRegistry(self.page_services)

    async def close(self) -> None:
        await self.tenancy.dispose()


# ── Global singleton ────────────────────────────────────────

_ctx: Optional[AppContext] = None


def init_app_context(settings: Optional[MultisiteSettings] = None) -> AppContext:
    global _ctx
    _ctx = AppContext(settings)
    return _ctx


def get_app_context() -> AppContext:
    if _ctx is None:
        raise RuntimeError("AppContext not initialized. Call init_app_context() first.")
    return _ctx
