# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Multisite Application Entry Point.

FastAPI app with lifespan, tenant/view middleware, page routes and the
routes of the tenant configured for this deployment.

Entry point: uvicorn multisite.main:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import importlib
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI

from multisite.core.config import MultisiteSettings, settings as default_settings
from multisite.core.context import init_app_context, get_app_context
from multisite.core.logging import setup_logging
from multisite.api.errors import APIError, api_error_handler
from multisite.api.middleware import TenantViewMiddleware, TraceMiddleware
from multisite.pages.routes import router as pages_router
from multisite.storage.database import init_db, close_db

logger = logging.getLogger("multisite.main")

VERSION = "0.1.0"


def load_tenant_router(settings: MultisiteSettings) -> Optional[APIRouter]:
    """Routes shipped by the configured tenant in `{TENANTS_PACKAGE}.{id}.routes`."""
    tenant_id = settings.DOMAIN_TENANT_ID
    if not tenant_id or not tenant_id.isidentifier():
        return None

    module_name = f"{settings.TENANTS_PACKAGE}.{tenant_id}.routes"
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        if e.name is None or not (module_name == e.name or module_name.startswith(e.name + ".")):
            raise
        return None
    return getattr(module, "router", None)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage startup/shutdown of application resources."""
    # Startup
    settings = app.state.settings
    setup_logging(settings.LOG_LEVEL)
    init_app_context(settings)
    await init_db()
    logger.info("[Multisite] Application ready")
    yield
    # Shutdown
    await get_app_context().close()
    await close_db()
    logger.info("[Multisite] Shutdown complete")


def create_app(settings: Optional[MultisiteSettings] = None) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        title=settings.APP_NAME,
        description="Multi-tenant sites with per-domain views",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ── Middleware ───────────────────────────────────────────
    # Added last runs first: traces wrap tenant resolution.
    app.add_middleware(TenantViewMiddleware)
    app.add_middleware(TraceMiddleware)

    # ── Error Handlers ───────────────────────────────────────
    app.add_exception_handler(APIError, api_error_handler)

    # ── Routes ───────────────────────────────────────────────
    @app.get("/up", tags=["system"])
    async def health():
        """Health check endpoint (no tenant resolution)."""
        return {"status": "ok", "version": VERSION}

    tenant_router = load_tenant_router(settings)
    if tenant_router is not None:
        app.include_router(tenant_router)
        logger.info("Loaded routes for tenant %s", settings.DOMAIN_TENANT_ID)
    app.include_router(pages_router)

    return app


app = create_app()
