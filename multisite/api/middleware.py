# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
API Middleware — Trace ID propagation and tenant/view context binding.
"""

from __future__ import annotations

import uuid
import time
import logging
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from multisite.core.context import get_app_context
from multisite.core.tenant import TenantContext, bind_tenant_context, reset_tenant_context
from multisite.storage.database import get_session_factory

logger = logging.getLogger("multisite.api")


class TraceMiddleware(BaseHTTPMiddleware):
    """
    Generates or propagates X-Trace-Id header for every request.
    Also logs request duration.
    """

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get("X-Trace-Id", str(uuid.uuid4()))
        request.state.trace_id = trace_id

        start = time.time()
        response: Response = await call_next(request)
        elapsed = (time.time() - start) * 1000

        response.headers["X-Trace-Id"] = trace_id
        tenant_context = getattr(request.state, "tenant_context", None)
        logger.info(
            "[api] %s %s → %d (%.0fms) trace=%s",
            request.method, request.url.path,
            response.status_code, elapsed, trace_id,
            extra={
                "trace_id": trace_id,
                "host": request.url.hostname,
                "tenant_id": tenant_context.tenant_id if tenant_context else None,
                "view_code": tenant_context.view_code if tenant_context else None,
            },
        )
        return response


class TenantViewMiddleware(BaseHTTPMiddleware):
    """
    Resolves tenant and view, binds the TenantContext, initializes tenancy.

    Steps run in a fixed order:
      1. resolve tenant/view (central database, before tenancy exists)
      2. bind TenantContext, empty when nothing resolved
      3. initialize tenancy for a resolved tenant
    Tenancy is ended and the binding reset once the response is produced.
    """

    def __init__(self, app: ASGIApp, exempt_paths: Iterable[str] = ("/up",)) -> None:
        super().__init__(app)
        self.exempt_paths = frozenset(exempt_paths)

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        ctx = get_app_context()
        host = request.url.hostname or ""

        async with get_session_factory()() as db:
            resolved = await ctx.resolver.resolve(db, host)
            # Only DomainConfigSync writes here
            await db.commit()

        tenant_context = TenantContext(resolved.tenant, resolved.view)
        request.state.tenant_context = tenant_context
        token = bind_tenant_context(tenant_context)
        try:
            if resolved.tenant is not None:
                try:
                    await ctx.tenancy.initialize(resolved.tenant)
                except Exception as e:
                    logger.error(
                        "Tenancy initialization failed",
                        extra={
                            "tenant_id": resolved.tenant.id,
                            "domain": host,
                            "error": str(e),
                            "exception_class": type(e).__name__,
                        },
                    )
                    raise
            return await call_next(request)
        finally:
            ctx.tenancy.end()
            reset_tenant_context(token)
