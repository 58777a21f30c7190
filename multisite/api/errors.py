# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
API Error Handling — Unified error structure.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.responses import JSONResponse


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
        trace_id: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.trace_id = trace_id or str(uuid.uuid4())
        super().__init__(message)


class TenantContextUnavailableError(APIError):
    def __init__(self, trace_id: str = None):
        super().__init__(
            code="TENANT_CONTEXT_UNAVAILABLE",
            message="Tenant or view context not available",
            status_code=404,
            trace_id=trace_id,
        )


class ViewNotFoundError(APIError):
    def __init__(
        self,
        view_name: str,
        tenant_id: str,
        code: str,
        checked: List[str],
        trace_id: str = None,
    ):
        super().__init__(
            code="VIEW_NOT_FOUND",
            message=(
                f"View not found: {view_name} for tenant {tenant_id}, view {code} "
                f"(checked namespace, old consolidated and legacy locations)"
            ),
            status_code=500,
            details={"view": view_name, "tenant_id": tenant_id, "code": code, "checked": checked},
            trace_id=trace_id,
        )


class PageNotFoundError(APIError):
    def __init__(self, path: str, trace_id: str = None):
        super().__init__(
            code="PAGE_NOT_FOUND",
            message=f"Page '{path}' is not available for this view",
            status_code=404,
            trace_id=trace_id,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Global exception handler for APIError."""
    trace_id = getattr(request.state, "trace_id", None) or exc.trace_id
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "code": exc.code,
            "message": exc.message,
            "trace_id": trace_id,
            "details": exc.details,
        },
    )
