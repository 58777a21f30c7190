# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Template Renderer — Jinja2 templates with per-tenant lookup.

Search locations, in loader order:
  - TEMPLATES_PATH                    shared layouts and legacy tenant templates
  - TENANTS_PATH                      namespaced tenant templates ({id}/templates/...)

Tenant templates are always addressed through their {id}/ prefix, so one
tenant cannot shadow another and new tenant folders need no restart.

A tenant view is looked up in three places:
  namespace         {id}/templates/{code}/{name}.html
  old consolidated  {id}/templates/tenants/{id}/{code}/{name}.html
  legacy            tenants/{id}/{code}/{name}.html
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from multisite.api.errors import ViewNotFoundError
from multisite.core.config import MultisiteSettings, settings as default_settings
from multisite.tenancy import helpers

logger = logging.getLogger("multisite.views")

TEMPLATE_SUFFIX = ".html"


class TemplateRenderer:
    """Resolves and renders templates for tenants and views."""

    def __init__(self, settings: Optional[MultisiteSettings] = None) -> None:
        self.settings = settings or default_settings
        self.templates_path = Path(self.settings.TEMPLATES_PATH)
        self.tenants_path = Path(self.settings.TENANTS_PATH)
        self.env = Environment(
            loader=FileSystemLoader(self.search_paths()),
            autoescape=select_autoescape(["html"]),
        )
        self.env.globals.update(
            app_name=self.settings.APP_NAME,
            domain={
                "site_title": self.settings.DOMAIN_SITE_TITLE,
                "theme_color": self.settings.DOMAIN_THEME_COLOR,
            },
            is_admin_view=helpers.is_admin_view,
            is_view_code=helpers.is_view_code,
            view_path=helpers.get_view_path,
        )

    def search_paths(self) -> List[str]:
        return [str(self.templates_path), str(self.tenants_path)]

    def candidates(self, tenant_id: str, code: str, view_name: str) -> List[Tuple[str, str]]:
        """Ordered (location, template name) pairs for a tenant view."""
        filename = f"{view_name}{TEMPLATE_SUFFIX}"
        return [
            ("namespace", f"{tenant_id}/templates/{code}/{filename}"),
            ("old consolidated", f"{tenant_id}/templates/tenants/{tenant_id}/{code}/{filename}"),
            ("legacy", f"tenants/{tenant_id}/{code}/{filename}"),
        ]

    def exists(self, name: str) -> bool:
        try:
            self.env.get_template(name)
        except TemplateNotFound:
            return False
        return True

    def render(self, name: str, data: Optional[Dict[str, Any]] = None) -> str:
        return self.env.get_template(name).render(**(data or {}))

    def find_tenant_view(self, tenant_id: str, code: str, view_name: str) -> Optional[str]:
        for _, name in self.candidates(tenant_id, code, view_name):
            if self.exists(name):
                return name
        return None

    def render_tenant_view(
        self,
        tenant_id: str,
        code: str,
        view_name: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Render the first matching tenant view or raise ViewNotFoundError."""
        name = self.find_tenant_view(tenant_id, code, view_name)
        if name is None:
            checked = [f"{label}: {path}" for label, path in self.candidates(tenant_id, code, view_name)]
            logger.warning(
                "View not found: %s", view_name,
                extra={"tenant_id": tenant_id, "view_code": code},
            )
            raise ViewNotFoundError(view_name, tenant_id, code, checked)
        return self.render(name, data)
