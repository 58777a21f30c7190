# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Management commands.

  multisite init-db
  multisite tenant:create ID [--domains D [D ...]] [--domain D]
  multisite tenant:view TENANT_ID DOMAIN [--name N] [--code C] [--update] [--switch]
"""

from __future__ import annotations

import argparse
import asyncio
import re
import shutil
import sys
from pathlib import Path
from string import Template
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError

from multisite.core.config import MultisiteSettings, settings as default_settings
from multisite.storage import init_db
from multisite.storage.database import close_db, configure_engine, get_session_factory
from multisite.storage.models import Tenant
from multisite.storage.repositories import (
    DomainRepository,
    TenantRepository,
    TenantViewRepository,
)
from multisite.tenancy.manager import Tenancy, TenancyError

# Tenant ids and view codes become folder names under TENANTS_PATH
_SEGMENT = re.compile(r"^[A-Za-z0-9_\-]+$")

HOME_TEMPLATE = Template("""{% extends "layouts/app.html" %}

{% block title %}Home - $tenant_title{% endblock %}

{% block content %}
<div class="container mx-auto px-4 py-8">
    <div class="max-w-4xl mx-auto">
        <h1 class="text-4xl font-bold mb-4">Welcome to {{ (tenant.id if tenant else '$tenant_id') | capitalize }}</h1>

        <div class="bg-white rounded-lg shadow p-6 mb-6">
            <h2 class="text-2xl font-semibold mb-4">{{ (view.name if view else '$code') | capitalize }} View</h2>
            <p class="text-gray-600 mb-4">
                This is the <strong>{{ view.name if view else '$code' }}</strong> view for the <strong>{{ tenant.id if tenant else '$tenant_id' }}</strong> tenant.
            </p>

            <div class="bg-blue-50 border border-blue-200 rounded p-4">
                <h3 class="font-semibold text-blue-900 mb-2">Current Context:</h3>
                <ul class="text-sm text-blue-800 space-y-1">
                    <li><strong>Tenant:</strong> {{ tenant.id if tenant else '$tenant_id' }}</li>
                    <li><strong>View:</strong> {{ view.name if view else '$code' }}</li>
                    <li><strong>Code:</strong> {{ view.code if view else '$code' }}</li>
                    <li><strong>Domain:</strong> {{ view.domain if view else '' }}</li>
                </ul>
            </div>
        </div>
    </div>
</div>
{% endblock %}
""")


def _escape(value: str) -> str:
    """Escape a value for a single-quoted Jinja string literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def generate_home_template(tenant_id: str, code: str) -> str:
    return HOME_TEMPLATE.substitute(
        tenant_id=_escape(tenant_id),
        tenant_title=tenant_id.capitalize(),
        code=_escape(code),
    )


def infer_view_name(domain: str) -> str:
    """'admin.lapp.test' → 'admin'; a bare 'lapp.test' → 'default'."""
    parts = domain.split(".")
    if len(parts) >= 3:
        return parts[0]
    return "default"


def infer_view_name_and_code(domain: str) -> Tuple[str, str]:
    name = infer_view_name(domain)
    return name, name


# ── View folders ────────────────────────────────────────────

def view_folder(settings: MultisiteSettings, tenant_id: str, code: str) -> Path:
    return Path(settings.TENANTS_PATH) / tenant_id / "templates" / code


def create_view_folders(settings: MultisiteSettings, tenant_id: str, code: str) -> Path:
    """Create {TENANTS_PATH}/{id}/templates/{code}/ with a starter home.html."""
    path = view_folder(settings, tenant_id, code)
    if not path.exists():
        path.mkdir(parents=True)
        print(f"    Created folder: {tenant_id}/templates/{code}/")

    home = path / "home.html"
    if not home.exists():
        home.write_text(generate_home_template(tenant_id, code), encoding="utf-8")
        print(f"    Created starter view: {tenant_id}/templates/{code}/home.html")
    return path


def rename_view_folder(settings: MultisiteSettings, tenant_id: str, old_code: str, new_code: str) -> None:
    """Move the view folder to its new code, merging into an existing folder."""
    old_path = view_folder(settings, tenant_id, old_code)
    new_path = view_folder(settings, tenant_id, new_code)

    if not old_path.exists():
        return
    if not new_path.exists():
        shutil.move(str(old_path), str(new_path))
        print(f"  Renamed folder: {old_code} → {new_code}")
        return

    print("  Warning: Both folders exist. Merging contents...")
    for source in sorted(p for p in old_path.rglob("*") if p.is_file()):
        target = new_path / source.relative_to(old_path)
        if not target.exists():
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(target))
    shutil.rmtree(old_path)
    print(f"  Merged and removed old folder: {old_code}")


# ── Commands ────────────────────────────────────────────────

def _valid_segment(kind: str, value: str) -> bool:
    if value and _SEGMENT.match(value):
        return True
    print(f"Invalid {kind} '{value}': use letters, digits, '-' and '_' only", file=sys.stderr)
    return False


async def create_tenant(
    tenant_id: str,
    domains: Optional[List[str]] = None,
    settings: Optional[MultisiteSettings] = None,
    tenancy: Optional[Tenancy] = None,
) -> int:
    settings = settings or default_settings
    configure_engine(settings.DATABASE_URL)
    tenancy = tenancy or Tenancy(settings)
    domains = domains or [f"{tenant_id}.test"]

    if not _valid_segment("tenant id", tenant_id):
        return 1
    try:
        tenancy.database_name(Tenant(id=tenant_id))
    except TenancyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    planned = [(domain, *infer_view_name_and_code(domain)) for domain in domains]
    for domain, _, code in planned:
        if not _valid_segment(f"view code for '{domain}'", code):
            return 1

    async with get_session_factory()() as db:
        tenants = TenantRepository(db)
        views = TenantViewRepository(db)

        if await tenants.get(tenant_id) is not None:
            print(f"Tenant '{tenant_id}' already exists!", file=sys.stderr)
            return 1
        for domain in domains:
            if await views.domain_exists(domain):
                print(f"View with domain '{domain}' already exists!", file=sys.stderr)
                return 1

        tenant = await tenants.create(tenant_id)
        print(f"Tenant '{tenant_id}' created.")

        for domain, name, code in planned:
            await _add_view(db, tenant, domain, name, code, settings)
        await db.commit()

    await tenancy.create_database(tenant)
    print(f"Tenant '{tenant_id}' setup complete!")
    return 0


async def _add_view(db, tenant: Tenant, domain: str, name: str, code: str, settings: MultisiteSettings) -> None:
    await DomainRepository(db).first_or_create(tenant.id, domain)
    await TenantViewRepository(db).create(
        tenant_id=tenant.id,
        name=name,
        domain=domain,
        code=code,
    )
    create_view_folders(settings, tenant.id, code)
    print(f"  ✓ View '{name}' ({code}) created for {domain}")


async def manage_view(
    tenant_id: str,
    domain: str,
    name: Optional[str] = None,
    code: Optional[str] = None,
    update: bool = False,
    switch: bool = False,
    settings: Optional[MultisiteSettings] = None,
) -> int:
    settings = settings or default_settings
    configure_engine(settings.DATABASE_URL)

    if code is not None and not _valid_segment("view code", code):
        return 1

    async with get_session_factory()() as db:
        tenant = await TenantRepository(db).get(tenant_id)
        if tenant is None:
            print(f"Tenant '{tenant_id}' not found!", file=sys.stderr)
            return 1

        if update:
            status = await _update_view(db, domain, name, code, switch, settings)
        else:
            status = await _create_view(db, tenant, domain, name, code, settings)
        if status == 0:
            await db.commit()
        return status


async def _create_view(db, tenant: Tenant, domain: str, name: Optional[str], code: Optional[str],
                       settings: MultisiteSettings) -> int:
    if await TenantViewRepository(db).domain_exists(domain):
        print(f"View with domain '{domain}' already exists! Use --update to modify it.", file=sys.stderr)
        return 1

    name = name or infer_view_name(domain)
    code = code or name
    if not _valid_segment("view code", code):
        return 1
    await DomainRepository(db).first_or_create(tenant.id, domain)
    await TenantViewRepository(db).create(tenant_id=tenant.id, name=name, domain=domain, code=code)
    create_view_folders(settings, tenant.id, code)
    print(f"✓ View '{name}' ({code}) added to tenant '{tenant.id}' for domain: {domain}")
    return 0


async def _update_view(db, domain: str, name: Optional[str], code: Optional[str], switch: bool,
                       settings: MultisiteSettings) -> int:
    views = TenantViewRepository(db)
    view = await views.get_by_domain(domain)
    if view is None:
        print(f"View with domain '{domain}' not found!", file=sys.stderr)
        return 1
    if not name and not code:
        print("Please provide --name and/or --code option", file=sys.stderr)
        return 1

    if name:
        print(f"  Updated name: {view.name} → {name}")
        view.name = name

    old_code = view.code
    if code and code != old_code:
        if switch:
            print(f"  Switch-only: skipping folder rename for {old_code} → {code}")
        else:
            rename_view_folder(settings, view.tenant_id, old_code, code)
        view.code = code
        print(f"  Updated code: {old_code} → {code}")

    await views.save(view)

    if code and not switch:
        create_view_folders(settings, view.tenant_id, code)

    print(f"✓ View updated for domain: {domain}")
    return 0


# ── Entry point ─────────────────────────────────────────────

async def _run(coro) -> int:
    try:
        return await coro
    except (TenancyError, SQLAlchemyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await close_db()


def _cmd_init_db(args: argparse.Namespace) -> int:
    asyncio.run(init_db.main())
    return 0


def _cmd_tenant_create(args: argparse.Namespace) -> int:
    domains = args.domains or ([args.domain] if args.domain else None)
    return asyncio.run(_run(create_tenant(args.id, domains)))


def _cmd_tenant_view(args: argparse.Namespace) -> int:
    return asyncio.run(_run(manage_view(
        args.tenant_id,
        args.domain,
        name=args.name,
        code=args.code,
        update=args.update,
        switch=args.switch,
    )))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="multisite", description="Multisite management commands")
    sub = parser.add_subparsers(dest="command", required=True)

    init_parser = sub.add_parser("init-db", help="Create central database tables")
    init_parser.set_defaults(func=_cmd_init_db)

    create = sub.add_parser("tenant:create", help="Create a new tenant with one or more views")
    create.add_argument("id", help="Tenant id")
    create.add_argument("--domains", nargs="+", default=[], help="Domains to create views for (lapp.test admin.lapp.test)")
    create.add_argument("--domain", help="Single domain, creates one view")
    create.set_defaults(func=_cmd_tenant_create)

    view = sub.add_parser("tenant:view", help="Add or update a view for a tenant")
    view.add_argument("tenant_id")
    view.add_argument("domain", help="Domain for the view")
    view.add_argument("--name", help="View name (inferred from the domain when adding)")
    view.add_argument("--code", help="View code (defaults to name)")
    view.add_argument("--update", action="store_true", help="Update an existing view")
    view.add_argument("--switch", action="store_true", help="Switch view mapping only, no folder changes")
    view.set_defaults(func=_cmd_tenant_view)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
