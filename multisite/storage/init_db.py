# Copyright (c) 2026 Multisite Contributors. All Rights Reserved.

"""
Database Initialization — Create central tables from ORM metadata.
"""

import asyncio
from typing import Optional

from multisite.core.config import MultisiteSettings, settings as default_settings
from multisite.storage.database import configure_engine, create_all_tables, close_db

# Ensure models are imported so Base.metadata knows about them
import multisite.storage.models  # noqa: F401


async def main(settings: Optional[MultisiteSettings] = None):
    """Create all central tables."""
    configure_engine((settings or default_settings).DATABASE_URL)
    print("[init_db] Creating tables...")
    try:
        await create_all_tables()
    finally:
        await close_db()
    print("[init_db] Done.")


if __name__ == "__main__":
    asyncio.run(main())
