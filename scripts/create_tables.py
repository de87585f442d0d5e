#!/usr/bin/env python3
"""
Create the record store tables for the sql backend.

Usage: RECORD_STORE_BACKEND=sql DATABASE_URL=... python scripts/create_tables.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import text

from app.config.database import create_engine
from app.config.settings import settings
from app.models import Base


async def create_tables():
    """Create all record store tables."""
    print(f"Connecting to database: {settings.database_url[:50]}...")
    engine = create_engine(settings)

    async with engine.begin() as conn:
        if settings.database_schema:
            print(f"\n[1/2] Ensuring schema {settings.database_schema} exists...")
            await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {settings.database_schema}"))

        print("\n[2/2] Creating tables...")
        await conn.run_sync(Base.metadata.create_all)

    await engine.dispose()
    print("\nAll tables created.")


if __name__ == "__main__":
    asyncio.run(create_tables())
