#!/usr/bin/env python3
"""
Register a shop owner so they can provision employees.

Usage: python scripts/seed_shop.py <shop_owner_id> [name]
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config.settings import settings


def build_store():
    if settings.record_store_backend == "sql":
        from app.config.database import create_engine, create_session_factory
        from app.services.sql_record_store import SqlRecordStore

        engine = create_engine(settings)
        return SqlRecordStore(create_session_factory(engine)), engine

    from app.services.firebase import init_firebase_app
    from app.services.record_store import FirebaseRecordStore

    return FirebaseRecordStore(init_firebase_app(settings), settings.root_namespace), None


async def main(shop_owner_id: str, name: str = None):
    store, engine = build_store()
    try:
        if await store.shop_exists(shop_owner_id):
            print(f"Shop {shop_owner_id} already exists, skipping...")
            return
        await store.add_shop(shop_owner_id, name)
        print(f"Registered shop {shop_owner_id}")
    finally:
        if engine is not None:
            await engine.dispose()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    asyncio.run(main(*sys.argv[1:3]))
