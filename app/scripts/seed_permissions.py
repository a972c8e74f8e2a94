"""
Seed Permissions and Groups Script
This script populates the permissions and groups tables using the config.
Can be run manually or as part of a nightly job:

    python -m app.scripts.seed_permissions
"""

import asyncio
import logging

from app.config.permissions_config import PERMISSION_MATRIX
from app.database.store import Store
from app.database.supabase_client import SupabaseClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def seed_permissions(store: Store) -> dict:
    """Seed permissions from config; returns name -> id"""
    logger.info("Seeding permissions...")
    created_count = 0
    updated_count = 0
    ids = {}

    for perm in PERMISSION_MATRIX["permissions"]:
        existing = await store.find("permissions", name=perm["name"], active=True)
        if existing:
            await store.update("permissions", existing[0]["id"], {"description": perm["description"]})
            ids[perm["name"]] = existing[0]["id"]
            updated_count += 1
            logger.debug(f"Updated permission: {perm['name']}")
        else:
            row = await store.insert("permissions", {
                "name": perm["name"],
                "description": perm["description"],
                "active": True
            })
            ids[perm["name"]] = row["id"]
            created_count += 1
            logger.debug(f"Created permission: {perm['name']}")

    logger.info(f"Permissions seeded: {created_count} created, {updated_count} updated")
    return ids


async def seed_groups(store: Store, permission_ids: dict) -> int:
    """Seed default groups and grant them their permissions"""
    logger.info("Seeding groups...")
    granted = 0

    for group in PERMISSION_MATRIX["groups"]:
        existing = await store.find("groups", name=group["name"], active=True)
        if existing:
            group_id = existing[0]["id"]
        else:
            row = await store.insert("groups", {
                "name": group["name"],
                "description": group["description"],
                "active": True
            })
            group_id = row["id"]
            logger.debug(f"Created group: {group['name']}")

        rows = [
            {"group_id": group_id, "permission_id": permission_ids[name]}
            for name in group["permissions"]
        ]
        inserted = await store.insert_ignore_duplicates(
            "group_permissions", rows, on_conflict="group_id,permission_id"
        )
        granted += len(inserted)

    logger.info(f"Groups seeded: {granted} new grants")
    return granted


async def main():
    """Main seeding function"""
    logger.info("Starting permissions and groups seeding...")
    store = Store(await SupabaseClient.get_service_client())
    permission_ids = await seed_permissions(store)
    await seed_groups(store, permission_ids)
    logger.info("Seeding completed")


if __name__ == "__main__":
    asyncio.run(main())
