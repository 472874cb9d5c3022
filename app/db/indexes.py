"""
app/db/indexes.py

Purpose: Database index management

- Creates unique and performance indexes
- Ensures fast lookups and data integrity

Groups have no per-user uniqueness: two resumptions of the same
onboarding token may each create one.
"""

from pymongo import ASCENDING, DESCENDING

from app.db.mongo import (
    ALL_COLLECTIONS,
    get_collection,
    get_users_collection,
    get_groups_collection,
    get_group_members_collection,
    get_categories_collection,
    get_audit_logs_collection,
)
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        logger.info("Creating database indexes...")

        for name in ALL_COLLECTIONS:
            await get_collection(name).create_index("id", unique=True, name=f"{name}_id_unique")
        logger.debug("Created unique id indexes")

        # ==============================================
        # USERS COLLECTION INDEXES
        # ==============================================
        users = get_users_collection()

        await users.create_index("email", unique=True, name="email_unique")
        logger.debug("Created unique index on users.email")

        # Phone is optional for web-only signups
        await users.create_index("phone", unique=True, sparse=True, name="phone_unique")
        logger.debug("Created unique sparse index on users.phone")

        # Recent-signup lookup when a return message carries only a token suffix
        await users.create_index(
            [("phone", ASCENDING), ("created_at", DESCENDING)],
            name="phone_recent_idx"
        )

        # ==============================================
        # GROUPS / CATEGORIES / MEMBERS
        # ==============================================
        await get_groups_collection().create_index(
            [("tenant_id", ASCENDING), ("created_at", DESCENDING)],
            name="group_tenant_recent_idx"
        )
        await get_categories_collection().create_index(
            [("tenant_id", ASCENDING), ("created_at", DESCENDING)],
            name="category_tenant_recent_idx"
        )
        await get_group_members_collection().create_index(
            [("group_id", ASCENDING), ("user_id", ASCENDING)],
            name="member_group_user_idx"
        )
        logger.debug("Created tenant indexes on groups, categories and members")

        # ==============================================
        # AUDIT LOGS
        # ==============================================
        await get_audit_logs_collection().create_index(
            [("tenant_id", ASCENDING), ("created_at", DESCENDING)],
            name="audit_tenant_recent_idx"
        )
        logger.debug("Created index on audit_logs.tenant_id + created_at")

        logger.info("✅ All database indexes created successfully")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


async def drop_all_indexes():
    """
    Drops all custom indexes (keeps _id index).
    Use with caution! Only for maintenance/migration.
    """
    try:
        logger.warning("Dropping all database indexes...")

        for name in ALL_COLLECTIONS:
            await get_collection(name).drop_indexes()

        logger.info("✅ All indexes dropped successfully")

    except Exception as e:
        logger.error(f"Failed to drop indexes: {str(e)}", exc_info=True)
        raise
