"""
app/services/group_service.py

Purpose: Group and category persistence for onboarding

- Creates groups with the creating user as OWNER
- Creates categories inside a tenant's group
- Looks up the latest group/category of a tenant
"""

from datetime import datetime
from typing import Any, Dict, Optional

from app.db.mongo import (
    get_groups_collection,
    get_group_members_collection,
    get_categories_collection,
)
from app.core.exceptions import ResourceNotFoundError
from app.core.logging import get_logger
from app.services.user_service import new_id
from utils.constants import ONBOARDING_GROUP_DESCRIPTION

logger = get_logger(__name__)


async def create_group(user: Dict[str, Any], name: str, group_type: str = "PERSONAL") -> Dict[str, Any]:
    """
    Creates a group in the user's tenant and makes the user its owner.

    Not idempotent: calling twice creates two groups.
    """
    now = datetime.utcnow()
    group = {
        "id": new_id(),
        "name": name,
        "type": group_type,
        "description": ONBOARDING_GROUP_DESCRIPTION,
        "tenant_id": user["tenant_id"],
        "created_at": now,
    }
    await get_groups_collection().insert_one(group)

    await get_group_members_collection().insert_one({
        "id": new_id(),
        "user_id": user["id"],
        "group_id": group["id"],
        "role": "OWNER",
        "created_at": now,
    })

    logger.info(f"Group created: {group['id']}", extra={"user_id": user["id"]})
    return group


async def get_group(group_id: str) -> Optional[Dict[str, Any]]:
    return await get_groups_collection().find_one({"id": group_id})


async def get_latest_group(tenant_id: str) -> Optional[Dict[str, Any]]:
    return await get_groups_collection().find_one(
        {"tenant_id": tenant_id},
        sort=[("created_at", -1)]
    )


async def resolve_tenant_group(tenant_id: str, group_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Returns the requested group, or the tenant's latest one when none is given.

    Raises:
        ResourceNotFoundError: Group missing or owned by another tenant
    """
    if group_id:
        group = await get_group(group_id)
        if not group or group["tenant_id"] != tenant_id:
            raise ResourceNotFoundError("Group not found")
        return group

    group = await get_latest_group(tenant_id)
    if not group:
        raise ResourceNotFoundError("Group not found")
    return group


async def create_category(user: Dict[str, Any], group: Dict[str, Any], name: str, color: str) -> Dict[str, Any]:
    category = {
        "id": new_id(),
        "name": name,
        "color": color,
        "tenant_id": user["tenant_id"],
        "group_id": group["id"],
        "created_at": datetime.utcnow(),
    }
    await get_categories_collection().insert_one(category)

    logger.info(f"Category created: {category['id']}", extra={"user_id": user["id"]})
    return category


async def get_latest_category(tenant_id: str) -> Optional[Dict[str, Any]]:
    return await get_categories_collection().find_one(
        {"tenant_id": tenant_id},
        sort=[("created_at", -1)]
    )
