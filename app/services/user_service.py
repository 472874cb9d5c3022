"""
app/services/user_service.py

Purpose: Account data management

- Creates the tenant + user pair behind a new account
- Enforces unique email and phone
- User retrieval by id, email and (tolerant) phone
"""

from app.db.mongo import get_users_collection, get_tenants_collection
from app.core.exceptions import ConflictError
from app.core.logging import get_logger, LogContext
from utils.constants import TENANT_DEFAULTS
from utils.phone_utils import phone_variants
from utils.time_utils import minutes_ago
from datetime import datetime
from pymongo.errors import DuplicateKeyError
from typing import Optional, Dict, Any, Tuple
import uuid

logger = get_logger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


async def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    """
    Retrieves a user by account id.

    Returns:
        User document or None if not found
    """
    users = get_users_collection()
    return await users.find_one({"id": user_id})


async def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    users = get_users_collection()
    return await users.find_one({"email": email.strip().lower()})


async def get_user_by_phone(phone: str) -> Optional[Dict[str, Any]]:
    """
    Finds a user whose stored phone matches any known variant of `phone`.
    """
    variants = phone_variants(phone)
    if not variants:
        return None

    users = get_users_collection()
    return await users.find_one({"phone": {"$in": variants}})


async def get_recent_user_by_phone(phone: str, window_minutes: int) -> Optional[Dict[str, Any]]:
    """
    Most recently created user for `phone` within the last `window_minutes`.
    """
    variants = phone_variants(phone)
    if not variants:
        return None

    users = get_users_collection()
    return await users.find_one(
        {
            "phone": {"$in": variants},
            "created_at": {"$gte": minutes_ago(window_minutes)}
        },
        sort=[("created_at", -1)]
    )


async def create_account(
    name: str,
    email: str,
    phone: Optional[str] = None
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Creates a personal tenant and its first user.

    Args:
        name: Display name
        email: Login email (stored lowercase)
        phone: Optional phone, normalized by the caller

    Returns:
        (user, tenant) documents

    Raises:
        ConflictError: If the email or phone is already registered
    """
    email = email.strip().lower()

    with LogContext(channel_identity=phone or "-"):
        if await get_user_by_email(email):
            raise ConflictError("This email is already in use")

        if phone and await get_user_by_phone(phone):
            raise ConflictError("This phone is already in use")

        now = datetime.utcnow()
        tenant = {
            "id": new_id(),
            "name": f"{name} - Personal",
            **TENANT_DEFAULTS,
            "created_at": now,
        }

        user = {
            "id": new_id(),
            "name": name,
            "email": email,
            "role": "CLIENT",
            "tenant_id": tenant["id"],
            "created_at": now,
        }
        # Omitted rather than null so the sparse unique index ignores it
        if phone:
            user["phone"] = phone

        await get_tenants_collection().insert_one(tenant)
        try:
            await get_users_collection().insert_one(user)
        except DuplicateKeyError as e:
            # Lost a race against a concurrent signup with the same email/phone
            await get_tenants_collection().delete_one({"id": tenant["id"]})
            raise ConflictError("This email or phone is already in use") from e

        logger.info(
            "Account created",
            extra={"user_id": user["id"]}
        )

    return user, tenant
