"""
app/onboarding/handlers/category.py

Handles: STEP 3 – First category

- Requires a session at group_created with a bound account
- Creates the category in the given group (or the tenant's latest group)
- Advances the session to category_created
"""

import re
from typing import Any, Dict, Optional

from app.core.exceptions import ValidationError
from app.core.logging import get_logger, LogContext
from app.onboarding.handlers.common import require_step, require_text, load_session_user
from app.onboarding.steps import OnboardingStep
from app.onboarding.transitions import advance_session
from app.onboarding.validator import validate_session
from app.services.audit_service import record_audit
from app.services.group_service import create_category, resolve_tenant_group
from utils.constants import AUDIT_CATEGORY_CREATED
from utils.time_utils import now_ms

logger = get_logger(__name__)

COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


async def handle_create_category(
    onboarding_token: str,
    name: str,
    color: str,
    group_id: Optional[str] = None,
    now: Optional[int] = None
) -> Dict[str, Any]:
    """
    Returns:
        Dict with category_id, group_id and updated_token

    Raises:
        InvalidSessionError, PreconditionFailedError, ValidationError,
        ResourceNotFoundError
    """
    now = now_ms() if now is None else now

    session = validate_session(onboarding_token, now=now)
    require_step(session, OnboardingStep.GROUP_CREATED)

    name = require_text(name, "name")
    color = require_text(color, "color")
    if not COLOR_PATTERN.match(color):
        raise ValidationError("color must be a hex value like #FF6B6B", details={"field": "color"})

    with LogContext(channel_identity=session.channel_identity, step=session.step.value):
        user = await load_session_user(session)
        group = await resolve_tenant_group(user["tenant_id"], group_id)
        category = await create_category(user, group, name=name, color=color)

        await record_audit(
            AUDIT_CATEGORY_CREATED,
            entity="CATEGORY",
            entity_id=category["id"],
            tenant_id=user["tenant_id"],
            user_id=user["id"],
            details={"name": name, "color": color, "onboarding": True}
        )

        updated_token = advance_session(
            onboarding_token,
            step=OnboardingStep.CATEGORY_CREATED,
            now=now
        )

    return {
        "message": "Category created successfully",
        "category_id": category["id"],
        "group_id": group["id"],
        "updated_token": updated_token,
    }
