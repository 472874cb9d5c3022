"""
app/onboarding/handlers/group.py

Handles: STEP 2 – First group

- Requires a session at account_created with a bound account
- Creates the group with the user as OWNER
- Advances the session to group_created

Two calls with the same account_created token both succeed and create two
groups; the token protocol has no mutual exclusion.
"""

from typing import Any, Dict, Optional

from app.core.exceptions import ValidationError
from app.core.logging import get_logger, LogContext
from app.onboarding.handlers.common import require_step, require_text, load_session_user
from app.onboarding.steps import OnboardingStep
from app.onboarding.transitions import advance_session
from app.onboarding.validator import validate_session
from app.services.audit_service import record_audit
from app.services.group_service import create_group
from utils.constants import AUDIT_GROUP_CREATED, GROUP_TYPES
from utils.time_utils import now_ms

logger = get_logger(__name__)


async def handle_create_group(
    onboarding_token: str,
    name: str,
    group_type: str = "PERSONAL",
    now: Optional[int] = None
) -> Dict[str, Any]:
    """
    Returns:
        Dict with group_id and updated_token

    Raises:
        InvalidSessionError, PreconditionFailedError, ValidationError,
        ResourceNotFoundError
    """
    now = now_ms() if now is None else now

    session = validate_session(onboarding_token, now=now)
    require_step(session, OnboardingStep.ACCOUNT_CREATED)

    name = require_text(name, "name")
    group_type = (group_type or "PERSONAL").upper()
    if group_type not in GROUP_TYPES:
        raise ValidationError(f"Unknown group type: {group_type}", details={"field": "type"})

    with LogContext(channel_identity=session.channel_identity, step=session.step.value):
        user = await load_session_user(session)
        group = await create_group(user, name=name, group_type=group_type)

        await record_audit(
            AUDIT_GROUP_CREATED,
            entity="GROUP",
            entity_id=group["id"],
            tenant_id=user["tenant_id"],
            user_id=user["id"],
            details={"name": name, "type": group_type, "onboarding": True}
        )

        updated_token = advance_session(
            onboarding_token,
            step=OnboardingStep.GROUP_CREATED,
            now=now
        )
        logger.info(f"Onboarding group '{name}' created")

    return {
        "message": "Group created successfully",
        "group_id": group["id"],
        "updated_token": updated_token,
    }
