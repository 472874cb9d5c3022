"""
app/onboarding/handlers/account.py

Handles: STEP 1 – Create account

- Validates the onboarding token when one is supplied
- Creates the personal tenant and the user
- Binds the new account id into the session (step -> account_created)
"""

from typing import Any, Dict, Optional

from app.core.exceptions import PreconditionFailedError
from app.core.logging import get_logger, LogContext, mask_token
from app.onboarding.handlers.common import require_step, require_text
from app.onboarding.steps import OnboardingStep
from app.onboarding.transitions import advance_session
from app.onboarding.validator import validate_session
from app.services.audit_service import record_audit
from app.services.user_service import create_account
from utils.constants import AUDIT_USER_ONBOARDING_START
from utils.phone_utils import normalize_phone
from utils.time_utils import now_ms

logger = get_logger(__name__)


async def handle_create_account(
    name: str,
    email: str,
    phone: Optional[str] = None,
    onboarding_token: Optional[str] = None,
    now: Optional[int] = None
) -> Dict[str, Any]:
    """
    Creates an account, optionally as part of a WhatsApp-started onboarding.

    Without a token this is a plain web signup and `updated_token` is None.

    Returns:
        Dict with user_id, tenant_id and updated_token

    Raises:
        InvalidSessionError: Token supplied but invalid or expired
        PreconditionFailedError: Session already past the account step
        ValidationError: Missing name or email
        ConflictError: Email or phone already registered
    """
    now = now_ms() if now is None else now

    session = None
    if onboarding_token:
        session = validate_session(onboarding_token, now=now)
        require_step(session, OnboardingStep.STARTED, needs_account=False)
        if session.application_identity:
            raise PreconditionFailedError(
                "This onboarding session already has an account",
                required_step=OnboardingStep.STARTED.value,
                current_step=session.step.value
            )

    name = require_text(name, "name")
    email = require_text(email, "email")

    # The phone that started the flow on WhatsApp wins over a blank form field
    phone = normalize_phone(phone) if phone else None
    if not phone and session:
        phone = normalize_phone(session.channel_identity)

    with LogContext(channel_identity=phone or "-"):
        logger.info(
            "Creating onboarding account",
            extra={"token_suffix": mask_token(onboarding_token)}
        )

        user, tenant = await create_account(name=name, email=email, phone=phone)

        await record_audit(
            AUDIT_USER_ONBOARDING_START,
            entity="USER",
            entity_id=user["id"],
            tenant_id=tenant["id"],
            user_id=user["id"],
            details={"step": OnboardingStep.ACCOUNT_CREATED.value, "has_phone": bool(phone)}
        )

        updated_token = None
        if session:
            updated_token = advance_session(
                onboarding_token,
                application_identity=user["id"],
                step=OnboardingStep.ACCOUNT_CREATED,
                now=now
            )

    return {
        "message": "Account created successfully",
        "user_id": user["id"],
        "tenant_id": tenant["id"],
        "updated_token": updated_token,
    }
