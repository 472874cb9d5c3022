"""
app/onboarding/handlers/completion.py

Handles: STEP 4 – Back to WhatsApp

- Requires a session at category_created
- Advances the session to completed (no step exists after it)
- Builds the message and wa.me links the user follows back to WhatsApp
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

from app.core.config import settings
from app.core.logging import get_logger, LogContext
from app.onboarding.extractor import build_return_message
from app.onboarding.handlers.common import require_step, load_session_user
from app.onboarding.steps import OnboardingStep
from app.onboarding.transitions import advance_session
from app.onboarding.validator import validate_session
from app.services.audit_service import record_audit
from utils.constants import AUDIT_ONBOARDING_COMPLETED
from utils.time_utils import now_ms

logger = get_logger(__name__)


def build_whatsapp_links(return_message: str) -> Dict[str, str]:
    """
    Deep links that open WhatsApp with the return message pre-filled.
    """
    number = settings.WHATSAPP_CONTACT_NUMBER
    text = quote(return_message)
    return {
        "mobile": f"whatsapp://send?phone={number}&text={text}",
        "web": f"https://wa.me/{number}/?text={text}",
    }


async def handle_complete_onboarding(onboarding_token: str, now: Optional[int] = None) -> Dict[str, Any]:
    """
    Returns:
        Dict with updated_token, return_message and whatsapp_links

    Raises:
        InvalidSessionError, PreconditionFailedError, ResourceNotFoundError
    """
    now = now_ms() if now is None else now

    session = validate_session(onboarding_token, now=now)
    require_step(session, OnboardingStep.CATEGORY_CREATED)

    with LogContext(channel_identity=session.channel_identity, step=session.step.value):
        user = await load_session_user(session)

        await record_audit(
            AUDIT_ONBOARDING_COMPLETED,
            entity="USER",
            entity_id=user["id"],
            tenant_id=user["tenant_id"],
            user_id=user["id"],
            details={"channel_identity": session.channel_identity}
        )

        updated_token = advance_session(
            onboarding_token,
            step=OnboardingStep.COMPLETED,
            now=now
        )
        logger.info("Onboarding completed")

    return_message = build_return_message(updated_token)

    return {
        "message": "Onboarding completed",
        "updated_token": updated_token,
        "return_message": return_message,
        "whatsapp_links": build_whatsapp_links(return_message),
    }
