"""
app/flow/handlers/onboarding.py

Handles: WhatsApp side of the onboarding flow

- "onboarding" keyword: issues a token and sends the web signup link
- "back from signup" message: recovers the token and answers with the
  signup outcome
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

from app.core.config import settings
from app.core.exceptions import InvalidSessionError, TokenNotFoundError
from app.core.logging import get_logger, LogContext
from app.onboarding import token_codec
from app.onboarding.extractor import extract_token, is_full_token
from app.onboarding.steps import OnboardingStep, get_step_metadata, get_progress_message, next_step
from app.onboarding.validator import validate_session
from app.schemas.session import OnboardingSession
from app.services.group_service import get_latest_category, get_latest_group
from app.services.user_service import get_recent_user_by_phone, get_user_by_id
from utils.constants import (
    DEFAULT_CATEGORY_NAME,
    DEFAULT_GROUP_NAME,
    EXISTING_USER_ONBOARDING_MESSAGE,
    NEW_USER_ONBOARDING_MESSAGE,
    ONBOARDING_COMPLETED_MESSAGE,
    ONBOARDING_PENDING_MESSAGE,
    SESSION_INVALID_MESSAGE,
    SIGNUP_NOT_FOUND_MESSAGE,
    TOKEN_NOT_FOUND_MESSAGE,
)
from utils.phone_utils import normalize_phone, phone_variants

logger = get_logger(__name__)


def build_onboarding_url(token: str, phone: str, existing: bool = False) -> str:
    url = f"{settings.APP_URL.rstrip('/')}/onboarding?token={token}&phone={quote(phone)}"
    if existing:
        url += "&existing=true"
    return url


async def handle_onboarding_start(phone: str, user: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Starts (or restarts, for a known user) the guided signup.

    Args:
        phone: Sender phone; becomes the session's channel identity
        user: Existing account for this phone, if any

    Returns:
        Response dict with the message to send and the issued token
    """
    with LogContext(channel_identity=phone, step=OnboardingStep.STARTED.value):
        token = token_codec.issue(phone)
        url = build_onboarding_url(token, phone, existing=user is not None)

        if user:
            logger.info("Onboarding restarted for existing user")
            message = EXISTING_USER_ONBOARDING_MESSAGE.format(name=user.get("name", ""), onboarding_url=url)
        else:
            logger.info("Onboarding started for new user")
            message = NEW_USER_ONBOARDING_MESSAGE.format(onboarding_url=url)

    return {"message": message, "token": token}


async def _completed_summary(user: Dict[str, Any]) -> str:
    group = await get_latest_group(user["tenant_id"])
    category = await get_latest_category(user["tenant_id"])
    return ONBOARDING_COMPLETED_MESSAGE.format(
        group_name=group["name"] if group else DEFAULT_GROUP_NAME,
        category_name=category["name"] if category else DEFAULT_CATEGORY_NAME
    )


async def _reply_for_session(session: OnboardingSession) -> str:
    if session.step == OnboardingStep.COMPLETED and session.application_identity:
        user = await get_user_by_id(session.application_identity)
        if user:
            return await _completed_summary(user)
        return SIGNUP_NOT_FOUND_MESSAGE

    metadata = get_step_metadata(session.step)
    upcoming = next_step(session.step)
    return ONBOARDING_PENDING_MESSAGE.format(
        step_name=metadata.display_name,
        next_action=metadata.next_action or "continue",
        progress=get_progress_message(upcoming or session.step)
    )


async def handle_onboarding_return(phone: str, text: str) -> Dict[str, Any]:
    """
    Answers a "back from signup" message.

    A complete token is validated and must belong to this sender. The web page
    only pastes the token's last characters, which cannot be verified, so for
    a suffix the sender's channel identity is trusted instead and the account
    created for it in the recent window is looked up.
    """
    with LogContext(channel_identity=phone):
        try:
            fragment = extract_token(text)
        except TokenNotFoundError:
            logger.info("Return message without a token")
            return {"message": TOKEN_NOT_FOUND_MESSAGE}

        if is_full_token(fragment):
            try:
                session = validate_session(fragment)
            except InvalidSessionError:
                return {"message": SESSION_INVALID_MESSAGE}

            if normalize_phone(session.channel_identity) not in phone_variants(phone):
                logger.warning("Return token belongs to another channel identity")
                return {"message": SESSION_INVALID_MESSAGE}

            return {"message": await _reply_for_session(session), "step": session.step.value}

        user = await get_recent_user_by_phone(phone, settings.RECENT_SIGNUP_WINDOW_MINUTES)
        if not user:
            logger.info("No recent signup for this phone")
            return {"message": SIGNUP_NOT_FOUND_MESSAGE}

        logger.info("Onboarding return matched a recent signup", extra={"user_id": user["id"]})
        return {"message": await _completed_summary(user)}
