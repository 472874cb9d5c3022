"""
app/onboarding/validator.py

Purpose: Onboarding session validation

- Decodes a token through the codec
- Re-checks the embedded absolute deadline after the envelope passes
- Collapses every failure into InvalidSessionError
"""

from typing import Optional

from app.core.exceptions import InvalidSessionError, OnboardingTokenError, TokenExpiredError
from app.core.logging import get_logger, mask_token
from app.onboarding import token_codec
from app.schemas.session import OnboardingSession
from utils.time_utils import now_ms

logger = get_logger(__name__)


def validate_session(token: Optional[str], now: Optional[int] = None) -> OnboardingSession:
    """
    Validates an onboarding token and returns its session.

    Args:
        token: Token string as echoed back by the client
        now: Current epoch milliseconds (defaults to the wall clock)

    Returns:
        The decoded OnboardingSession

    Raises:
        InvalidSessionError: For a malformed, forged or expired token. The
            specific reason is only logged and chained as __cause__.
    """
    now = now_ms() if now is None else now

    try:
        session = token_codec.decode(token, now=now)
        if session.is_expired(now):
            raise TokenExpiredError("Onboarding session deadline passed")
    except OnboardingTokenError as e:
        logger.warning(
            f"Onboarding token rejected: {e.code}",
            extra={"token_suffix": mask_token(token if isinstance(token, str) else None)}
        )
        raise InvalidSessionError() from e

    return session


def is_valid_session(token: Optional[str], now: Optional[int] = None) -> bool:
    try:
        validate_session(token, now=now)
    except InvalidSessionError:
        return False
    return True
