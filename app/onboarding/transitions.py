"""
app/onboarding/transitions.py

Purpose: Onboarding state transitions

- Validates the incoming token before anything else
- Merges a step advance and/or a newly bound account id
- Preserves issued_at, expires_at and the channel identity verbatim
- Re-signs the merged session as a new token
"""

from typing import Optional, Union

from app.core.exceptions import IdentityRebindError, StepRegressionError
from app.core.logging import get_logger, LogContext
from app.onboarding import token_codec
from app.onboarding.steps import OnboardingStep, is_forward_transition, parse_step
from app.onboarding.validator import validate_session
from utils.time_utils import now_ms

logger = get_logger(__name__)


def advance_session(
    token: str,
    application_identity: Optional[str] = None,
    step: Optional[Union[OnboardingStep, str]] = None,
    now: Optional[int] = None
) -> str:
    """
    Produces a new token reflecting a step advance or a bound identity.

    The old token stays valid until its own expiry; nothing is revoked.

    Args:
        token: Current onboarding token
        application_identity: Account id to bind (only when none is bound yet)
        step: Target step, strictly later than the current one
        now: Current epoch milliseconds (defaults to the wall clock)

    Returns:
        Newly signed token with the same deadline as the original

    Raises:
        InvalidSessionError: Token failed validation (nothing is merged)
        StepRegressionError: Target step is not strictly later
        IdentityRebindError: Session already bound to a different account
        ValueError: Unknown step value
    """
    now = now_ms() if now is None else now
    session = validate_session(token, now=now)

    updates = {}

    if application_identity is not None:
        if session.application_identity is None:
            updates["application_identity"] = application_identity
        elif session.application_identity != application_identity:
            raise IdentityRebindError()

    if step is not None:
        target = parse_step(step) if isinstance(step, str) else step
        if not is_forward_transition(session.step, target):
            logger.warning(
                f"Rejected onboarding step change {session.step.value} -> {target.value} "
                f"for {session.channel_identity}"
            )
            raise StepRegressionError(session.step.value, target.value)
        updates["step"] = target

    # issued_at, expires_at and channel_identity are never in `updates`
    merged = session.model_copy(update=updates)

    with LogContext(channel_identity=merged.channel_identity, step=merged.step.value):
        logger.info(
            "Onboarding session advanced",
            extra={"user_id": merged.application_identity}
        )

    return token_codec.encode(merged, now=now)
