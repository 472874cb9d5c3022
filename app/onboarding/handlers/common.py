"""
app/onboarding/handlers/common.py

Shared precondition checks for the session-bound handlers.
"""

from typing import Any, Dict

from app.core.exceptions import PreconditionFailedError, ResourceNotFoundError, ValidationError
from app.onboarding.steps import OnboardingStep
from app.schemas.session import OnboardingSession
from app.services.user_service import get_user_by_id


def require_step(session: OnboardingSession, required: OnboardingStep, needs_account: bool = True) -> None:
    """
    Each handler runs from exactly one step.

    Raises:
        PreconditionFailedError: Session is at another step, or has no bound
            account when one is needed
    """
    if session.step != required:
        raise PreconditionFailedError(
            f"This action requires the onboarding step '{required.value}'",
            required_step=required.value,
            current_step=session.step.value
        )

    if needs_account and not session.application_identity:
        raise PreconditionFailedError(
            "Create the account before continuing",
            required_step=OnboardingStep.ACCOUNT_CREATED.value,
            current_step=session.step.value
        )


def require_text(value, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required", details={"field": field})
    return str(value).strip()


async def load_session_user(session: OnboardingSession) -> Dict[str, Any]:
    user = await get_user_by_id(session.application_identity)
    if not user:
        raise ResourceNotFoundError("User not found")
    return user
