"""
app/schemas/session.py

Purpose: Onboarding session schema

- The decoded contents of an onboarding token (never stored server-side)
- Maps Python attribute names to the token's wire claim names
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional

from app.onboarding.steps import OnboardingStep


class OnboardingSession(BaseModel):
    """
    Onboarding state carried inside a signed token.

    Timestamps are epoch milliseconds.
    """
    channel_identity: str = Field(..., alias="wa_user_id", min_length=1, description="WhatsApp phone that started the flow")
    application_identity: Optional[str] = Field(default=None, alias="user_id", description="Account id, bound by create-account")
    step: OnboardingStep
    issued_at: int = Field(..., alias="created_at")
    expires_at: int

    class Config:
        frozen = True
        populate_by_name = True

    def to_claims(self) -> Dict[str, Any]:
        """Wire claims for signing (absent identity is omitted, not null)."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def is_expired(self, now: int) -> bool:
        return now > self.expires_at

    def remaining_ms(self, now: int) -> int:
        return max(self.expires_at - now, 0)


class SessionView(BaseModel):
    """
    Session summary returned to the onboarding web page.
    """
    channel_identity: str
    application_identity: Optional[str] = None
    step: OnboardingStep
    page_step: int
    next_step: Optional[OnboardingStep] = None
    expires_at: int
    progress: str
