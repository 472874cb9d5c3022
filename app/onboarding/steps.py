"""
app/onboarding/steps.py

Purpose: Defines the onboarding steps

- Closed set of step values carried in onboarding tokens
- Explicit total order table (single source of truth for "forward")
- Metadata for each step (display name, web page step number)
"""

from enum import Enum
from typing import Dict, Optional
from dataclasses import dataclass


class OnboardingStep(str, Enum):
    """
    Progress marker of an onboarding session.
    Values are wire-visible and case-sensitive.
    """

    STARTED = "started"
    ACCOUNT_CREATED = "account_created"
    GROUP_CREATED = "group_created"
    CATEGORY_CREATED = "category_created"
    COMPLETED = "completed"


# Total order of steps. Lookups only; never compare step strings.
STEP_ORDER: Dict[OnboardingStep, int] = {
    OnboardingStep.STARTED: 0,
    OnboardingStep.ACCOUNT_CREATED: 1,
    OnboardingStep.GROUP_CREATED: 2,
    OnboardingStep.CATEGORY_CREATED: 3,
    OnboardingStep.COMPLETED: 4,
}

_STEPS_BY_POSITION = {position: step for step, position in STEP_ORDER.items()}


@dataclass
class StepMetadata:
    """
    Presentation data for a step, used by the web page and WhatsApp replies.
    """
    name: OnboardingStep
    display_name: str
    page_step: int  # Step shown on the onboarding web page (1-3, 4 = return screen)
    total_page_steps: int = 3
    next_action: str = ""


STEP_METADATA: Dict[OnboardingStep, StepMetadata] = {
    OnboardingStep.STARTED: StepMetadata(
        name=OnboardingStep.STARTED,
        display_name="Create account",
        page_step=1,
        next_action="create your account"
    ),
    OnboardingStep.ACCOUNT_CREATED: StepMetadata(
        name=OnboardingStep.ACCOUNT_CREATED,
        display_name="First group",
        page_step=2,
        next_action="create your first group"
    ),
    OnboardingStep.GROUP_CREATED: StepMetadata(
        name=OnboardingStep.GROUP_CREATED,
        display_name="First category",
        page_step=3,
        next_action="create your first category"
    ),
    OnboardingStep.CATEGORY_CREATED: StepMetadata(
        name=OnboardingStep.CATEGORY_CREATED,
        display_name="Back to WhatsApp",
        page_step=4,
        next_action="finish the signup"
    ),
    OnboardingStep.COMPLETED: StepMetadata(
        name=OnboardingStep.COMPLETED,
        display_name="Completed",
        page_step=4
    ),
}


def parse_step(value: str) -> OnboardingStep:
    """
    Parses a wire step value.

    Raises:
        ValueError: If the value is not one of the five known steps
    """
    return OnboardingStep(value)


def is_forward_transition(from_step: OnboardingStep, to_step: OnboardingStep) -> bool:
    """
    True if `to_step` is strictly later than `from_step`.
    """
    return STEP_ORDER[to_step] > STEP_ORDER[from_step]


def next_step(step: OnboardingStep) -> Optional[OnboardingStep]:
    """
    Returns the step right after `step`, or None after completion.
    """
    return _STEPS_BY_POSITION.get(STEP_ORDER[step] + 1)


def get_step_metadata(step: OnboardingStep) -> StepMetadata:
    return STEP_METADATA[step]


def get_progress_message(step: OnboardingStep) -> str:
    """
    Generates a progress message for the current step (e.g., "Step 2 of 3").
    """
    metadata = get_step_metadata(step)
    if metadata.page_step > metadata.total_page_steps:
        return "✅ All steps done"
    return f"📍 Step {metadata.page_step} of {metadata.total_page_steps}"
