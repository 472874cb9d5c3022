"""
app/api/onboarding.py

Purpose: Web endpoints of the onboarding flow

- Called by the /onboarding web page, one endpoint per step
- Every endpoint carries the onboarding token; each success returns the
  next token, which the page must use for the following step
- Errors are rendered by app.core.errors
"""

from fastapi import APIRouter, Query

from app.onboarding.handlers.account import handle_create_account
from app.onboarding.handlers.category import handle_create_category
from app.onboarding.handlers.completion import handle_complete_onboarding
from app.onboarding.handlers.group import handle_create_group
from app.onboarding.steps import get_progress_message, get_step_metadata, next_step
from app.onboarding.validator import validate_session
from app.schemas.onboarding import (
    CompleteOnboardingRequest,
    CompleteOnboardingResponse,
    CreateAccountRequest,
    CreateAccountResponse,
    CreateCategoryRequest,
    CreateCategoryResponse,
    CreateGroupRequest,
    CreateGroupResponse,
)
from app.schemas.response import ONBOARDING_ERROR_RESPONSES
from app.schemas.session import SessionView

router = APIRouter(prefix="/onboarding", responses=ONBOARDING_ERROR_RESPONSES)


@router.get("/session", response_model=SessionView)
async def get_onboarding_session(token: str = Query(..., description="Onboarding token")):
    """
    Lets the web page resume at the right step.
    """
    session = validate_session(token)
    return SessionView(
        channel_identity=session.channel_identity,
        application_identity=session.application_identity,
        step=session.step,
        page_step=get_step_metadata(session.step).page_step,
        next_step=next_step(session.step),
        expires_at=session.expires_at,
        progress=get_progress_message(session.step),
    )


@router.post("/create-account", response_model=CreateAccountResponse)
async def create_account(body: CreateAccountRequest):
    return await handle_create_account(
        name=body.name,
        email=body.email,
        phone=body.phone,
        onboarding_token=body.onboarding_token
    )


@router.post("/create-group", response_model=CreateGroupResponse)
async def create_group(body: CreateGroupRequest):
    return await handle_create_group(
        onboarding_token=body.onboarding_token,
        name=body.name,
        group_type=body.type
    )


@router.post("/create-category", response_model=CreateCategoryResponse)
async def create_category(body: CreateCategoryRequest):
    return await handle_create_category(
        onboarding_token=body.onboarding_token,
        name=body.name,
        color=body.color,
        group_id=body.group_id
    )


@router.post("/complete", response_model=CompleteOnboardingResponse)
async def complete_onboarding(body: CompleteOnboardingRequest):
    return await handle_complete_onboarding(onboarding_token=body.onboarding_token)
