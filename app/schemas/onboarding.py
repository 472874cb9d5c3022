"""
app/schemas/onboarding.py

Purpose: Request/response bodies of the onboarding web endpoints

- Accept both snake_case and the web page's camelCase field names
"""

from pydantic import BaseModel, Field
from typing import Dict, Optional


class CreateAccountRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    onboarding_token: Optional[str] = Field(default=None, alias="onboardingToken")

    class Config:
        populate_by_name = True


class CreateGroupRequest(BaseModel):
    name: Optional[str] = None
    type: str = "PERSONAL"
    onboarding_token: str = Field(..., alias="onboardingToken")

    class Config:
        populate_by_name = True


class CreateCategoryRequest(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None
    group_id: Optional[str] = Field(default=None, alias="groupId")
    onboarding_token: str = Field(..., alias="onboardingToken")

    class Config:
        populate_by_name = True


class CompleteOnboardingRequest(BaseModel):
    onboarding_token: str = Field(..., alias="onboardingToken")

    class Config:
        populate_by_name = True


class CreateAccountResponse(BaseModel):
    message: str
    user_id: str
    tenant_id: str
    updated_token: Optional[str] = None


class CreateGroupResponse(BaseModel):
    message: str
    group_id: str
    updated_token: str


class CreateCategoryResponse(BaseModel):
    message: str
    category_id: str
    group_id: str
    updated_token: str


class CompleteOnboardingResponse(BaseModel):
    message: str
    updated_token: str
    return_message: str
    whatsapp_links: Dict[str, str]
