"""
app/schemas/response.py

Purpose: Error body shared by every endpoint
"""

from pydantic import BaseModel, Field
from typing import Optional, Any


class ErrorResponse(BaseModel):
    """
    Body of every non-2xx answer.
    """
    error: str = Field(..., description="Human readable message")
    code: str = Field(..., description="Stable machine code, e.g. INVALID_SESSION")
    details: Optional[Any] = Field(default=None, description="Extra context, e.g. required_step")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "This action requires the onboarding step 'group_created'",
                "code": "PRECONDITION_FAILED",
                "details": {"required_step": "group_created", "current_step": "started"}
            }
        }


# OpenAPI documentation for the errors an onboarding endpoint can answer with
ONBOARDING_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid or expired onboarding session"},
    404: {"model": ErrorResponse, "description": "Referenced record not found"},
    409: {"model": ErrorResponse, "description": "Wrong onboarding step or duplicate account"},
    422: {"model": ErrorResponse, "description": "Missing or malformed field"},
}
