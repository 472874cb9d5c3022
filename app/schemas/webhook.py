"""
app/schemas/webhook.py

Purpose: WhatsApp webhook payload schema and parser

- Validates incoming Twilio messages
- Normalizes them into InboundMessage
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from utils.phone_utils import normalize_phone


class InboundMessage(BaseModel):
    """
    Normalized inbound WhatsApp message
    """
    phone: str = Field(..., description="Sender phone in +digits form")
    name: str = Field(..., description="Sender's display name")
    text: str = Field(default="", description="Message text content")
    message_id: str = Field(..., description="Unique message identifier")
    media_url: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "phone": "+5511999999999",
                "name": "Maria",
                "text": "onboarding",
                "message_id": "SM1234567890"
            }
        }


def parse_twilio_message(
    from_number: str,
    body: Optional[str],
    profile_name: Optional[str] = None,
    message_sid: Optional[str] = None,
    media_url: Optional[str] = None
) -> InboundMessage:
    """
    Parses Twilio WhatsApp webhook payload

    Twilio format (form data):
    - From: whatsapp:+5511999999999
    - Body: message text
    - ProfileName: User's name
    - MessageSid: SM...
    - MediaUrl0: first attachment, if any
    """
    phone = normalize_phone(from_number)

    return InboundMessage(
        phone=phone,
        name=profile_name or phone,
        text=body or "",
        message_id=message_sid or f"twilio_{datetime.utcnow().timestamp()}",
        media_url=media_url
    )
