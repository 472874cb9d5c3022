"""
app/api/webhook.py

Purpose: WhatsApp webhook endpoint

- Receives incoming messages from Twilio (form data)
- Normalizes the payload
- Passes control to the flow dispatcher
- Always answers with empty TwiML (replies go out via the REST API)
"""

from fastapi import APIRouter, Form
from fastapi.responses import Response
from typing import Optional

from app.core.logging import get_logger
from app.flow.dispatcher import dispatch_message
from app.schemas.webhook import parse_twilio_message

logger = get_logger(__name__)
router = APIRouter()

EMPTY_TWIML = "<?xml version=\"1.0\" encoding=\"UTF-8\"?><Response></Response>"


def twiml_response() -> Response:
    return Response(content=EMPTY_TWIML, media_type="application/xml")


@router.post("/webhook")
async def webhook_handler(
    From: str = Form(...),
    Body: Optional[str] = Form(None),
    ProfileName: Optional[str] = Form(None),
    MessageSid: Optional[str] = Form(None),
    MediaUrl0: Optional[str] = Form(None),
):
    """
    Twilio WhatsApp webhook.

    Twilio retries on non-2xx answers, so failures are logged and still
    acknowledged with TwiML.
    """
    logger.info(f"📱 Twilio webhook received from {From}")

    message = parse_twilio_message(
        from_number=From,
        body=Body,
        profile_name=ProfileName,
        message_sid=MessageSid,
        media_url=MediaUrl0
    )

    if not message.phone:
        logger.warning(f"Ignoring webhook with unusable sender: {From}")
        return twiml_response()

    result = await dispatch_message(message)
    if result["status"] != "success":
        logger.error(f"Webhook dispatch failed: {result.get('error')}")

    return twiml_response()


@router.get("/webhook")
async def webhook_verification():
    """
    Webhook verification endpoint (for platforms that require GET verification)
    """
    return {"status": "ok", "message": "Webhook endpoint is active"}
