"""
app/flow/dispatcher.py

Purpose: Central message dispatcher

- Receives normalized messages from the webhook
- Resolves the sender's account by phone
- Routes onboarding start / return messages, menu otherwise
- Sends responses via Twilio
"""

from typing import Dict, Any, Optional

from app.schemas.webhook import InboundMessage
from app.services.user_service import get_user_by_phone
from app.services.twilio_service import twilio_service
from app.flow.handlers.onboarding import handle_onboarding_start, handle_onboarding_return
from app.onboarding.extractor import is_return_message
from app.core.logging import get_logger, LogContext
from utils.constants import GENERIC_ERROR_MESSAGE, HELP_MESSAGE, ONBOARDING_KEYWORD, PROMOTIONAL_MESSAGE

logger = get_logger(__name__)


async def dispatch_message(message: InboundMessage) -> Dict[str, Any]:
    """
    Main dispatcher for incoming WhatsApp messages

    Args:
        message: Normalized message object

    Returns:
        Response dict
    """
    with LogContext(channel_identity=message.phone):
        logger.info(f"📨 Dispatching message {message.message_id}")

        try:
            user = await get_user_by_phone(message.phone)
            response = await route_message(message, user)
        except Exception as e:
            logger.error(f"❌ Dispatcher error: {e}", exc_info=True)
            await send_response(message.phone, {"message": GENERIC_ERROR_MESSAGE})
            return {"status": "error", "error": str(e)}

        await send_response(message.phone, response)
        return {"status": "success", "route": response.get("route")}


async def route_message(message: InboundMessage, user: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Picks the handler for a message.

    Return messages are checked before the keyword, since the return text may
    itself mention onboarding.
    """
    text = message.text or ""
    lower_text = text.lower()

    if is_return_message(text):
        logger.info("🔄 Onboarding return detected")
        response = await handle_onboarding_return(message.phone, text)
        response["route"] = "onboarding_return"
        return response

    if ONBOARDING_KEYWORD in lower_text:
        logger.info("🚀 Onboarding requested")
        response = await handle_onboarding_start(message.phone, user)
        response["route"] = "onboarding_start"
        return response

    if not user:
        logger.info("📤 Unknown sender, sending promotional message")
        return {"message": PROMOTIONAL_MESSAGE, "route": "promotional"}

    return {"message": HELP_MESSAGE, "route": "help"}


async def send_response(to_phone: str, response: Dict[str, Any]):
    """
    Sends a handler response via Twilio
    """
    message_text = response.get("message", "")

    if not message_text:
        logger.warning("⚠️ Empty response message")
        return

    result = await twilio_service.send_message(
        to_phone=to_phone,
        message=message_text,
        media_url=response.get("media_url")
    )

    if result["success"]:
        logger.info(f"✅ Reply sent: SID={result.get('message_sid', 'N/A')}")
    else:
        logger.error(f"❌ Failed to send reply: {result.get('error')}")
