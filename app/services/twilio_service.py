"""
app/services/twilio_service.py

Purpose: Twilio WhatsApp message sending

- Sends WhatsApp messages via the Twilio REST API
- Supports text messages and media
"""

import httpx
from typing import Dict, Any, Optional
from app.core.config import settings
from app.core.logging import get_logger
from utils.phone_utils import to_whatsapp_address

logger = get_logger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class TwilioService:
    """Service for sending WhatsApp messages via Twilio"""

    def __init__(self):
        self.account_sid = settings.TWILIO_ACCOUNT_SID
        self.auth_token = settings.TWILIO_AUTH_TOKEN
        self.whatsapp_number = settings.TWILIO_WHATSAPP_NUMBER  # whatsapp:+14155238886
        self.base_url = f"{TWILIO_API_BASE}/Accounts/{self.account_sid}"

    async def send_message(
        self,
        to_phone: str,
        message: str,
        media_url: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Sends a WhatsApp message via Twilio

        Args:
            to_phone: Recipient phone (+5511999999999 or whatsapp:+55...)
            message: Message text
            media_url: Optional media URL for images/files

        Returns:
            {
                "success": True/False,
                "message_sid": "SMxxx...",
                "error": "Optional error message"
            }
        """
        if not self.is_configured():
            logger.warning("Twilio not configured, message not sent")
            return {"success": False, "error": "Twilio not configured"}

        data = {
            "From": self.whatsapp_number,
            "To": to_whatsapp_address(to_phone),
            "Body": message
        }
        if media_url:
            data["MediaUrl"] = media_url

        logger.info(f"📤 Sending Twilio message to {data['To']}")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.base_url}/Messages.json",
                    data=data,
                    auth=(self.account_sid, self.auth_token),
                    timeout=10.0
                )
        except httpx.TimeoutException:
            logger.error("Twilio API timeout")
            return {"success": False, "error": "Twilio API timeout"}
        except httpx.RequestError as e:
            logger.error(f"Network error calling Twilio: {e}")
            return {"success": False, "error": "Network error connecting to Twilio"}

        if response.status_code in (200, 201):
            result = response.json()
            logger.info(f"✅ Message sent: SID={result.get('sid')}")
            return {
                "success": True,
                "message_sid": result.get("sid"),
                "status": result.get("status")
            }

        logger.error(f"❌ Twilio API error: {response.status_code} - {response.text}")
        return {
            "success": False,
            "error": f"Twilio API error: {response.status_code}"
        }

    def is_configured(self) -> bool:
        """Check if Twilio is properly configured"""
        return bool(
            self.account_sid
            and self.auth_token
            and self.whatsapp_number
            and self.account_sid != "your_twilio_sid"
        )


# Singleton instance
twilio_service = TwilioService()
