"""
app/services/twilio_service.py

Purpose: Twilio SMS REST client

- Sends SMS messages via the Twilio Messages API (startup notification)
- Downloads media attached to inbound messages (contact cards)
- Replies to inbound messages go back as TwiML, not through this client
"""

import httpx
from typing import Dict, Any, Optional
from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger
from utils.constants import STARTUP_NOTIFICATION_MESSAGE

logger = get_logger(__name__)


class TwilioService:
    """Service for talking to the Twilio REST API"""

    def __init__(self):
        self.account_sid = settings.TWILIO_ACCOUNT_SID
        self.api_key_sid = settings.TWILIO_API_KEY_SID
        self.api_key_secret = settings.TWILIO_API_KEY_SECRET
        self.server_number = settings.SERVER_NUMBER
        self.base_url = f"{settings.TWILIO_BASE_URL}/Accounts/{self.account_sid}"

    @property
    def auth(self):
        return (self.api_key_sid, self.api_key_secret)

    async def send_message(self, to_phone: str, message: str) -> Dict[str, Any]:
        """
        Sends an SMS via Twilio

        Args:
            to_phone: Recipient phone (+12065550100)
            message: Message text

        Returns:
            {
                "success": True/False,
                "message_sid": "SMxxx...",
                "error": "Optional error message"
            }
        """
        try:
            url = f"{self.base_url}/Messages.json"

            data = {
                "From": self.server_number,
                "To": to_phone,
                "Body": message
            }

            logger.info(f"📤 Sending Twilio message to {to_phone}")

            async with httpx.AsyncClient() as client:
                response = await client.post(
                    url,
                    data=data,
                    auth=self.auth,
                    timeout=10.0
                )

                if response.status_code in [200, 201]:
                    result = response.json()
                    logger.info(f"✅ Message sent: SID={result.get('sid')}")

                    return {
                        "success": True,
                        "message_sid": result.get("sid"),
                        "status": result.get("status")
                    }
                else:
                    logger.error(f"❌ Twilio API error: {response.status_code} - {response.text}")

                    return {
                        "success": False,
                        "error": f"Twilio API error: {response.status_code}"
                    }

        except httpx.TimeoutException:
            logger.error("Twilio API timeout")
            return {
                "success": False,
                "error": "Twilio API timeout"
            }
        except httpx.HTTPError as e:
            logger.error(f"Error sending Twilio message: {e}", exc_info=True)
            return {
                "success": False,
                "error": str(e)
            }

    async def fetch_media(self, media_url: str) -> str:
        """
        Downloads an inbound message attachment as text.

        Twilio redirects media URLs to short-lived storage links, so
        redirects are followed.

        Raises:
            ExternalServiceError: If the download fails
        """
        logger.info("📥 Downloading message attachment")

        try:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                response = await client.get(
                    media_url,
                    auth=self.auth if self.is_configured() else None,
                    timeout=10.0
                )
                response.raise_for_status()
                return response.text

        except httpx.HTTPError as e:
            logger.error(f"Failed to download attachment: {e}")
            raise ExternalServiceError("Could not download attachment", details={"url": media_url}) from e

    def is_configured(self) -> bool:
        """Check if Twilio is properly configured"""
        return bool(
            self.account_sid
            and self.api_key_sid
            and self.api_key_secret
            and self.server_number
        )


# Singleton instance
twilio_service = TwilioService()


async def send_startup_notification() -> Optional[Dict[str, Any]]:
    """
    Texts CLIENT_NUMBER that the server is up, when configured to.

    Returns:
        The send result, or None if the notification is disabled
    """
    if not settings.STARTUP_NOTIFICATION or not settings.CLIENT_NUMBER:
        return None

    if not twilio_service.is_configured():
        logger.warning("⚠️ Twilio not configured, skipping startup notification")
        return None

    return await twilio_service.send_message(settings.CLIENT_NUMBER, STARTUP_NOTIFICATION_MESSAGE)
