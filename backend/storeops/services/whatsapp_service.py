# /storeops/services/whatsapp_service.py

import re
import httpx
import logging
from typing import Optional

from storeops.config.settings import settings

# Sends replies back to the store owner through the WhatsApp Cloud API.
# Without credentials the reply is only logged, which is how mock-mode
# setups usually run.

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 4096


class WhatsAppService:
    def __init__(self, access_token: Optional[str], phone_id: Optional[str],
                 http_client: Optional[httpx.AsyncClient] = None):
        self.access_token = access_token
        self.phone_id = phone_id
        self.http_client = http_client or httpx.AsyncClient(timeout=15.0)
        self.base_url = "https://graph.facebook.com/v18.0"

    @property
    def is_configured(self) -> bool:
        return bool(self.access_token and self.phone_id)

    async def send_message(self, to_phone: str, message: str) -> Optional[str]:
        """Sends a text message. Returns the WhatsApp message id, or None if nothing was sent."""
        clean_phone = re.sub(r"[^\d+]", "", to_phone or "")
        if not clean_phone.startswith("+"):
            clean_phone = "+" + clean_phone.lstrip("+")

        if not self.is_configured:
            logger.info(f"WhatsApp not configured; reply to {clean_phone}: {message}")
            return None

        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": clean_phone,
            "type": "text",
            "text": {"body": message[:MAX_TEXT_LENGTH]},
        }
        return await self.send_whatsapp_request(payload)

    async def send_whatsapp_request(self, payload: dict) -> Optional[str]:
        to_phone = payload.get("to", "unknown")
        try:
            url = f"{self.base_url}/{self.phone_id}/messages"
            headers = {"Authorization": f"Bearer {self.access_token}", "Content-Type": "application/json"}
            response = await self.http_client.post(url, json=payload, headers=headers)

            if response.status_code == 200:
                message_id = (response.json().get("messages") or [{}])[0].get("id")
                logger.info(f"WhatsApp message sent to {to_phone}, wamid: {message_id}")
                return message_id

            error_message = "Unknown error"
            try:
                error_message = (response.json().get("error") or {}).get("message", error_message)
            except ValueError:
                pass
            logger.error(f"whatsapp_send_failed to {to_phone}: {response.status_code} - {error_message}")
            return None
        except httpx.HTTPError as e:
            logger.error(f"whatsapp_send_error to {to_phone}: {e}", exc_info=True)
            return None

    async def aclose(self):
        await self.http_client.aclose()


# Globally accessible instance
whatsapp_service = WhatsAppService(settings.whatsapp_access_token, settings.whatsapp_phone_id)
