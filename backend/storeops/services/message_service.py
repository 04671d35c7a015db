# /storeops/services/message_service.py

import logging
from typing import Optional, Dict, Any

from storeops.config import strings
from storeops.services.ai_service import AIService, ai_service
from storeops.services.dispatcher import ActionDispatcher
from storeops.services.shopify_service import commerce_service
from storeops.services.whatsapp_service import WhatsAppService, whatsapp_service
from storeops.utils.metrics import message_counter

# The per-message boundary: text in, one reply out. Every exception raised
# while handling a message is caught here, logged, and turned into the
# generic apology, so one failed message never affects the next.

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, ai: AIService, dispatcher: ActionDispatcher, sender: Optional[WhatsAppService] = None):
        self.ai = ai
        self.dispatcher = dispatcher
        self.sender = sender

    async def handle_message(self, text: Optional[str]) -> Optional[str]:
        """Returns the reply for a message, or None when the message is blank."""
        clean_text = (text or "").strip()
        if not clean_text:
            message_counter.labels(status="ignored").inc()
            return None

        try:
            intent = await self.ai.extract_intent(clean_text)
            logger.info(f"Routing message as '{intent.action.value}'")
            reply = await self.dispatcher.dispatch(intent, clean_text)
            message_counter.labels(status="success").inc()
            return reply
        except Exception as e:
            logger.exception(f"Handler error: {e}")
            message_counter.labels(status="error").inc()
            return strings.ERROR_GENERAL

    async def process_webhook_message(self, message: Dict[str, Any]) -> Optional[str]:
        """Handles one WhatsApp webhook message and sends the reply back to its sender."""
        try:
            from_number = message.get("from")
            if not from_number:
                logger.warning("Webhook message missing 'from'.")
                return None

            reply = await self.handle_message(get_message_text(message))
            if reply is None:
                logger.info(f"Ignoring empty message {message.get('id')}")
                return None

            if self.sender:
                await self.sender.send_message(from_number, reply)
            return reply
        except Exception as e:
            logger.error(f"Error in process_webhook_message: {e}", exc_info=True)
            return None


def get_message_text(message: Dict[str, Any]) -> str:
    """Only plain text messages carry a command; everything else reads as empty."""
    if message.get("type") != "text":
        return ""
    return (message.get("text") or {}).get("body", "") or ""


# Globally accessible instance
message_service = MessageService(ai_service, ActionDispatcher(commerce_service), whatsapp_service)
