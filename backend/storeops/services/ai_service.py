# /storeops/services/ai_service.py

import re
import json
import logging
from typing import Optional, Union
from openai import AsyncOpenAI
from pydantic import ValidationError

from storeops.config.settings import settings
from storeops.config.prompts import INTENT_SYSTEM_PROMPT
from storeops.models.intent import Intent, IntentAction, ParseFailure
from storeops.utils.metrics import ai_requests_counter, intent_counter

# This service turns a free-text store-owner message into a structured Intent
# with a single chat completion. Anything that goes wrong on the way (no
# client, API error, unusable reply) ends up as the "unknown" intent.

logger = logging.getLogger(__name__)

CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)
ACTIONS = {a.value for a in IntentAction}


def parse_intent_payload(raw: Optional[str]) -> Union[Intent, ParseFailure]:
    """Reads a model reply as an Intent, or says why it could not."""
    text = (raw or "").strip()
    if not text:
        return ParseFailure("empty_response")

    fenced = CODE_FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError, RecursionError):
        return ParseFailure("invalid_json", raw=text)

    if not isinstance(data, dict):
        return ParseFailure("not_an_object", raw=text)

    action = data.get("action")
    if not isinstance(action, str) or action.strip().lower() not in ACTIONS:
        return ParseFailure("unknown_action", raw=text)

    try:
        return Intent.model_validate({**data, "action": action.strip().lower()})
    except ValidationError as e:
        return ParseFailure(f"invalid_fields: {e.error_count()} errors", raw=text)


class AIService:
    def __init__(self, api_key: Optional[str], model: str, max_tokens: int,
                 client: Optional[AsyncOpenAI] = None):
        self.model = model
        self.max_tokens = max_tokens
        if client is not None:
            self.openai_client = client
        elif api_key:
            self.openai_client = AsyncOpenAI(api_key=api_key)
        else:
            self.openai_client = None
            logger.warning("No OPENAI_API_KEY set. Every message will be treated as an unknown intent.")

    async def extract_intent(self, text: str) -> Intent:
        """Never raises: a ParseFailure is collapsed to the unknown intent here."""
        result = await self.classify(text)
        if isinstance(result, ParseFailure):
            logger.warning(f"Intent extraction fell back to unknown: {result.reason}")
            intent = Intent.unknown()
        else:
            intent = result
        intent_counter.labels(action=intent.action.value).inc()
        return intent

    async def classify(self, text: str) -> Union[Intent, ParseFailure]:
        if not self.openai_client:
            return ParseFailure("no_ai_client")
        try:
            raw = await self._generate_openai_response(text)
            ai_requests_counter.labels(model=self.model, status="success").inc()
        except Exception as e:
            logger.error(f"OpenAI intent call failed: {e}")
            ai_requests_counter.labels(model=self.model, status="error").inc()
            return ParseFailure("model_call_failed")
        return parse_intent_payload(raw)

    async def _generate_openai_response(self, text: str) -> str:
        response = await self.openai_client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": INTENT_SYSTEM_PROMPT},
                {"role": "user", "content": text},
            ],
            max_tokens=self.max_tokens,
        )
        choices = response.choices or []
        if not choices or not choices[0].message:
            return ""
        return (choices[0].message.content or "").strip()


# Globally accessible instance
ai_service = AIService(settings.openai_api_key, settings.openai_model, settings.openai_max_tokens)
