# /storeops/routes/webhooks.py

import json
import asyncio
import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Query
from fastapi.responses import JSONResponse, PlainTextResponse

from storeops.config.settings import settings
from storeops.services.message_service import message_service
from storeops.utils.dependencies import verify_webhook_signature
from storeops.utils.metrics import response_time_histogram
from storeops.utils.rate_limiter import limiter

# WhatsApp Cloud API webhook endpoints. Each incoming text message is handled
# in its own task so the webhook can acknowledge immediately.

router = APIRouter(
    tags=["Webhooks"]
)

log = structlog.get_logger(__name__)

# Keeps references to running handler tasks until they finish.
_background_tasks: set = set()


def schedule_message(message: dict) -> asyncio.Task:
    task = asyncio.create_task(message_service.process_webhook_message(message))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task


def as_list(items) -> list:
    """Dict items of a webhook array; anything else in the payload is skipped."""
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


@router.get("/whatsapp")
async def verify_whatsapp_webhook(
    hub_mode: str = Query(None, alias="hub.mode"),
    hub_verify_token: str = Query(None, alias="hub.verify_token"),
    hub_challenge: str = Query(None, alias="hub.challenge")
):
    """WhatsApp webhook verification (GET request)."""
    if (hub_mode == "subscribe" and settings.whatsapp_verify_token
            and hub_verify_token == settings.whatsapp_verify_token):
        log.info("WhatsApp webhook verification successful.")
        return PlainTextResponse(hub_challenge)
    log.error("WhatsApp webhook verification failed.")
    raise HTTPException(status_code=403, detail="Forbidden")


@router.post("/whatsapp")
@limiter.limit(f"{settings.rate_limit_per_minute}/minute")
async def handle_whatsapp_webhook(
    request: Request,
    verified_body: bytes = Depends(verify_webhook_signature)
):
    """Schedules one handler per incoming message; status updates are ignored."""
    with response_time_histogram.labels(endpoint="whatsapp_webhook").time():
        try:
            data = json.loads(verified_body.decode())
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError):
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        if not isinstance(data, dict):
            raise HTTPException(status_code=400, detail="Invalid JSON body")

        scheduled = 0
        for entry in as_list(data.get("entry")):
            for change in as_list(entry.get("changes")):
                if change.get("field") != "messages":
                    log.debug("Ignoring non-message change", change=change)
                    continue

                value = change.get("value")
                if not isinstance(value, dict):
                    continue
                metadata = value.get("metadata")
                incoming_phone_id = metadata.get("phone_number_id") if isinstance(metadata, dict) else None
                if incoming_phone_id and settings.whatsapp_phone_id and incoming_phone_id != settings.whatsapp_phone_id:
                    log.info("Ignored event for different phone ID.", incoming_id=incoming_phone_id)
                    continue

                for message in as_list(value.get("messages")):
                    log.info("Processing incoming message", wamid=message.get("id"), type=message.get("type"))
                    schedule_message(message)
                    scheduled += 1

        return JSONResponse({"status": "success", "scheduled": scheduled})
