# /storeops/utils/lifecycle.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from storeops.utils.logging import setup_logging
from storeops.services.shopify_service import commerce_service
from storeops.services.whatsapp_service import whatsapp_service
from storeops.config.settings import settings

# This file manages the application's lifespan: logging setup on startup and
# closing the outbound HTTP clients on shutdown.

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    setup_logging()

    logger.info(f"Application starting up in {commerce_service.mode} mode...")
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is missing; only keyword hints will be returned.")
    if not whatsapp_service.is_configured:
        logger.warning("WhatsApp credentials are missing; replies will be logged, not sent.")

    yield  # Application is now running

    logger.info("Application shutting down...")
    await commerce_service.aclose()
    await whatsapp_service.aclose()
