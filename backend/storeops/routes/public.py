# /storeops/routes/public.py

from datetime import datetime, timezone
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from prometheus_client import generate_latest

from storeops.config.settings import settings
from storeops.services.shopify_service import commerce_service
from storeops.services.whatsapp_service import whatsapp_service

# Public endpoints that need no authentication: service info, health checks
# and Prometheus metrics.

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Store Operations Assistant",
        "version": "1.0.0",
        "status": "operational",
        "mode": commerce_service.mode,
        "environment": settings.environment,
    }


@router.get("/health", summary="Basic Health Check")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc),
        "services": {
            "commerce": commerce_service.mode,
            "ai": "configured" if settings.openai_api_key else "not_configured",
            "whatsapp": "configured" if whatsapp_service.is_configured else "not_configured",
        },
    }


@router.get("/metrics", tags=["Monitoring"])
async def metrics():
    """Prometheus metrics endpoint."""
    return PlainTextResponse(generate_latest(), media_type="text/plain")
