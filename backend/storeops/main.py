# /storeops/main.py

import os
import uvicorn
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from storeops.config.settings import settings
from storeops.utils.lifecycle import lifespan
from storeops.utils.rate_limiter import limiter
from storeops.routes import public, webhooks

app = FastAPI(
    title="Store Operations Assistant",
    version="1.0.0",
    description="WhatsApp assistant that updates prices, creates discounts and reports sales on Shopify",
    lifespan=lifespan,
    openapi_url=f"/api/{settings.api_version}/openapi.json" if settings.environment != "production" else None,
    docs_url=f"/api/{settings.api_version}/docs" if settings.environment != "production" else None,
    redoc_url=None,
)

# --- Rate Limiting ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- API Routers ---
app.include_router(public.router)
app.include_router(webhooks.router, prefix=f"/api/{settings.api_version}/webhooks")

# --- Main Entry Point for Uvicorn (for local development) ---
if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "127.0.0.1")

    uvicorn.run(
        "storeops.main:app",
        host=host,
        port=port,
        reload=settings.environment == "development",
    )
