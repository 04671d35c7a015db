# /storeops/utils/rate_limiter.py

from slowapi import Limiter
from slowapi.util import get_remote_address
from storeops.config.settings import settings

# Shared limiter for the webhook routes; main.py registers it on the app.

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"]
)
