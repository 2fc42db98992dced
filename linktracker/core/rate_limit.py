"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from linktracker.core.config import get_settings

settings = get_settings()


def get_real_client_ip(request: Request) -> str:
    """Get the real client IP address, handling proxies.

    Checks the Cloudflare, X-Forwarded-For and X-Real-IP headers before
    falling back to the direct client address.
    """
    connecting_ip = request.headers.get("CF-Connecting-IP")
    if connecting_ip:
        return connecting_ip.strip()

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # client, proxy1, proxy2 - the first one is the original client
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return get_remote_address(request)


# Decorators need the limiter at import time, so it is configured from
# the process-wide settings rather than per application.
limiter = Limiter(
    key_func=get_real_client_ip,
    enabled=settings.rate_limit_enabled,
    storage_uri=settings.rate_limit_storage_uri,
    strategy="fixed-window",
)

# High limit for redirect endpoint - this is the hot path
RATE_LIMIT_REDIRECT = "1000/minute"

# Link creation - prevent spam/abuse
RATE_LIMIT_CREATE_LINK = "60/hour"

# Admin API endpoints - moderate limit
RATE_LIMIT_API = "100/minute"
