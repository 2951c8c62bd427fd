"""Rate limiting middleware using SlowAPI."""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from heritage_content.config import get_settings

settings = get_settings()


def get_client_key(request: Request) -> str:
    """
    Get rate limit key from the client address.

    Honors the first ``X-Forwarded-For`` hop when running behind a proxy.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{get_remote_address(request)}"


# Memory storage per process; point at Redis to share limits across workers
limiter = Limiter(
    key_func=get_client_key,
    storage_uri=settings.rate_limit_storage_uri,
    strategy="fixed-window",
    enabled=settings.rate_limit_enabled,
)


def rate_limit_general():
    """Rate limit for read endpoints."""
    return limiter.limit(f"{settings.rate_limit_per_minute}/minute")


def rate_limit_admin():
    """Rate limit for mutating admin endpoints."""
    return limiter.limit(f"{max(settings.rate_limit_per_minute // 4, 1)}/minute")
