"""FastAPI dependencies for injection."""
from fastapi import Depends, Request

from core.auth import get_current_user
from core.config import get_settings
from core.rate_limit_config import (
    RateLimitExceededError,
    RateLimitResult,
    get_operation_type,
)
from core.rate_limiter import rate_limiter
from db.session import get_async_session
from models.user import User


async def _enforce(request: Request, identity: str) -> RateLimitResult:
    """
    Check the limit for this request and stash the result for the headers middleware.

    Raises RateLimitExceededError for 429 responses (handled by exception handler).
    """
    operation_type = get_operation_type(request.method, request.url.path)
    result = await rate_limiter.check(identity, operation_type)

    if not result.allowed:
        raise RateLimitExceededError(result)

    request.state.rate_limit_info = {
        "limit": result.limit,
        "remaining": result.remaining,
        "reset": result.reset,
    }
    return result


async def check_rate_limit(
    request: Request,
    current_user: User = Depends(get_current_user),
) -> RateLimitResult:
    """Rate limit dependency for authenticated endpoints (per user)."""
    return await _enforce(request, f"user:{current_user.id}")


async def check_auth_rate_limit(request: Request) -> RateLimitResult:
    """Rate limit dependency for signup/signin (per client IP)."""
    client_host = request.client.host if request.client else "unknown"
    return await _enforce(request, f"ip:{client_host}")


__all__ = [
    "check_auth_rate_limit",
    "check_rate_limit",
    "get_async_session",
    "get_current_user",
    "get_settings",
]
