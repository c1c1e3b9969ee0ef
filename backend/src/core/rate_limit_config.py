"""
Rate limiting policy and types.

This module holds what limits apply; enforcement lives in rate_limiter.py.
Authenticated requests are limited per user, signup/signin per client IP.
"""
from dataclasses import dataclass
from enum import Enum


class OperationType(Enum):
    """Operation type for rate limiting."""

    READ = "read"
    WRITE = "write"
    AUTH = "auth"  # signup/signin, limited per client IP


@dataclass
class RateLimitConfig:
    """Rate limit configuration for an operation type."""

    requests_per_minute: int
    requests_per_day: int


@dataclass
class RateLimitResult:
    """Result of a rate limit check with all info needed for headers."""

    allowed: bool
    limit: int  # Max requests in current window
    remaining: int  # Requests remaining in current window
    reset: int  # Unix timestamp when window resets
    retry_after: int  # Seconds until retry allowed (0 if allowed)


class RateLimitExceededError(Exception):
    """Raised when rate limit is exceeded."""

    def __init__(self, result: RateLimitResult) -> None:
        self.result = result
        super().__init__("Rate limit exceeded")


RATE_LIMITS: dict[OperationType, RateLimitConfig] = {
    OperationType.READ: RateLimitConfig(requests_per_minute=180, requests_per_day=4000),
    OperationType.WRITE: RateLimitConfig(requests_per_minute=120, requests_per_day=4000),
    OperationType.AUTH: RateLimitConfig(requests_per_minute=10, requests_per_day=100),
}

# Daily counters are shared per pool; auth attempts are counted separately.
DAILY_POOLS: dict[OperationType, str] = {
    OperationType.READ: "general",
    OperationType.WRITE: "general",
    OperationType.AUTH: "auth",
}

AUTH_PATH_PREFIX = "/auth/"


def get_operation_type(method: str, path: str) -> OperationType:
    """Determine operation type from HTTP method and path."""
    if path.startswith(AUTH_PATH_PREFIX):
        return OperationType.AUTH
    if method in ("GET", "HEAD"):
        return OperationType.READ
    return OperationType.WRITE
