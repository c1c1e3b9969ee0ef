"""Redis-based rate limiter: sliding window per minute, fixed window per day."""
import logging
import time
import uuid

from core.rate_limit_config import (
    DAILY_POOLS,
    RATE_LIMITS,
    OperationType,
    RateLimitResult,
)
from core.redis import FIXED_WINDOW, SLIDING_WINDOW, RedisClient, get_redis_client

logger = logging.getLogger(__name__)

MINUTE_WINDOW_SECONDS = 60
DAY_WINDOW_SECONDS = 86400


def _allow_all(limit: int) -> RateLimitResult:
    """Permissive result used when Redis can't be consulted (fail open)."""
    return RateLimitResult(allowed=True, limit=limit, remaining=limit, reset=0, retry_after=0)


class RedisRateLimiter:
    """
    Checks requests against RATE_LIMITS.

    Buckets are keyed by an identity string ('user:42', 'ip:10.0.0.1') and the
    operation type. Each request must pass the per-minute window for its
    operation and the daily window of its pool (see DAILY_POOLS).
    """

    async def check(self, identity: str, operation_type: OperationType) -> RateLimitResult:
        """
        Check if request is allowed and return full rate limit info.

        Falls back to allowing requests if Redis is unavailable.
        """
        config = RATE_LIMITS[operation_type]

        redis_client = get_redis_client()
        if redis_client is None or not redis_client.is_connected:
            logger.warning("redis_unavailable", extra={"operation": "rate_limit"})
            return _allow_all(config.requests_per_minute)

        now = int(time.time())

        per_minute = await self._sliding_window(
            redis_client,
            f"rate:{identity}:{operation_type.value}:min",
            config.requests_per_minute,
            now,
        )
        if not per_minute.allowed:
            self._log_exceeded(identity, operation_type, "per_minute")
            return per_minute

        daily = await self._fixed_window(
            redis_client,
            f"rate:{identity}:daily:{DAILY_POOLS[operation_type]}",
            config.requests_per_day,
            now,
        )
        if not daily.allowed:
            self._log_exceeded(identity, operation_type, "daily")
            return daily

        # Per-minute numbers are the ones reported in headers
        return per_minute

    @staticmethod
    def _log_exceeded(identity: str, operation_type: OperationType, limit_type: str) -> None:
        logger.warning(
            "rate_limit_exceeded",
            extra={
                "identity": identity,
                "operation": operation_type.value,
                "limit_type": limit_type,
            },
        )

    @staticmethod
    async def _sliding_window(
        redis_client: RedisClient, key: str, limit: int, now: int,
    ) -> RateLimitResult:
        reply = await redis_client.run_script(
            SLIDING_WINDOW, key, now, MINUTE_WINDOW_SECONDS, limit, uuid.uuid4().hex,
        )
        if reply is None:
            return _allow_all(limit)

        allowed, remaining, retry_after = reply
        return RateLimitResult(
            allowed=bool(allowed),
            limit=limit,
            remaining=max(0, remaining),
            reset=now + MINUTE_WINDOW_SECONDS,
            retry_after=0 if allowed else max(1, retry_after),
        )

    @staticmethod
    async def _fixed_window(
        redis_client: RedisClient, key: str, limit: int, now: int,
    ) -> RateLimitResult:
        # Imprecise at window boundaries; fine for a daily cap
        reply = await redis_client.run_script(FIXED_WINDOW, key, limit, DAY_WINDOW_SECONDS)
        if reply is None:
            return _allow_all(limit)

        allowed, remaining, ttl, retry_after = reply
        return RateLimitResult(
            allowed=bool(allowed),
            limit=limit,
            remaining=max(0, remaining),
            reset=now + (ttl if ttl > 0 else DAY_WINDOW_SECONDS),
            retry_after=0 if allowed else max(1, retry_after),
        )


rate_limiter = RedisRateLimiter()
