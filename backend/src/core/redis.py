"""Redis client for rate limiting, with connection pooling and graceful fallback."""
import logging
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import NoScriptError, RedisError

logger = logging.getLogger(__name__)

SLIDING_WINDOW = "sliding_window"
FIXED_WINDOW = "fixed_window"

# Per-minute limits. Entries are scored by timestamp in a sorted set, so the
# window slides with every request instead of resetting on the minute.
#   KEYS[1]  bucket key
#   ARGV     now, window_seconds, limit, request_id
#   returns  {allowed, remaining, retry_after}
_SLIDING_WINDOW_LUA = """
local key = KEYS[1]
local now = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
local limit = tonumber(ARGV[3])

redis.call('ZREMRANGEBYSCORE', key, 0, now - window)
local used = redis.call('ZCARD', key)
if used >= limit then
    local oldest = redis.call('ZRANGE', key, 0, 0, 'WITHSCORES')
    local wait = window
    if oldest[2] then
        wait = math.max(1, math.ceil(oldest[2] + window - now))
    end
    return {0, 0, wait}
end

redis.call('ZADD', key, now, now .. ':' .. ARGV[4])
redis.call('EXPIRE', key, window)
return {1, limit - used - 1, 0}
"""

# Daily limits. A plain counter whose expiry is set by the first hit.
#   KEYS[1]  bucket key
#   ARGV     limit, window_seconds
#   returns  {allowed, remaining, ttl, retry_after}
_FIXED_WINDOW_LUA = """
local key = KEYS[1]
local limit = tonumber(ARGV[1])
local used = redis.call('INCR', key)
if used == 1 then
    redis.call('EXPIRE', key, tonumber(ARGV[2]))
end
local ttl = redis.call('TTL', key)
if used > limit then
    return {0, 0, ttl, ttl}
end
return {1, limit - used, ttl, 0}
"""

SCRIPTS: dict[str, str] = {
    SLIDING_WINDOW: _SLIDING_WINDOW_LUA,
    FIXED_WINDOW: _FIXED_WINDOW_LUA,
}


class RedisClient:
    """
    Async Redis client that owns the rate limiting Lua scripts.

    Nothing here raises RedisError: when Redis is disabled or unreachable,
    calls return None/False and rate limiting fails open.
    """

    def __init__(self, url: str, enabled: bool = True, pool_size: int = 10) -> None:
        self._url = url
        self._enabled = enabled
        self._pool_size = pool_size
        self._client: Redis | None = None
        self._script_shas: dict[str, str] = {}

    async def connect(self) -> None:
        """Open the connection pool and register the Lua scripts."""
        if not self._enabled:
            logger.info("Redis disabled by configuration")
            return
        client = Redis.from_url(self._url, max_connections=self._pool_size)
        try:
            await client.ping()
            for name, source in SCRIPTS.items():
                self._script_shas[name] = await client.script_load(source)
        except RedisError as e:
            logger.warning("Redis connection failed: %s", e)
            self._script_shas = {}
            await client.aclose()
            return
        self._client = client
        logger.info("Redis connected, %d scripts loaded", len(self._script_shas))

    async def close(self) -> None:
        """Close the connection pool."""
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        logger.info("Redis connection closed")

    @property
    def is_connected(self) -> bool:
        """Check if client is connected."""
        return self._client is not None

    def has_script(self, name: str) -> bool:
        """Whether the named script was loaded on connect."""
        return name in self._script_shas

    async def run_script(self, name: str, key: str, *args: Any) -> list[int] | None:
        """
        Run a rate limiting script against a single key.

        A script evicted from the server cache (e.g. after a Redis restart) is
        loaded again once. Returns None if Redis is unavailable.
        """
        if self._client is None or not self.has_script(name):
            return None
        try:
            try:
                return await self._client.evalsha(self._script_shas[name], 1, key, *args)
            except NoScriptError:
                logger.info("Reloading evicted Redis script %s", name)
                self._script_shas[name] = await self._client.script_load(SCRIPTS[name])
                return await self._client.evalsha(self._script_shas[name], 1, key, *args)
        except RedisError as e:
            logger.warning("Redis script %s failed: %s", name, e)
            return None

    async def ping(self) -> bool:
        """Check Redis connectivity."""
        if self._client is None:
            return False
        try:
            return await self._client.ping()
        except RedisError:
            return False

    async def flushdb(self) -> bool:
        """Flush current database (for testing). Returns False if unavailable."""
        if self._client is None:
            return False
        try:
            await self._client.flushdb()
        except RedisError as e:
            logger.warning("Redis FLUSHDB failed: %s", e)
            return False
        return True


class _RedisState:
    """Container for the process-wide Redis client."""

    client: RedisClient | None = None


_state = _RedisState()


def get_redis_client() -> RedisClient | None:
    """Get the global Redis client instance."""
    return _state.client


def set_redis_client(client: RedisClient | None) -> None:
    """Set the global Redis client instance."""
    _state.client = client
