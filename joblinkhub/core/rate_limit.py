"""Per-client fixed-window rate limiting backed by Redis."""

import logging
import math
import time
from typing import Optional

from fastapi import Request
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from joblinkhub.config import Settings, settings
from joblinkhub.core.exceptions import RateLimited

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed-window request counter keyed by client address.

    When Redis is unreachable the limiter degrades to allowing every request.
    """

    def __init__(self, settings: Settings):
        self.enabled = settings.RATE_LIMIT_ENABLED
        self.redis_url = settings.REDIS_URL
        self.limit = settings.RATE_LIMIT_REQUESTS
        self.window_seconds = settings.RATE_LIMIT_WINDOW_SECONDS
        self._client: Optional[aioredis.Redis] = None

        logger.info(
            f"RateLimiter initialized. Enabled: {self.enabled}, "
            f"{self.limit} requests / {self.window_seconds}s"
        )

    async def connect(self) -> None:
        """Open the Redis connection; disable limiting if it is unavailable."""
        if not self.enabled:
            logger.info("Rate limiting is disabled. Skipping Redis connection.")
            return

        try:
            client = aioredis.from_url(self.redis_url, decode_responses=True)
            await client.ping()
            self._client = client
            logger.info(f"Rate limiter connected to Redis at {self.redis_url}")
        except (RedisError, OSError) as e:
            logger.error(f"Failed to connect rate limiter to Redis: {e}")
            logger.warning("Rate limiting will operate in degraded mode (no limits)")
            self._client = None

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            logger.info("Rate limiter Redis connection closed")
        self._client = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    def set_client(self, client: Optional[aioredis.Redis]) -> None:
        """Use an already-connected client (tests, shared pools)."""
        self._client = client

    async def allow(self, client_key: str, now: Optional[float] = None) -> bool:
        """Count one request for ``client_key``; False once the window budget is spent."""
        if not self.enabled or self._client is None:
            return True

        now = now or time.time()
        window = max(1, int(self.window_seconds))
        slot = int(math.floor(now / window))
        key = f"rl:{client_key}:{slot}"

        try:
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.incr(key)
                pipe.expire(key, window)
                count, _ = await pipe.execute()
        except RedisError as e:
            logger.warning(f"Redis error while rate limiting '{client_key}': {e}. Allowing request.")
            return True

        return int(count) <= self.limit


def client_address(request: Request) -> str:
    """First X-Forwarded-For hop, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


rate_limiter = RateLimiter(settings)


async def enforce_rate_limit(request: Request) -> None:
    """Router dependency rejecting clients over their budget."""
    if not await rate_limiter.allow(client_address(request)):
        raise RateLimited()
