# config/cache.py
import logging
from typing import Awaitable, Callable, Optional
from fastapi import Request
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from redis.asyncio import Redis, from_url
from config.settings import Settings

logger = logging.getLogger(__name__)

_client: Optional[Redis] = None


async def get_redis(url: str) -> Redis:
    global _client
    if _client is None:
        _client = from_url(
            url,
            encoding="utf-8",
            decode_responses=False,  # fastapi-limiter works on raw bytes
            socket_keepalive=True,
            health_check_interval=30,
        )
        # Refuse to start with rate limiting on and Redis down.
        await _client.ping()
    return _client


def client_identifier(settings: Settings) -> Callable[[Request], Awaitable[str]]:
    """Rate-limit key: first X-Forwarded-For hop behind a trusted proxy, else the peer address."""

    async def _identify(request: Request) -> str:
        if settings.TRUST_PROXY:
            forwarded = request.headers.get("x-forwarded-for")
            if forwarded:
                return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    return _identify


async def init_rate_limiter(settings: Settings) -> RateLimiter:
    """Connect Redis, register it with fastapi-limiter and return the shared per-client limiter."""
    redis = await get_redis(settings.REDIS_URL)
    await FastAPILimiter.init(redis, identifier=client_identifier(settings))
    logger.info(
        "ratelimit.ready times=%d seconds=%d", settings.RATE_LIMIT_TIMES, settings.RATE_LIMIT_SECONDS
    )
    return RateLimiter(times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS)


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
