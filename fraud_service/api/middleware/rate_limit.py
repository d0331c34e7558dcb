"""Fixed-window rate limiting per API key."""

import hashlib
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog
from fastapi import Depends, HTTPException, Request, Response, status

from fraud_service.config import Settings, get_settings

from .auth import require_api_key

logger = structlog.get_logger()


@dataclass
class RateLimitConfig:
    max_requests: int = 5
    window_seconds: int = 1


@dataclass
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after: int = 0

    def headers(self) -> dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(int(self.reset_at)),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after)
        return headers


def _window_bounds(now: float, window_seconds: int) -> tuple[int, float]:
    window = int(now // window_seconds)
    return window, (window + 1) * window_seconds


def _result(config: RateLimitConfig, count: int, now: float, reset_at: float) -> RateLimitResult:
    allowed = count <= config.max_requests
    return RateLimitResult(
        allowed=allowed,
        limit=config.max_requests,
        remaining=max(0, config.max_requests - count),
        reset_at=reset_at,
        retry_after=0 if allowed else max(1, math.ceil(reset_at - now)),
    )


class InMemoryRateLimiter:
    """Single-instance limiter. Use RedisRateLimiter when several replicas
    share one API key budget."""

    def __init__(
        self,
        config: RateLimitConfig,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self._clock = clock
        self._windows: dict[str, tuple[int, int]] = {}

    async def hit(self, key: str) -> RateLimitResult:
        now = self._clock()
        window, reset_at = _window_bounds(now, self.config.window_seconds)
        current_window, count = self._windows.get(key, (window, 0))
        if current_window != window:
            count = 0
        count += 1
        self._windows[key] = (window, count)
        return _result(self.config, count, now, reset_at)


class RedisRateLimiter:
    """Limiter shared across replicas, one counter key per window."""

    def __init__(
        self,
        config: RateLimitConfig,
        redis_url: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self._redis_url = redis_url
        self._redis = None
        self._clock = clock

    def _get_redis(self):
        """Lazy Redis connection."""
        if self._redis is None:
            import redis.asyncio as aioredis

            self._redis = aioredis.from_url(self._redis_url, decode_responses=True)
        return self._redis

    async def hit(self, key: str) -> RateLimitResult:
        now = self._clock()
        window, reset_at = _window_bounds(now, self.config.window_seconds)
        redis_key = f"rl:{key}:{window}"

        pipe = self._get_redis().pipeline()
        pipe.incr(redis_key)
        pipe.expire(redis_key, self.config.window_seconds * 2)
        results = await pipe.execute()

        return _result(self.config, int(results[0]), now, reset_at)


def create_rate_limiter(settings: Settings):
    """Pick the Redis limiter when REDIS_URL is set, else the in-memory one."""
    config = RateLimitConfig(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    if settings.redis_url:
        logger.info("rate_limiter_configured", backend="redis")
        return RedisRateLimiter(config, settings.redis_url)
    logger.info("rate_limiter_configured", backend="memory")
    return InMemoryRateLimiter(config)


_limiter: InMemoryRateLimiter | RedisRateLimiter | None = None


def get_rate_limiter() -> InMemoryRateLimiter | RedisRateLimiter:
    global _limiter
    if _limiter is None:
        _limiter = create_rate_limiter(get_settings())
    return _limiter


def client_key(api_key: str) -> str:
    """Counter key for an API key; the raw key is never stored."""
    return hashlib.sha256(api_key.encode()).hexdigest()[:16]


async def enforce_rate_limit(
    request: Request,
    response: Response,
    api_key: str = Depends(require_api_key),
    limiter: InMemoryRateLimiter | RedisRateLimiter = Depends(get_rate_limiter),  # noqa: B008
) -> None:
    key = client_key(api_key)
    result = await limiter.hit(key)
    request.state.client_key = key
    request.state.rate_limited = not result.allowed
    if not result.allowed:
        logger.warning("rate_limit_exceeded", client_key=key, retry_after=result.retry_after)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests",
            headers=result.headers(),
        )
    response.headers.update(result.headers())
