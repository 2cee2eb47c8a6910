"""Fixed-window rate limiting for order creation.

Rule: RATE_LIMIT_ORDERS_PER_MINUTE requests per minute per client IP on
POST /api/v1/orders. Verification polls and gateway webhooks are never
limited; the gateway retries on anything but 2xx.

Redis logic:
    count = INCR ratelimit:{ip}:orders
    if count == 1: EXPIRE key 60
    if count > limit: 429
    redis unreachable: request passes, warning logged
"""

import logging
from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.om_common.errors import RateLimitError
from src.om_common.response import error_response

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60
_LIMITED_ROUTES = {("POST", "/api/v1/orders")}


def client_ip(request: Request) -> str:
    """Real client IP, honouring the first X-Forwarded-For hop behind a proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        redis_factory: Callable[[], Awaitable[aioredis.Redis]],
        limit: int,
        enabled: bool = True,
    ) -> None:
        super().__init__(app)
        self._redis_factory = redis_factory
        self._limit = limit
        self._enabled = enabled

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._enabled or (request.method, request.url.path.rstrip("/")) not in _LIMITED_ROUTES:
            return await call_next(request)

        key = f"ratelimit:{client_ip(request)}:orders"
        try:
            redis = await self._redis_factory()
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, _WINDOW_SECONDS)
        except RedisError as err:
            # Fail open: order creation must not depend on the limiter store
            logger.warning("Rate limit check skipped, redis unavailable: %s", err)
            return await call_next(request)
        if count > self._limit:
            logger.warning("Rate limit hit: key=%s count=%d", key, count)
            exc = RateLimitError()
            ttl = await redis.ttl(key)
            return JSONResponse(
                status_code=exc.http_status,
                content=error_response(exc.code, exc.message).model_dump(),
                headers={"Retry-After": str(ttl if ttl and ttl > 0 else _WINDOW_SECONDS)},
            )
        return await call_next(request)
