"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.om_common.database import engine
from src.om_common.errors import AppError
from src.om_common.middleware.rate_limit import RateLimitMiddleware
from src.om_common.middleware.request_log import RequestLogMiddleware
from src.om_common.redis_client import close_redis, get_redis
from src.om_common.response import error_response
from src.om_identity.infrastructure.jwt_verifier import JwtIdentityVerifier
from src.om_identity.infrastructure.remote_verifier import RemoteIdentityVerifier
from src.om_notification.api.router import router as notification_router
from src.om_order.api.router import router as order_router
from src.om_order.api.webhook_router import router as webhook_router
from src.om_payment.infrastructure.paystack_client import PaystackClient

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


def build_identity_verifier() -> RemoteIdentityVerifier | JwtIdentityVerifier:
    if settings.IDENTITY_VERIFIER == "jwt":
        return JwtIdentityVerifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)
    return RemoteIdentityVerifier(
        settings.AUTH_SERVICE_URL,
        settings.AUTH_VERIFY_PATH,
        timeout=settings.AUTH_TIMEOUT_SECONDS,
    )


def build_payment_gateway() -> PaystackClient:
    return PaystackClient(
        settings.PAYSTACK_SECRET_KEY,
        base_url=settings.PAYSTACK_BASE_URL,
        timeout=settings.PAYSTACK_TIMEOUT_SECONDS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB, build outbound clients. Shutdown: close them."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await get_redis()
    verifier = build_identity_verifier()
    gateway = build_payment_gateway()
    app.state.identity_verifier = verifier
    app.state.payment_gateway = gateway
    yield
    await verifier.aclose()
    await gateway.aclose()
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(
    RateLimitMiddleware,
    redis_factory=get_redis,
    limit=settings.RATE_LIMIT_ORDERS_PER_MINUTE,
    enabled=settings.RATE_LIMIT_ENABLED,
)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(order_router, prefix="/api/v1")
app.include_router(notification_router, prefix="/api/v1")
app.include_router(webhook_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
