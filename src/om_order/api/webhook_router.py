"""Payment gateway webhook endpoint.

Always answers HTTP 200 with {success, message?}: the gateway redelivers on
anything else, and a rejected event will never become acceptable by retrying.
"""
import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.om_common.database import get_db_session
from src.om_order.api.dependencies import get_order_manager
from src.om_order.application.schemas import WebhookAck
from src.om_order.application.service import OrderLifecycleManager
from src.om_payment.domain.signature import SIGNATURE_HEADER, is_valid_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/webhook", response_model=WebhookAck, response_model_exclude_none=True)
async def gateway_webhook(
    request: Request,
    manager: Annotated[OrderLifecycleManager, Depends(get_order_manager)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> WebhookAck:
    body = await request.body()

    if settings.PAYSTACK_VERIFY_WEBHOOK_SIGNATURE and not is_valid_signature(
        body, request.headers.get(SIGNATURE_HEADER), settings.PAYSTACK_SECRET_KEY
    ):
        logger.warning("Webhook signature rejected")
        return WebhookAck(success=False, message="Invalid signature")

    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning("Webhook body is not JSON")
        return WebhookAck(success=False, message="Invalid payload")

    return await manager.handle_webhook(payload, db)
