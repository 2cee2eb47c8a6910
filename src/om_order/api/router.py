# src/om_order/api/router.py
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.om_common.database import get_db_session
from src.om_common.response import ApiResponse, success_response
from src.om_identity.auth.dependencies import get_current_identity
from src.om_identity.domain.models import Identity
from src.om_order.api.dependencies import get_order_manager
from src.om_order.application.schemas import CreateOrderRequest, VerifyPaymentResponse
from src.om_order.application.service import OrderLifecycleManager

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    req: CreateOrderRequest,
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    manager: Annotated[OrderLifecycleManager, Depends(get_order_manager)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await manager.create_order(identity, req, db)
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    resp.message = "Order created"
    return resp


@router.api_route(
    "/verify/{reference}",
    methods=["GET", "POST"],
    response_model=VerifyPaymentResponse,
    response_model_exclude_none=True,
)
async def verify_payment(
    reference: str,
    manager: Annotated[OrderLifecycleManager, Depends(get_order_manager)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> VerifyPaymentResponse:
    return await manager.verify_payment(reference, db)
