from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.om_common.database import get_db_session
from src.om_common.response import ApiResponse, success_response
from src.om_identity.auth.dependencies import get_current_identity
from src.om_identity.domain.models import Identity
from src.om_notification.application.projector import NotificationProjector
from src.om_order.api.dependencies import get_order_repository
from src.om_order.domain.repository import OrderRepositoryProtocol

router = APIRouter(prefix="/orders", tags=["notifications"])


def get_notification_projector(
    repo: OrderRepositoryProtocol = Depends(get_order_repository),
) -> NotificationProjector:
    return NotificationProjector(repo)


@router.get("", response_model=ApiResponse)
async def get_orders(
    request: Request,
    identity: Annotated[Identity, Depends(get_current_identity)],
    projector: Annotated[NotificationProjector, Depends(get_notification_projector)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    notifications = await projector.project(identity, db)
    resp = success_response([n.model_dump(mode="json") for n in notifications])
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
