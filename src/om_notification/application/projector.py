"""NotificationProjector: read-only view of a user's orders as status messages.

Display defaults (projection only, storage is untouched):
  - status missing  → "completed" in the status field, "processed" in the sentence
  - order_id missing → the payment reference is named instead
  - line items / grand total missing → [] / 0
"""
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.om_identity.domain.models import Identity
from src.om_notification.application.schemas import Notification, NotificationMetadata
from src.om_order.domain.models import Order
from src.om_order.domain.repository import OrderRepositoryProtocol


def order_to_notification(order: Order) -> Notification:
    label = order.order_id or order.reference
    return Notification(
        message=f"Your order ({label}) was {order.status or 'processed'}.",
        status=order.status or "completed",
        created_at=order.created_at,
        metadata=NotificationMetadata(
            orders=[line.to_json() for line in order.line_items or []],
            grand_total=order.grand_total or Decimal(0),
        ),
    )


class NotificationProjector:
    def __init__(self, repo: OrderRepositoryProtocol) -> None:
        self._repo = repo

    async def project(self, identity: Identity, db: AsyncSession) -> list[Notification]:
        """Newest first; filtered by the verified identity only."""
        orders = await self._repo.find_by_user(identity.user_id, db)
        return [order_to_notification(o) for o in orders]
