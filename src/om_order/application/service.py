"""OrderLifecycleManager: owns every order status transition.

Three triggers touch an order and may race on the same reference:
  create   → insert (pending) → gateway initiate
  poll     → gateway query → UPDATE by reference
  webhook  → event payload → UPDATE by reference

All status writes are single UPDATE statements keyed by reference (see
OrderRepository), so concurrent triggers need no locking. Transition rules
live in domain/transitions.py.

Collaborators are injected; the manager holds no per-request state.
"""
import logging
import uuid
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.om_common.enums import OrderStatus
from src.om_common.errors import (
    DuplicateReferenceError,
    GatewayInitiationError,
    GatewayQueryError,
)
from src.om_common.id_generator import generate_order_id, generate_reference
from src.om_common.money import to_minor_units
from src.om_identity.domain.models import Identity
from src.om_order.application.schemas import (
    ActionOut,
    CreateOrderRequest,
    CreateOrderResponse,
    LineItemOut,
    OrderResponse,
    VerifyPaymentResponse,
    WebhookAck,
)
from src.om_order.domain.models import Action, LineItem, Order
from src.om_order.domain.pricing import price_line_items
from src.om_order.domain.repository import OrderRepositoryProtocol
from src.om_order.domain.transitions import Transition, poll_transition, webhook_transition
from src.om_payment.domain.models import PaymentGatewayProtocol

logger = logging.getLogger(__name__)


def order_to_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        order_id=order.order_id,
        reference=order.reference,
        user_id=order.user_id,
        email=order.email,
        line_items=[
            LineItemOut(
                item=line.item,
                actions=[ActionOut(type=a.type, price=a.price) for a in line.actions],
                quantity=line.quantity,
                total=line.total,
            )
            for line in order.line_items
        ],
        grand_total=order.grand_total,
        metadata=order.metadata,
        status=order.status,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def _lines_from_request(req: CreateOrderRequest) -> list[LineItem]:
    return [
        LineItem(
            item=line.item,
            actions=[Action(type=a.type, price=a.price) for a in line.actions],
            quantity=line.quantity,
            total=line.total,
        )
        for line in req.line_items
    ]


class OrderLifecycleManager:
    def __init__(
        self,
        repo: OrderRepositoryProtocol,
        gateway: PaymentGatewayProtocol,
        callback_url: str = "",
        source_app: str = "laundromart",
    ) -> None:
        self._repo = repo
        self._gateway = gateway
        self._callback_url = callback_url
        self._source_app = source_app

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_order(
        self, identity: Identity, req: CreateOrderRequest, db: AsyncSession
    ) -> CreateOrderResponse:
        """Validate, persist as pending, then initiate the gateway transaction.

        A gateway failure after the insert does NOT roll the order back: it
        stays pending and is recovered by a later poll or webhook.
        """
        lines, grand_total = price_line_items(_lines_from_request(req), req.grand_total)

        if req.reference and await self._repo.get_by_reference(req.reference, db):
            raise DuplicateReferenceError(req.reference)

        order = Order(
            id=str(uuid.uuid4()),
            order_id=req.order_id or generate_order_id(),
            reference=req.reference or generate_reference(),
            user_id=identity.user_id,
            email=identity.email,
            line_items=lines,
            grand_total=grand_total,
            metadata=dict(req.metadata or {}),
            status=OrderStatus.PENDING.value,
        )
        try:
            saved = await self._repo.insert(order, db)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            # UNIQUE(reference) is the final guard against a concurrent duplicate
            raise DuplicateReferenceError(order.reference) from None
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Order created: order_id=%s ref=%s user=%s total=%s",
            saved.order_id, saved.reference, saved.user_id, saved.grand_total,
        )

        authorization_url = await self._gateway.initiate(
            email=saved.email,
            amount_minor_units=to_minor_units(saved.grand_total),
            reference=saved.reference,
            callback_url=self._callback_url,
            metadata={
                **saved.metadata,
                "sourceApp": self._source_app,
                "userId": saved.user_id,
                "orderId": saved.order_id,
            },
        )
        if not authorization_url:
            logger.error(
                "Gateway initiation failed, order left pending: order_id=%s ref=%s",
                saved.order_id, saved.reference,
            )
            raise GatewayInitiationError(saved.order_id, saved.reference)

        return CreateOrderResponse(
            authorization_url=authorization_url,
            order_id=saved.order_id,
            reference=saved.reference,
            order=order_to_response(saved),
        )

    # ------------------------------------------------------------------
    # Reconcile-by-poll
    # ------------------------------------------------------------------

    async def verify_payment(self, reference: str, db: AsyncSession) -> VerifyPaymentResponse:
        """Ask the gateway and write its answer. Safe to repeat."""
        try:
            result = await self._gateway.query_status(reference)
        except GatewayQueryError as exc:
            logger.error("Payment verification failed: ref=%s %s", reference, exc.message)
            return VerifyPaymentResponse(status=False)

        if result is None:
            logger.info("Payment verification returned no payload: ref=%s", reference)
            return VerifyPaymentResponse(status=False)

        transition = poll_transition(result.status)
        affected = await self._apply(reference, transition, db)
        logger.info(
            "Payment verified: ref=%s gateway_status=%s → %s (rows=%d)",
            reference, result.status, transition.target.value, affected,
        )
        return VerifyPaymentResponse(
            status=transition.target is OrderStatus.SUCCESSFUL,
            data=result.raw,
        )

    # ------------------------------------------------------------------
    # Reconcile-by-webhook
    # ------------------------------------------------------------------

    async def handle_webhook(self, payload: Any, db: AsyncSession) -> WebhookAck:
        """Apply a gateway event. Never raises: the sender only ever sees an ack."""
        try:
            data = payload.get("data") if isinstance(payload, dict) else None
            reference = data.get("reference") if isinstance(data, dict) else None
            status = data.get("status") if isinstance(data, dict) else None

            if not reference or not status:
                logger.warning("Invalid webhook payload: event=%s", _event_name(payload))
                return WebhookAck(success=False, message="Invalid payload")

            transition = webhook_transition(str(status))
            if transition is None:
                logger.info("Webhook status ignored: ref=%s status=%s", reference, status)
            else:
                affected = await self._apply(str(reference), transition, db)
                if affected == 0:
                    logger.warning(
                        "Webhook not applied (unknown reference or already successful): ref=%s status=%s",
                        reference, status,
                    )

            logger.info("Processed webhook for %s: %s", reference, status)
            return WebhookAck(success=True)
        except Exception:
            logger.exception("Webhook processing failed")
            return WebhookAck(success=False, message="Webhook processing failed")

    # ------------------------------------------------------------------

    async def _apply(self, reference: str, transition: Transition, db: AsyncSession) -> int:
        only_from = (
            tuple(s.value for s in transition.only_from) if transition.only_from else None
        )
        try:
            affected = await self._repo.update_status_by_reference(
                reference, transition.target.value, db, only_from=only_from
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return affected


def _event_name(payload: Any) -> str:
    if isinstance(payload, dict):
        return str(payload.get("event") or "")
    return ""
