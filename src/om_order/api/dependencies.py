"""Per-request wiring of the order lifecycle collaborators.

Long-lived clients (payment gateway) are built once in the app lifespan and
read from app.state; everything else is cheap and constructed per request.
Tests swap any of these through app.dependency_overrides.
"""
from fastapi import Depends, Request

from config.settings import settings
from src.om_order.application.service import OrderLifecycleManager
from src.om_order.domain.repository import OrderRepositoryProtocol
from src.om_order.infrastructure.persistence import OrderRepository
from src.om_payment.domain.models import PaymentGatewayProtocol


def get_order_repository() -> OrderRepositoryProtocol:
    return OrderRepository()


def get_payment_gateway(request: Request) -> PaymentGatewayProtocol:
    gateway: PaymentGatewayProtocol = request.app.state.payment_gateway
    return gateway


def get_order_manager(
    repo: OrderRepositoryProtocol = Depends(get_order_repository),
    gateway: PaymentGatewayProtocol = Depends(get_payment_gateway),
) -> OrderLifecycleManager:
    return OrderLifecycleManager(
        repo,
        gateway,
        callback_url=settings.PAYSTACK_CALLBACK_URL,
        source_app=settings.PAYMENT_SOURCE_APP,
    )
