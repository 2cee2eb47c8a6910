"""Reconciliation rules: gateway status → order status.

Poll (client asked for a definitive answer):
    "success"      → successful
    anything else  → failed                  (unconditional write)

Webhook (continuous event stream, non-terminal events are common):
    "success"      → successful              (unconditional write)
    "failed"       → failed, only while the order is pending/failed
    anything else  → no change

`successful` is final for webhooks: a late or replayed "failed" event never
downgrades a paid order.
"""
from dataclasses import dataclass

from src.om_common.enums import GatewaySettlementStatus, OrderStatus


@dataclass(frozen=True)
class Transition:
    target: OrderStatus
    only_from: tuple[OrderStatus, ...] | None = None  # None = unconditional


def poll_transition(settlement_status: str | None) -> Transition:
    if settlement_status == GatewaySettlementStatus.SUCCESS.value:
        return Transition(OrderStatus.SUCCESSFUL)
    return Transition(OrderStatus.FAILED)


def webhook_transition(event_status: str) -> Transition | None:
    if event_status == GatewaySettlementStatus.SUCCESS.value:
        return Transition(OrderStatus.SUCCESSFUL)
    if event_status == GatewaySettlementStatus.FAILED.value:
        return Transition(
            OrderStatus.FAILED,
            only_from=(OrderStatus.PENDING, OrderStatus.FAILED),
        )
    return None
