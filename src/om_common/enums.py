"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    SUCCESSFUL = "successful"
    FAILED = "failed"


class GatewaySettlementStatus(str, Enum):
    """Paystack transaction statuses the order service reacts to.

    The gateway emits more values (ongoing, abandoned, reversed, ...); only
    these two are terminal for an order.
    """
    SUCCESS = "success"
    FAILED = "failed"
