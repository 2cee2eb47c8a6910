"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Identity
  4xxx: Order
  6xxx: Payment gateway
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Identity ---

class UnauthorizedError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Unauthorized", 401)


# --- 4xxx: Order ---

class InvalidOrderError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4001, f"Invalid order: {detail}", 400)


class DuplicateReferenceError(AppError):
    def __init__(self, reference: str) -> None:
        super().__init__(4002, f"Duplicate payment reference: {reference}", 409)


# --- 6xxx: Payment gateway ---

class GatewayInitiationError(AppError):
    """The order row is persisted (pending) but the gateway refused or was unreachable."""

    def __init__(self, order_id: str, reference: str) -> None:
        super().__init__(
            6001,
            f"Failed to initialize transaction for order {order_id} (reference {reference})",
            502,
        )
        self.order_id = order_id
        self.reference = reference


class GatewayQueryError(AppError):
    def __init__(self, reference: str, detail: str = "") -> None:
        msg = f"Failed to query transaction {reference}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(6002, msg, 502)
        self.reference = reference


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)
