"""Payment gateway contract: the two calls the order lifecycle depends on."""
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class SettlementResult:
    """Gateway's view of one transaction. `status` is the gateway's own enum value."""
    reference: str
    status: str
    raw: dict[str, Any] = field(default_factory=dict)


class PaymentGatewayProtocol(Protocol):
    async def initiate(
        self,
        email: str,
        amount_minor_units: int,
        reference: str,
        callback_url: str,
        metadata: dict[str, Any],
    ) -> str | None:
        """Start a transaction; return the redirect (authorization) URL, or None on failure."""
        ...

    async def query_status(self, reference: str) -> SettlementResult | None:
        """Return the settlement result, or None when the gateway sends no payload.

        Raises GatewayQueryError when the gateway cannot be reached or errors.
        """
        ...
