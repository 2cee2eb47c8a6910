"""Paystack HTTP client.

Endpoints used:
    POST /transaction/initialize        {email, amount, reference, callback_url, metadata}
         → {"status": true, "data": {"authorization_url": ...}}
    GET  /transaction/verify/{reference}
         → {"status": true, "data": {"status": "success" | "failed" | ..., ...}}

One attempt per call, no retry; callers own the retry policy.
"""
import logging
from typing import Any

import httpx

from src.om_common.errors import GatewayQueryError
from src.om_payment.domain.models import SettlementResult

logger = logging.getLogger(__name__)


class PaystackClient:
    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.paystack.co",
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._headers = {"Authorization": f"Bearer {secret_key}"}

    async def initiate(
        self,
        email: str,
        amount_minor_units: int,
        reference: str,
        callback_url: str,
        metadata: dict[str, Any],
    ) -> str | None:
        body: dict[str, Any] = {
            "email": email,
            "amount": amount_minor_units,
            "reference": reference,
            "metadata": metadata,
        }
        if callback_url:
            body["callback_url"] = callback_url
        try:
            resp = await self._client.post(
                "/transaction/initialize", json=body, headers=self._headers
            )
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Paystack init error: ref=%s %s", reference, exc)
            return None

        url = None
        if resp.is_success and isinstance(data, dict) and data.get("status"):
            url = (data.get("data") or {}).get("authorization_url")
        if not url:
            logger.error("Paystack init failed: ref=%s status=%d body=%s", reference, resp.status_code, data)
            return None

        logger.info("Paystack init success: ref=%s", reference)
        return str(url)

    async def query_status(self, reference: str) -> SettlementResult | None:
        try:
            resp = await self._client.get(
                f"/transaction/verify/{reference}", headers=self._headers
            )
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as exc:
            raise GatewayQueryError(reference, f"HTTP {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise GatewayQueryError(reference, str(exc)) from exc

        payment = body.get("data") if isinstance(body, dict) else None
        if not isinstance(payment, dict) or not payment:
            return None
        return SettlementResult(
            reference=str(payment.get("reference") or reference),
            status=str(payment.get("status") or ""),
            raw=payment,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
