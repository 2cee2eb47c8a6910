"""Identity verification delegated to the auth microservice over HTTP.

Wire contract:
    POST {AUTH_SERVICE_URL}{AUTH_VERIFY_PATH}  {"token": "<credential>"}
    200 → {"userId": "...", "email": "...", "name": "..."}
    anything else, or a body carrying "error" → unauthenticated

Single attempt, no retry. Unreachable auth service == invalid token.
"""
import logging
from typing import Any

import httpx

from src.om_identity.domain.models import Identity

logger = logging.getLogger(__name__)


def _identity_from_body(body: Any) -> Identity | None:
    if not isinstance(body, dict) or body.get("error"):
        return None
    user_id = body.get("userId")
    if not user_id:
        return None
    return Identity(
        user_id=str(user_id),
        email=str(body.get("email") or ""),
        name=body.get("name"),
    )


class RemoteIdentityVerifier:
    def __init__(
        self,
        base_url: str,
        verify_path: str = "/auth/verify-token",
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._verify_path = verify_path
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def verify(self, credential: str) -> Identity | None:
        if not credential:
            return None
        try:
            resp = await self._client.post(self._verify_path, json={"token": credential})
            if resp.status_code != 200:
                logger.info("Auth service rejected credential: status=%d", resp.status_code)
                return None
            return _identity_from_body(resp.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Auth verification error: %s", exc)
            return None

    async def aclose(self) -> None:
        await self._client.aclose()
