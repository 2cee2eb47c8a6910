"""Local JWT verification for deployments that share a signing secret with the auth service.

NOTE: HS256 (symmetric). The token must carry "sub" (user id) and "email";
"type", when present, must be "access" to prevent token type confusion.
"""
import logging

from jose import JWTError, jwt

from src.om_identity.domain.models import Identity

logger = logging.getLogger(__name__)


class JwtIdentityVerifier:
    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, credential: str) -> Identity | None:
        if not credential or not self._secret:
            return None
        try:
            payload = jwt.decode(
                credential,
                self._secret,
                algorithms=[self._algorithm],  # Explicit list prevents algorithm confusion
            )
        except JWTError as exc:
            logger.info("JWT rejected: %s", exc)
            return None

        if payload.get("type", "access") != "access":
            return None
        user_id = payload.get("sub")
        if not user_id:
            return None
        return Identity(
            user_id=str(user_id),
            email=str(payload.get("email") or ""),
            name=payload.get("name"),
        )

    async def aclose(self) -> None:
        return None
