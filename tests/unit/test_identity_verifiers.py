"""Unit tests for remote and JWT identity verifiers."""
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
from jose import jwt

from src.om_identity.domain.models import Identity
from src.om_identity.infrastructure.jwt_verifier import JwtIdentityVerifier
from src.om_identity.infrastructure.remote_verifier import RemoteIdentityVerifier

_SECRET = "test-secret"


def _remote(handler: Any) -> RemoteIdentityVerifier:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://auth")
    return RemoteIdentityVerifier("http://auth", "/auth/verify-token", client=client)


class TestRemoteIdentityVerifier:
    async def test_valid_token_returns_identity(self) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = request.content
            return httpx.Response(
                200, json={"userId": "u-1", "email": "a@example.com", "name": "Ada"}
            )

        identity = await _remote(handler).verify("tok")

        assert identity == Identity(user_id="u-1", email="a@example.com", name="Ada")
        assert seen["path"] == "/auth/verify-token"
        assert b'"token"' in seen["body"]

    async def test_error_body_is_unauthenticated(self) -> None:
        verifier = _remote(lambda r: httpx.Response(200, json={"error": "expired"}))
        assert await verifier.verify("tok") is None

    async def test_missing_user_id_is_unauthenticated(self) -> None:
        verifier = _remote(lambda r: httpx.Response(200, json={"email": "a@example.com"}))
        assert await verifier.verify("tok") is None

    async def test_non_200_is_unauthenticated(self) -> None:
        verifier = _remote(lambda r: httpx.Response(401, json={"message": "nope"}))
        assert await verifier.verify("tok") is None

    async def test_unreachable_service_is_unauthenticated(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        assert await _remote(handler).verify("tok") is None

    async def test_non_json_body_is_unauthenticated(self) -> None:
        verifier = _remote(lambda r: httpx.Response(200, content=b"<html>"))
        assert await verifier.verify("tok") is None

    async def test_empty_credential_skips_call(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"userId": "u-1"})

        assert await _remote(handler).verify("") is None
        assert calls == []


def _token(**claims: Any) -> str:
    payload = {
        "sub": "u-1",
        "email": "a@example.com",
        "type": "access",
        "exp": datetime.now(UTC) + timedelta(minutes=5),
    }
    payload.update(claims)
    return str(jwt.encode(payload, _SECRET, algorithm="HS256"))


class TestJwtIdentityVerifier:
    async def test_valid_token(self) -> None:
        identity = await JwtIdentityVerifier(_SECRET).verify(_token())
        assert identity is not None
        assert identity.user_id == "u-1"
        assert identity.email == "a@example.com"

    async def test_wrong_secret(self) -> None:
        assert await JwtIdentityVerifier("other").verify(_token()) is None

    async def test_expired_token(self) -> None:
        expired = _token(exp=datetime.now(UTC) - timedelta(minutes=1))
        assert await JwtIdentityVerifier(_SECRET).verify(expired) is None

    async def test_refresh_token_rejected(self) -> None:
        assert await JwtIdentityVerifier(_SECRET).verify(_token(type="refresh")) is None

    async def test_missing_subject_rejected(self) -> None:
        assert await JwtIdentityVerifier(_SECRET).verify(_token(sub="")) is None

    async def test_garbage_rejected(self) -> None:
        assert await JwtIdentityVerifier(_SECRET).verify("not-a-jwt") is None

    async def test_unconfigured_secret_rejects_everything(self) -> None:
        assert await JwtIdentityVerifier("").verify(_token()) is None
