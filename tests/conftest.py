"""Shared test fixtures.

Unit tests never touch PostgreSQL, Redis, the auth service or Paystack:
collaborators are replaced by the in-memory fakes below.
"""

import asyncio
import itertools
import os
from collections.abc import AsyncGenerator
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.exc import IntegrityError  # noqa: E402

from src.main import app  # noqa: E402
from src.om_common.database import get_db_session  # noqa: E402
from src.om_common.errors import GatewayQueryError  # noqa: E402
from src.om_identity.auth.dependencies import get_identity_verifier  # noqa: E402
from src.om_identity.domain.models import Identity  # noqa: E402
from src.om_order.api.dependencies import (  # noqa: E402
    get_order_repository,
    get_payment_gateway,
)
from src.om_order.domain.models import Order  # noqa: E402
from src.om_payment.domain.models import SettlementResult  # noqa: E402

ALICE = Identity(user_id="user-alice", email="alice@example.com", name="Alice")
BOB = Identity(user_id="user-bob", email="bob@example.com", name="Bob")
TOKENS = {"token-alice": ALICE, "token-bob": BOB}


class InMemoryOrderRepository:
    """OrderRepositoryProtocol over a dict keyed by reference.

    Each status update is a single synchronous step after one scheduling point,
    mirroring the atomic UPDATE of the SQL repository.
    """

    def __init__(self) -> None:
        self.orders: dict[str, Order] = {}
        self.update_calls: list[tuple[str, str, tuple[str, ...] | None]] = []
        self._clock = itertools.count()
        self._epoch = datetime(2026, 1, 1, tzinfo=UTC)

    async def insert(self, order: Order, db: Any) -> Order:
        await asyncio.sleep(0)
        if order.reference in self.orders:
            raise IntegrityError("INSERT INTO orders", {}, Exception("uq_orders_reference"))
        stamp = self._epoch + timedelta(seconds=next(self._clock))
        saved = replace(order, created_at=stamp, updated_at=stamp)
        self.orders[order.reference] = saved
        return saved

    async def get_by_reference(self, reference: str, db: Any) -> Order | None:
        await asyncio.sleep(0)
        return self.orders.get(reference)

    async def update_status_by_reference(
        self,
        reference: str,
        status: str,
        db: Any,
        only_from: tuple[str, ...] | None = None,
    ) -> int:
        await asyncio.sleep(0)
        self.update_calls.append((reference, status, only_from))
        order = self.orders.get(reference)
        if order is None or (only_from is not None and order.status not in only_from):
            return 0
        order.status = status
        return 1

    async def find_by_user(self, user_id: str, db: Any) -> list[Order]:
        await asyncio.sleep(0)
        mine = [o for o in self.orders.values() if o.user_id == user_id]
        return sorted(mine, key=lambda o: o.created_at or self._epoch, reverse=True)


class FakeGateway:
    """PaymentGatewayProtocol with scripted settlement statuses per reference."""

    def __init__(self) -> None:
        self.settlements: dict[str, str] = {}
        self.initiated: list[dict[str, Any]] = []
        self.queries: list[str] = []
        self.fail_initiate = False
        self.query_error = False

    async def initiate(
        self,
        email: str,
        amount_minor_units: int,
        reference: str,
        callback_url: str,
        metadata: dict[str, Any],
    ) -> str | None:
        await asyncio.sleep(0)
        self.initiated.append({
            "email": email,
            "amount": amount_minor_units,
            "reference": reference,
            "callback_url": callback_url,
            "metadata": metadata,
        })
        if self.fail_initiate:
            return None
        return f"https://checkout.paystack.com/{reference}"

    async def query_status(self, reference: str) -> SettlementResult | None:
        await asyncio.sleep(0)
        self.queries.append(reference)
        if self.query_error:
            raise GatewayQueryError(reference, "connection reset")
        status = self.settlements.get(reference)
        if status is None:
            return None
        return SettlementResult(
            reference=reference,
            status=status,
            raw={"reference": reference, "status": status, "amount": 100000},
        )


class FakeIdentityVerifier:
    def __init__(self, tokens: dict[str, Identity] | None = None) -> None:
        self.tokens = dict(TOKENS if tokens is None else tokens)
        self.calls: list[str] = []

    async def verify(self, credential: str) -> Identity | None:
        self.calls.append(credential)
        return self.tokens.get(credential)


@pytest.fixture
def memory_repo() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def fake_verifier() -> FakeIdentityVerifier:
    return FakeIdentityVerifier()


@pytest.fixture
def db() -> AsyncMock:
    """Stand-in AsyncSession: commit/rollback are awaitable no-ops."""
    return AsyncMock()


@pytest.fixture
async def client(
    memory_repo: InMemoryOrderRepository,
    fake_gateway: FakeGateway,
    fake_verifier: FakeIdentityVerifier,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the real app with fake collaborators."""

    async def _session() -> AsyncGenerator[AsyncMock, None]:
        yield AsyncMock()

    app.dependency_overrides[get_order_repository] = lambda: memory_repo
    app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway
    app.dependency_overrides[get_identity_verifier] = lambda: fake_verifier
    app.dependency_overrides[get_db_session] = _session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
