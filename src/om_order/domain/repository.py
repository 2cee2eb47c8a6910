# src/om_order/domain/repository.py
"""OrderRepository Protocol: interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.om_order.domain.models import Order


class OrderRepositoryProtocol(Protocol):
    async def insert(self, order: Order, db: AsyncSession) -> Order: ...

    async def get_by_reference(self, reference: str, db: AsyncSession) -> Order | None: ...

    async def update_status_by_reference(
        self,
        reference: str,
        status: str,
        db: AsyncSession,
        only_from: tuple[str, ...] | None = None,
    ) -> int:
        """Single atomic UPDATE keyed by reference; returns affected row count."""
        ...

    async def find_by_user(self, user_id: str, db: AsyncSession) -> list[Order]:
        """All orders owned by user_id, newest first (created_at DESC)."""
        ...
