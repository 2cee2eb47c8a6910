# src/om_order/infrastructure/persistence.py
"""OrderRepository: raw SQL persistence implementation.

Every status mutation is one UPDATE ... WHERE reference = :reference statement.
Concurrent poll/webhook writers never read-then-write, so no row locks are taken.

Transaction ownership: the CALLER (application service) commits.
"""
from dataclasses import replace
from typing import Any

from sqlalchemy import bindparam, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession

from src.om_common.money import to_money
from src.om_order.domain.models import LineItem, Order

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (id, order_id, reference, user_id, email,
        line_items, grand_total, metadata, status)
    VALUES (:id, :order_id, :reference, :user_id, :email,
        :line_items, :grand_total, :metadata, :status)
    RETURNING created_at, updated_at
""").bindparams(
    bindparam("line_items", type_=JSONB),
    bindparam("metadata", type_=JSONB),
)

# only_from_csv NULL → unconditional; otherwise compare-and-set on current status.
# updated_at is maintained by the trg_orders_updated_at trigger.
_UPDATE_STATUS_BY_REFERENCE_SQL = text("""
    UPDATE orders
    SET status = :status
    WHERE reference = :reference
      AND (CAST(:only_from_csv AS TEXT) IS NULL
           OR status = ANY(string_to_array(CAST(:only_from_csv AS TEXT), ',')))
""")

_SELECT_COLUMNS = """
    id, order_id, reference, user_id, email,
    line_items, grand_total, metadata, status, created_at, updated_at
"""

_GET_ORDER_BY_REFERENCE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE reference = :reference
""")

_LIST_ORDERS_BY_USER_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders
    WHERE user_id = :user_id
    ORDER BY created_at DESC, id DESC
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object."""
    return Order(
        id=str(row.id),
        order_id=row.order_id,
        reference=row.reference,
        user_id=row.user_id,
        email=row.email or "",
        line_items=[LineItem.from_json(item) for item in row.line_items or []],
        grand_total=to_money(row.grand_total),
        metadata=dict(row.metadata or {}),
        status=row.status,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def insert(self, order: Order, db: AsyncSession) -> Order:
        result = await db.execute(
            _INSERT_ORDER_SQL,
            {
                "id": order.id,
                "order_id": order.order_id,
                "reference": order.reference,
                "user_id": order.user_id,
                "email": order.email,
                "line_items": [line.to_json() for line in order.line_items],
                "grand_total": order.grand_total,
                "metadata": order.metadata,
                "status": order.status,
            },
        )
        row = result.fetchone()
        if row is None:
            return order
        return replace(order, created_at=row.created_at, updated_at=row.updated_at)

    async def get_by_reference(self, reference: str, db: AsyncSession) -> Order | None:
        result = await db.execute(_GET_ORDER_BY_REFERENCE_SQL, {"reference": reference})
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def update_status_by_reference(
        self,
        reference: str,
        status: str,
        db: AsyncSession,
        only_from: tuple[str, ...] | None = None,
    ) -> int:
        only_from_csv = ",".join(only_from) if only_from else None
        result = await db.execute(
            _UPDATE_STATUS_BY_REFERENCE_SQL,
            {"reference": reference, "status": status, "only_from_csv": only_from_csv},
        )
        return int(result.rowcount or 0)

    async def find_by_user(self, user_id: str, db: AsyncSession) -> list[Order]:
        result = await db.execute(_LIST_ORDERS_BY_USER_SQL, {"user_id": user_id})
        rows = result.fetchall()
        return [_row_to_order(row) for row in rows]
