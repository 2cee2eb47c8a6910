"""Order domain model: pure dataclasses, no SQLAlchemy dependency."""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.om_common.money import to_money


@dataclass
class Action:
    type: str  # e.g. "basic", "iron", "dry-clean"
    price: Decimal  # per unit, major currency units


@dataclass
class LineItem:
    item: str
    actions: list[Action]
    quantity: int
    total: Decimal | None = None  # server-computed; None until priced

    def to_json(self) -> dict[str, Any]:
        """JSONB shape. Money is serialised as 2-place strings to stay exact."""
        return {
            "item": self.item,
            "actions": [{"type": a.type, "price": str(to_money(a.price))} for a in self.actions],
            "quantity": self.quantity,
            "total": str(to_money(self.total)) if self.total is not None else None,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "LineItem":
        total = data.get("total")
        return cls(
            item=data.get("item", ""),
            actions=[
                Action(type=a.get("type", ""), price=to_money(a.get("price", 0)))
                for a in data.get("actions") or []
            ],
            quantity=int(data.get("quantity", 0)),
            total=to_money(total) if total is not None else None,
        )


@dataclass
class Order:
    id: str
    order_id: str  # business-facing id
    reference: str  # gateway correlation key, unique
    user_id: str
    email: str
    line_items: list[LineItem]
    grand_total: Decimal
    metadata: dict[str, Any] = field(default_factory=dict)
    status: str = "pending"
    created_at: datetime | None = None
    updated_at: datetime | None = None
