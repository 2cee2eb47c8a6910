from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel


class NotificationMetadata(BaseModel):
    orders: list[dict[str, Any]]
    grand_total: Decimal


class Notification(BaseModel):
    message: str
    status: str
    created_at: datetime | None = None
    metadata: NotificationMetadata
