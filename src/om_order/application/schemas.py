# src/om_order/application/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator


class ActionIn(BaseModel):
    type: str
    price: Decimal


class LineItemIn(BaseModel):
    item: str
    # "action" is accepted for clients built against the first API version
    actions: list[ActionIn] = Field(validation_alias=AliasChoices("actions", "action"))
    quantity: int
    total: Decimal | None = None


class CreateOrderRequest(BaseModel):
    line_items: list[LineItemIn]
    grand_total: Decimal | None = None
    metadata: dict[str, Any] | None = None
    order_id: str | None = Field(default=None, max_length=64)
    reference: str | None = Field(default=None, max_length=100)

    @field_validator("order_id", "reference")
    @classmethod
    def no_whitespace(cls, v: str | None) -> str | None:
        if v is not None and (v != v.strip() or " " in v):
            raise ValueError("identifiers must not contain whitespace")
        return v


class ActionOut(BaseModel):
    type: str
    price: Decimal


class LineItemOut(BaseModel):
    item: str
    actions: list[ActionOut]
    quantity: int
    total: Decimal | None


class OrderResponse(BaseModel):
    id: str
    order_id: str
    reference: str
    user_id: str
    email: str
    line_items: list[LineItemOut]
    grand_total: Decimal
    metadata: dict[str, Any]
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CreateOrderResponse(BaseModel):
    authorization_url: str
    order_id: str
    reference: str
    order: OrderResponse


class VerifyPaymentResponse(BaseModel):
    status: bool
    data: dict[str, Any] | None = None


class WebhookAck(BaseModel):
    success: bool
    message: str | None = None
