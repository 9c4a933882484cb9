# app/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

OrderStatus = Literal["Pending", "Processing", "Shipped", "Delivered", "Cancelled"]
PaymentMethod = Literal["Cash on Delivery", "Card", "PayPal"]


class ShippingAddress(SQLModel):
    model_config = ConfigDict(extra="forbid")

    full_name: str
    phone: str | None = None
    address: str
    city: str
    postal_code: str
    country: str

    @field_validator("full_name", "address", "city", "postal_code", "country")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderCreate(SQLModel):
    """
    Checkout body. Only where to ship and how to pay; the lines, prices
    and owner all come from the server side basket.
    """

    model_config = ConfigDict(extra="forbid")

    shipping_address: ShippingAddress
    payment_method: PaymentMethod = "Cash on Delivery"


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    user_id: uuid.UUID
    full_name: str
    phone: str | None
    address: str
    city: str
    postal_code: str
    country: str
    payment_method: str
    items_price: float
    shipping_price: float
    tax_price: float
    total_price: float
    is_paid: bool
    paid_at: datetime | None
    status: OrderStatus
    created_at: datetime


class OrderItemRead(SQLModel):
    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    variant_id: str | None
    name: str
    format: str | None
    image: str | None
    quantity: int
    unit_price: float
    line_total: float


class OrderWithItemsRead(OrderRead):
    items: list[OrderItemRead]


class OrderStatusUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
