# app/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order placed from a cart.

    Totals are stored at checkout time:
      total_price = items_price + shipping_price + tax_price
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    # Shipping address
    full_name: str
    phone: str | None = None
    address: str
    city: str
    postal_code: str
    country: str

    payment_method: str = Field(default="Cash on Delivery")

    items_price: float = Field(default=0.0)
    shipping_price: float = Field(default=0.0)
    tax_price: float = Field(default=0.0)
    total_price: float = Field(default=0.0)

    is_paid: bool = Field(default=False, index=True)
    paid_at: datetime | None = None

    # Pending | Processing | Shipped | Delivered | Cancelled
    status: str = Field(
        default="Pending",
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    One purchased format, frozen at checkout.

    product_id is not a foreign key: order history outlives deleted products.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(index=True)
    variant_id: str | None = None

    name: str
    format: str | None = None
    image: str | None = None

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    unit_price: float = Field(
        description="Unit price at time of order (pre-tax)",
    )
