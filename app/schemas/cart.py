# app/schemas/cart.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field


class CartItemCreate(SQLModel):
    """
    Body of POST /cart.

    `variant_id` can be left out when the book has a single format
    (or none, in which case the implicit Standard format is used).
    """

    product_id: uuid.UUID
    variant_id: str | None = None
    quantity: int = Field(gt=0)


class CartItemUpdate(SQLModel):
    quantity: int = Field(gt=0)


class CartItemRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    product_id: uuid.UUID
    variant_id: str | None = None
    quantity: int
    snapshot_price: float
    product_name: str | None = None
    format: str | None = None
    main_image: str | None = None
    line_total: float
    created_at: datetime


class CartSummary(SQLModel):
    """Cart lines plus quantity and price totals."""

    items: list[CartItemRead]
    total_quantity: int
    total_price: float
