# app/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    One line of a customer's basket: a product in one format.

    The service merges repeat adds, so (user, product, variant) is unique.
    Name, format, price and image are copied at add time for display.
    """

    __tablename__ = "cart_items"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    product_id: uuid.UUID = Field(
        foreign_key="products.id", index=True, ondelete="CASCADE"
    )

    # None for a product sold without variants
    variant_id: str | None = Field(default=None, index=True)

    quantity: int = Field(gt=0)
    snapshot_price: float

    product_name: str | None = None
    format: str | None = None
    main_image: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
