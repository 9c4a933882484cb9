# app/models/product.py
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(SQLModel, table=True):
    """
    Catalog title (book / manga volume) sold in one or more formats.

    Variants (Paperback, Hardcover, ...) are embedded as a JSON array:
    they are created, edited and deleted only together with their product.

    Status is kept in three columns:
      - stock_status:     computed from variant stock (InStock | OutOfStock)
      - editorial_status: last status explicitly submitted by an editor
      - status:           visible value, merged from the two above
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Title as shown on the storefront",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    description: str | None = Field(default=None)
    category: str | None = Field(default=None, index=True)
    subcategory: str | None = Field(default=None, index=True)
    series_title: str | None = Field(default=None)
    volume_number: int | None = Field(default=None)
    publisher: str | None = Field(default=None)
    author: str | None = Field(default=None)
    author_bio: str | None = Field(default=None)
    publication_date: date | None = Field(default=None)
    age: str | None = Field(default=None, description="Age rating")

    variants: list[dict] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Embedded variant objects, insertion order",
    )

    status: str = Field(
        default="Active",
        index=True,
        description="Active | Inactive | OutOfStock",
    )
    stock_status: str = Field(default="OutOfStock")
    editorial_status: str | None = Field(default=None)

    is_promotion: bool = Field(default=False, index=True)
    is_new_arrival: bool = Field(default=False, index=True)
    is_popular: bool = Field(default=False, index=True)

    created_at: datetime = Field(
        default_factory=_utcnow,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=_utcnow,
        description="Last modification timestamp (UTC)",
    )
