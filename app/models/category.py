# app/models/category.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Storefront category (e.g. Manga, Light Novels) with its subcategories.

    Subcategories are embedded as a JSON array of {"name", "slug"},
    kept sorted by name.
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=100, unique=True, index=True)
    slug: str = Field(max_length=120, unique=True, index=True)

    subcategories: list[dict] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    # Homepage section colours
    color: str | None = Field(default=None, max_length=20)
    text_color: str | None = Field(default=None, max_length=20)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
