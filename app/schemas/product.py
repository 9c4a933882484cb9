# app/schemas/product.py
import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.variant import Variant, VariantInput

ProductStatusValue = Literal["Active", "Inactive", "OutOfStock"]


class ProductFields(SQLModel):
    """
    Descriptive fields shared by create/update payloads.
    """

    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    subcategory: str | None = Field(default=None, max_length=100)
    series_title: str | None = None
    volume_number: int | None = Field(default=None, ge=0)
    publisher: str | None = None
    author: str | None = None
    author_bio: str | None = None
    publication_date: date | None = None
    age: str | None = None


class ProductCreate(ProductFields):
    """
    Body of the JSON create endpoint (the multipart one builds it too).

    - slug is optional: if omitted, generated from `name` (+ volume number).
    - variants may carry image URLs; uploaded files are attached by position.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    slug: str | None = None
    variants: list[VariantInput] = Field(default_factory=list)
    status: ProductStatusValue | None = None
    is_promotion: bool = False
    is_new_arrival: bool = False
    is_popular: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ProductUpdate(ProductFields):
    """
    Update payload for products.

    Omitted (None) fields keep their stored value. An omitted or empty
    `variants` array keeps the stored variants untouched.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    slug: str | None = None
    variants: list[VariantInput] | None = None
    status: ProductStatusValue | None = None
    is_promotion: bool | None = None
    is_new_arrival: bool | None = None
    is_popular: bool | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None


class FeaturedUpdate(SQLModel):
    """
    Admin payload toggling merchandising flags.
    """

    model_config = ConfigDict(extra="forbid")

    is_promotion: bool | None = None
    is_new_arrival: bool | None = None
    is_popular: bool | None = None


class ProductRead(ProductFields):
    """
    Full product representation (detail page / admin table).
    """

    id: uuid.UUID
    name: str
    slug: str
    variants: list[Variant]
    status: ProductStatusValue
    is_promotion: bool
    is_new_arrival: bool
    is_popular: bool
    created_at: datetime
    updated_at: datetime
