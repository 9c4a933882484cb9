# app/schemas/variant.py
import uuid
from typing import Any

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


def new_variant_id() -> str:
    return uuid.uuid4().hex


class Variant(SQLModel):
    """
    One purchasable format of a product (e.g. Paperback, Hardcover).

    Stored inside products.variants as a JSON object; it has no row or
    lifecycle of its own outside its parent product.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=new_variant_id)
    format: str = "Standard"
    price: float = Field(default=0.0, ge=0)
    count_in_stock: int = Field(default=0, ge=0)
    isbn: str | None = None
    trim_size: str | None = None
    page_count: int | None = None
    main_image: str | None = None
    album_images: list[str] = Field(default_factory=list)


class VariantInput(SQLModel):
    """
    A variant as submitted by the admin form.

    Everything is optional and loosely typed: prices and counts may arrive
    as strings from multipart forms, and image fields may contain
    client-only preview objects that must be filtered out before storage.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    format: str | None = None
    price: Any = None
    count_in_stock: Any = None
    isbn: str | None = None
    trim_size: str | None = None
    page_count: Any = None
    main_image: Any = None
    album_images: list[Any] = Field(default_factory=list)
