# app/schemas/category.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class Subcategory(SQLModel):
    name: str = Field(max_length=100)
    slug: str | None = None

    @field_validator("name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("subcategory name cannot be empty")
        return v


class CategoryCreate(SQLModel):
    """
    Payload for creating a category.

    - slug defaults to the slugified `name`.
    - subcategory slugs are generated from their names when omitted.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    slug: str | None = None
    subcategories: list[Subcategory] = Field(default_factory=list)
    color: str | None = Field(default=None, max_length=20)
    text_color: str | None = Field(default=None, max_length=20)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class CategoryUpdate(SQLModel):
    """
    Partial update payload for categories.
    A provided `subcategories` list replaces the stored one.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    slug: str | None = None
    subcategories: list[Subcategory] | None = None
    color: str | None = Field(default=None, max_length=20)
    text_color: str | None = Field(default=None, max_length=20)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class SubcategoryRead(SQLModel):
    name: str
    slug: str


class CategoryRead(SQLModel):
    id: uuid.UUID
    name: str
    slug: str
    subcategories: list[SubcategoryRead]
    color: str | None
    text_color: str | None
    created_at: datetime
