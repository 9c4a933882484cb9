# app/schemas/cms.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class BannerFields(SQLModel):
    """
    Text fields of a banner, as posted by the admin form.
    Images are sent as files alongside these fields.
    """

    title: str | None = Field(default=None, max_length=200)
    subtitle: str | None = None
    cta_text: str | None = None
    cta_link: str | None = None
    background_color: str | None = None
    text_color: str | None = None
    animation_type: str | None = None
    order: int | None = None
    is_active: bool | None = None


class BannerRead(SQLModel):
    id: uuid.UUID
    title: str
    subtitle: str | None
    cta_text: str | None
    cta_link: str | None
    background_color: str | None
    text_color: str | None
    animation_type: str | None
    order: int
    is_active: bool
    image_desktop: str | None
    image_mobile: str | None
    created_at: datetime


class StaticPageCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    slug: str | None = None
    title: str = Field(max_length=200)
    content: str = ""
    is_active: bool = True

    @field_validator("title")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty")
        return v


class StaticPageUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    slug: str | None = None
    title: str | None = Field(default=None, max_length=200)
    content: str | None = None
    is_active: bool | None = None


class StaticPageRead(SQLModel):
    id: uuid.UUID
    slug: str
    title: str
    content: str
    is_active: bool
    updated_at: datetime
