# app/models/cms.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class CmsBanner(SQLModel, table=True):
    """
    Homepage carousel banner.
    """

    __tablename__ = "cms_banners"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    title: str = Field(max_length=200)
    subtitle: str | None = None
    cta_text: str | None = None
    cta_link: str | None = None
    background_color: str | None = Field(default=None, max_length=20)
    text_color: str | None = Field(default=None, max_length=20)
    animation_type: str | None = Field(default=None, max_length=30)

    order: int = Field(default=0, index=True, description="Carousel position")
    is_active: bool = Field(default=True, index=True)

    image_desktop: str | None = Field(default=None, description="Public URL")
    image_mobile: str | None = Field(default=None, description="Public URL")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class StaticPage(SQLModel, table=True):
    """
    Editable content page (About, FAQ, Shipping policy, ...).
    """

    __tablename__ = "static_pages"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    slug: str = Field(max_length=120, unique=True, index=True)
    title: str = Field(max_length=200)
    content: str = Field(default="", description="HTML body")
    is_active: bool = Field(default=True)

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
