# app/schemas/listing.py
from datetime import date, datetime

from sqlmodel import SQLModel, Field


class VariantKey(SQLModel):
    """
    Explicit (product, variant) identity of a sellable row.

    variant_id is None for the implicit "Standard" row of a product
    that has no variants.
    """

    parent_id: str
    variant_id: str | None = None

    @property
    def composite(self) -> str:
        if self.variant_id is None:
            return self.parent_id
        return f"{self.parent_id}-{self.variant_id}"


class SellableRow(SQLModel):
    """
    One purchasable unit for listing / filtering views:
    a variant's own fields plus its parent's descriptive fields.
    """

    id: str
    key: VariantKey
    parent_id: str | None = None
    slug: str | None = None

    # parent descriptive fields
    name: str
    description: str | None = None
    category: str | None = None
    subcategory: str | None = None
    series_title: str | None = None
    volume_number: int | None = None
    publisher: str | None = None
    author: str | None = None
    age: str | None = None
    publication_date: date | None = None
    status: str | None = None
    is_promotion: bool = False
    is_new_arrival: bool = False
    is_popular: bool = False

    # variant fields
    format: str = "Standard"
    price: float = 0.0
    count_in_stock: int = 0
    isbn: str | None = None
    trim_size: str | None = None
    page_count: int | None = None
    main_image: str | None = None
    album_images: list[str] = Field(default_factory=list)

    variants_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class VariantSummary(SQLModel):
    """
    Per-variant entry inside a display card.
    """

    variant_id: str | None = None
    format: str
    price: float | None = None
    count_in_stock: int = 0
    main_image: str | None = None
    album_images: list[str] = Field(default_factory=list)


class PriceRange(SQLModel):
    """
    Closed price interval for a display card. low == high renders as one price.
    """

    low: float
    high: float

    @property
    def is_single(self) -> bool:
        return self.low == self.high


class DisplayGroup(SQLModel):
    """
    One card per title: parent identity plus its variant summaries.
    """

    key: str
    parent_id: str | None = None
    slug: str | None = None
    name: str
    category: str | None = None
    subcategory: str | None = None
    author: str | None = None
    series_title: str | None = None
    volume_number: int | None = None
    status: str | None = None
    image: str
    price: PriceRange | None = None
    variants: list[VariantSummary] = Field(default_factory=list)


class FeaturedGroups(SQLModel):
    """
    Homepage merchandising sections.
    """

    promotions: list[DisplayGroup] = Field(default_factory=list)
    new_arrivals: list[DisplayGroup] = Field(default_factory=list)
    popular: list[DisplayGroup] = Field(default_factory=list)
