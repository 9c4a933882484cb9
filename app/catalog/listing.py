# app/catalog/listing.py
"""
Flat rows for listing views and grouped cards for display views.

expand() turns one product into one row per purchasable format;
group() folds rows back into one card per title. Every listing route
goes through this pair so the two views always agree.
"""
from typing import Any, Iterable

from app.catalog.variants import coerce_price, load_variants
from app.schemas.listing import (
    DisplayGroup,
    PriceRange,
    SellableRow,
    VariantKey,
    VariantSummary,
)

PLACEHOLDER_IMAGE = "/assets/placeholder-image.png"

STANDARD_FORMAT = "Standard"

# Parent fields copied onto every row
_PARENT_FIELDS = (
    "slug",
    "name",
    "description",
    "category",
    "subcategory",
    "series_title",
    "volume_number",
    "publisher",
    "author",
    "age",
    "publication_date",
    "status",
    "is_promotion",
    "is_new_arrival",
    "is_popular",
    "created_at",
    "updated_at",
)


def _parent_fields(item: Any) -> dict[str, Any]:
    fields = {name: getattr(item, name, None) for name in _PARENT_FIELDS}
    for flag in ("is_promotion", "is_new_arrival", "is_popular"):
        fields[flag] = bool(fields[flag])
    return fields


def expand(item: Any) -> list[SellableRow]:
    """
    One sellable row per variant, in variant order.

    A product without variants yields a single "Standard" row with
    price/stock defaulting to 0 and variants_count 0.
    The product is not modified.
    """
    parent_id = str(item.id)
    parent = _parent_fields(item)
    variants = load_variants(item.variants)

    if not variants:
        key = VariantKey(parent_id=parent_id)
        return [
            SellableRow(
                id=key.composite,
                key=key,
                parent_id=parent_id,
                format=STANDARD_FORMAT,
                price=coerce_price(getattr(item, "price", None)) or 0.0,
                count_in_stock=int(getattr(item, "count_in_stock", None) or 0),
                variants_count=0,
                **parent,
            )
        ]

    rows: list[SellableRow] = []
    for variant in variants:
        key = VariantKey(parent_id=parent_id, variant_id=variant.id)
        rows.append(
            SellableRow(
                id=key.composite,
                key=key,
                parent_id=parent_id,
                format=variant.format or STANDARD_FORMAT,
                price=variant.price,
                count_in_stock=variant.count_in_stock,
                isbn=variant.isbn,
                trim_size=variant.trim_size,
                page_count=variant.page_count,
                main_image=variant.main_image or None,
                album_images=list(variant.album_images),
                variants_count=len(variants),
                **parent,
            )
        )
    return rows


def expand_all(items: Iterable[Any]) -> list[SellableRow]:
    rows: list[SellableRow] = []
    for item in items:
        rows.extend(expand(item))
    return rows


def group_key(row: SellableRow) -> str:
    """slug, else parent id, else the parent part of the row identity."""
    return row.slug or row.parent_id or row.key.parent_id


def price_range(prices: list[float | None]) -> PriceRange | None:
    """
    Representative price of a card.

    One variant: its own price. Several: [min, max] over prices > 0,
    unset (<= 0 or unparseable) prices being ignored.
    """
    if len(prices) == 1:
        price = coerce_price(prices[0])
        return PriceRange(low=price, high=price) if price is not None else None

    usable = [p for p in (coerce_price(p) for p in prices) if p is not None and p > 0]
    if not usable:
        return None
    return PriceRange(low=min(usable), high=max(usable))


def group(
    rows: Iterable[SellableRow],
    placeholder: str = PLACEHOLDER_IMAGE,
) -> list[DisplayGroup]:
    """
    Fold sellable rows into one display card per title, first-seen order.
    """
    groups: dict[str, DisplayGroup] = {}

    for row in rows:
        key = group_key(row)
        card = groups.get(key)
        if card is None:
            card = DisplayGroup(
                key=key,
                parent_id=row.parent_id or row.key.parent_id,
                slug=row.slug,
                name=row.name,
                category=row.category,
                subcategory=row.subcategory,
                author=row.author,
                series_title=row.series_title,
                volume_number=row.volume_number,
                status=row.status,
                image=placeholder,
            )
            groups[key] = card

        card.variants.append(
            VariantSummary(
                variant_id=row.key.variant_id,
                format=row.format,
                price=coerce_price(row.price),
                count_in_stock=row.count_in_stock,
                main_image=row.main_image,
                album_images=list(row.album_images),
            )
        )

    for card in groups.values():
        card.image = next(
            (v.main_image for v in card.variants if v.main_image),
            placeholder,
        )
        card.price = price_range([v.price for v in card.variants])

    return list(groups.values())
