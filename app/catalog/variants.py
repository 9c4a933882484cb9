# app/catalog/variants.py
import math
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.catalog.assets import dedupe_assets, first_asset, sanitize_asset_list
from app.core.exceptions import NotFoundError, NotRetryableError
from app.schemas.variant import Variant, VariantInput, new_variant_id


@dataclass
class UploadedAssets:
    """
    Images uploaded for one variant during the current request
    (already stored, already public URLs).
    """

    main: str | None = None
    album: list[str] = field(default_factory=list)


def coerce_number(value: Any) -> float | None:
    """
    Best-effort numeric parse.

    Accepts ints, floats and numeric strings ("250", " 12.5 ", "1,200").
    Returns None for missing, blank, non-numeric or non-finite values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def coerce_price(value: Any) -> float | None:
    number = coerce_number(value)
    if number is None or number < 0:
        return None
    return number


def coerce_count(value: Any) -> int | None:
    number = coerce_number(value)
    if number is None or number < 0:
        return None
    return int(number)


def _text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def merge_variant(
    incoming: VariantInput,
    existing: Variant | None = None,
    uploaded: UploadedAssets | None = None,
) -> Variant:
    """
    Combine a submitted variant with its stored counterpart.

    A stored variant whose id differs from a submitted `id` is ignored.

    Field policy:
      - numbers (price, count_in_stock, page_count): submitted value wins
        whenever it was provided at all, 0 included; else stored value.
      - text (format, isbn, trim_size): non-blank submitted value wins.
      - main_image: uploaded now > submitted URL > stored > None.
      - album_images: submitted URLs + uploaded now, de-duplicated.
        Stored entries that were not resubmitted are dropped, so removals
        made in the admin form persist.

    Pure: no I/O, inputs are not modified.
    """
    uploaded = uploaded or UploadedAssets()
    incoming_id = _text(incoming.id)
    if existing is not None and incoming_id not in (None, existing.id):
        # a different variant: nothing of the stored one carries over
        existing = None

    def number(name: str, coerce) -> Any:
        value = coerce(getattr(incoming, name))
        if value is not None:
            return value
        if existing is not None:
            return getattr(existing, name)
        return None

    def text(name: str) -> str | None:
        value = _text(getattr(incoming, name))
        if value is not None:
            return value
        if existing is not None:
            return getattr(existing, name)
        return None

    main_image = (
        uploaded.main
        or first_asset(incoming.main_image)
        or (existing.main_image if existing is not None else None)
        or None
    )

    album_images = dedupe_assets(
        sanitize_asset_list(incoming.album_images),
        sanitize_asset_list(uploaded.album),
    )

    if existing is not None:
        variant_id = existing.id
    else:
        variant_id = incoming_id or new_variant_id()

    return Variant(
        id=variant_id,
        format=text("format") or "Standard",
        price=number("price", coerce_price) or 0.0,
        count_in_stock=number("count_in_stock", coerce_count) or 0,
        isbn=text("isbn"),
        trim_size=text("trim_size"),
        page_count=number("page_count", coerce_count),
        main_image=main_image,
        album_images=album_images,
    )


def merge_variants(
    incoming: list[VariantInput],
    existing: list[Variant],
    uploads: dict[int, UploadedAssets] | None = None,
) -> list[Variant]:
    """
    Merge a submitted variants array with the stored one.

    An entry carrying the id of a stored variant is merged with that
    variant wherever it sits in either list, so removing or reordering
    formats never hands one format's id or images to another. Entries
    without an id fall back to the stored variant at the same position,
    unless that one was already claimed by id. Unknown ids start a new
    variant.

    Raises:
        NotFoundError: an upload targets a position that was not submitted.
    """
    uploads = uploads or {}
    missing = sorted(idx for idx in uploads if idx < 0 or idx >= len(incoming))
    if missing:
        raise NotFoundError(f"No submitted variant at index {missing[0]}")

    stored_by_id = {variant.id: variant for variant in existing}
    claimed = {
        variant_id
        for variant_id in (_text(entry.id) for entry in incoming)
        if variant_id in stored_by_id
    }

    used: set[str] = set()

    def counterpart(idx: int, entry: VariantInput) -> Variant | None:
        variant_id = _text(entry.id)
        if variant_id is not None:
            pair = stored_by_id.get(variant_id)
        elif idx < len(existing) and existing[idx].id not in claimed:
            pair = existing[idx]
        else:
            pair = None
        if pair is None or pair.id in used:
            return None
        used.add(pair.id)
        return pair

    merged: list[Variant] = []
    seen_ids: set[str] = set()
    for idx, entry in enumerate(incoming):
        pair = counterpart(idx, entry)
        variant = merge_variant(entry, pair, uploads.get(idx))
        if variant.id in seen_ids:
            # the same id submitted twice
            variant = variant.model_copy(update={"id": new_variant_id()})
        seen_ids.add(variant.id)
        merged.append(variant)
    return merged


def load_variants(raw: Any) -> list[Variant]:
    """
    Turn the stored JSON array into Variant objects.

    Raises:
        NotRetryableError: the stored value is not a list of variant objects.
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise NotRetryableError("Stored variants are malformed")

    variants: list[Variant] = []
    for entry in raw:
        if isinstance(entry, Variant):
            variants.append(entry)
            continue
        if not isinstance(entry, dict):
            raise NotRetryableError("Stored variants are malformed")
        try:
            variants.append(Variant.model_validate(entry))
        except PydanticValidationError as exc:
            raise NotRetryableError("Stored variants are malformed") from exc
    return variants


def dump_variants(variants: list[Variant]) -> list[dict]:
    """JSON-ready representation for the products.variants column."""
    return [v.model_dump(mode="json") for v in variants]


def total_stock(variants: list[Variant]) -> int:
    return sum(v.count_in_stock for v in variants)


def find_variant(item: Any, variant_id: str | None) -> Variant | None:
    """
    Resolve a (product, variant) pair.

    - variant_id given: the matching variant, else NotFoundError.
    - variant_id None: the only variant when there is exactly one,
      None when the product has no variants (implicit Standard row),
      NotFoundError when the choice is ambiguous.
    """
    variants = load_variants(item.variants)

    if variant_id is None:
        if not variants:
            return None
        if len(variants) == 1:
            return variants[0]
        raise NotFoundError("Variant must be specified for this product")

    for variant in variants:
        if variant.id == variant_id:
            return variant
    raise NotFoundError("Variant not found for this product")
