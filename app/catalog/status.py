# app/catalog/status.py
from enum import Enum
from typing import Any

from app.catalog.variants import load_variants, total_stock
from app.schemas.variant import Variant


class ProductStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    OUT_OF_STOCK = "OutOfStock"


class StockStatus(str, Enum):
    IN_STOCK = "InStock"
    OUT_OF_STOCK = "OutOfStock"


def compute_stock_status(variants: list[Variant]) -> StockStatus:
    if total_stock(variants) == 0:
        return StockStatus.OUT_OF_STOCK
    return StockStatus.IN_STOCK


def merge_status(
    stock_status: StockStatus,
    editorial_status: ProductStatus | str | None,
) -> ProductStatus:
    """
    Visible status from the two stored parts.

    No stock always wins; otherwise the editor's choice (default Active).
    """
    if stock_status == StockStatus.OUT_OF_STOCK:
        return ProductStatus.OUT_OF_STOCK
    if editorial_status is None:
        return ProductStatus.ACTIVE
    return ProductStatus(editorial_status)


def recompute_status(
    item: Any,
    explicit_status: ProductStatus | str | None = None,
) -> ProductStatus:
    """
    Status to store after a create / update touching variants or status.

    Zero total stock -> OutOfStock, overriding any explicit value.
    Otherwise: explicit value, else the previously stored status, else Active.
    A product that went out of stock stays OutOfStock after a restock
    until a status is submitted again.
    """
    stock_status = compute_stock_status(load_variants(item.variants))
    editorial = explicit_status or getattr(item, "status", None)
    return merge_status(stock_status, editorial)


def apply_status(item: Any, explicit_status: ProductStatus | str | None = None) -> None:
    """
    Refresh the status, stock_status and editorial_status columns of a
    stored product after its variants or status changed.
    """
    item.status = recompute_status(item, explicit_status).value
    item.stock_status = compute_stock_status(load_variants(item.variants)).value
    if explicit_status is not None:
        item.editorial_status = ProductStatus(explicit_status).value
