from types import SimpleNamespace

from app.catalog.status import (
    ProductStatus,
    StockStatus,
    apply_status,
    merge_status,
    recompute_status,
)

IN_STOCK = [{"format": "Paperback", "price": 10, "count_in_stock": 3}]
NO_STOCK = [{"format": "Paperback", "price": 10, "count_in_stock": 0}]


def _item(variants, status=None):
    return SimpleNamespace(
        variants=variants, status=status, stock_status=None, editorial_status=None
    )


def test_zero_stock_is_out_of_stock_even_if_active_requested():
    assert recompute_status(_item(NO_STOCK, "Active")) == ProductStatus.OUT_OF_STOCK
    assert recompute_status(_item(NO_STOCK), "Active") == ProductStatus.OUT_OF_STOCK
    assert recompute_status(_item([])) == ProductStatus.OUT_OF_STOCK


def test_explicit_status_wins_when_in_stock():
    item = _item(IN_STOCK, "Active")
    assert recompute_status(item, "Inactive") == ProductStatus.INACTIVE


def test_previous_status_kept_without_explicit_value():
    assert recompute_status(_item(IN_STOCK, "Inactive")) == ProductStatus.INACTIVE
    assert recompute_status(_item(IN_STOCK)) == ProductStatus.ACTIVE


def test_restock_does_not_reactivate_on_its_own():
    item = _item(IN_STOCK, "OutOfStock")
    assert recompute_status(item) == ProductStatus.OUT_OF_STOCK
    assert recompute_status(item, "Active") == ProductStatus.ACTIVE


def test_merge_status():
    assert merge_status(StockStatus.OUT_OF_STOCK, "Active") == ProductStatus.OUT_OF_STOCK
    assert merge_status(StockStatus.IN_STOCK, None) == ProductStatus.ACTIVE
    assert merge_status(StockStatus.IN_STOCK, "Inactive") == ProductStatus.INACTIVE


def test_apply_status_fills_all_columns():
    item = _item(NO_STOCK)
    apply_status(item, "Inactive")
    assert item.status == "OutOfStock"
    assert item.stock_status == "OutOfStock"
    assert item.editorial_status == "Inactive"

    item.variants = IN_STOCK
    apply_status(item, "Inactive")
    assert item.status == "Inactive"
    assert item.stock_status == "InStock"
