from types import SimpleNamespace

import pytest

from app.catalog.variants import (
    UploadedAssets,
    coerce_count,
    coerce_number,
    coerce_price,
    find_variant,
    load_variants,
    merge_variant,
    merge_variants,
)
from app.core.exceptions import NotFoundError, NotRetryableError
from app.schemas.variant import Variant, VariantInput


@pytest.fixture
def stored():
    return Variant(
        id="v-1",
        format="Paperback",
        price=12.5,
        count_in_stock=4,
        isbn="978-1",
        page_count=200,
        main_image="http://old-main",
        album_images=["http://old1", "http://old2"],
    )


def test_coercion_helpers():
    assert coerce_number("1,200") == 1200.0
    assert coerce_number(" 12.5 ") == 12.5
    assert coerce_number("") is None
    assert coerce_number("abc") is None
    assert coerce_number(float("nan")) is None
    assert coerce_number(True) is None
    assert coerce_price("-3") is None
    assert coerce_count("7.9") == 7
    assert coerce_count(-1) is None


def test_merge_drops_album_images_removed_by_client(stored):
    incoming = VariantInput(album_images=["http://old1"])
    merged = merge_variant(incoming, stored)
    assert merged.album_images == ["http://old1"]


def test_merge_appends_uploaded_album_images(stored):
    incoming = VariantInput(album_images=["http://old1", {"preview": "blob:x"}])
    uploaded = UploadedAssets(album=["http://new1", "http://old1"])
    merged = merge_variant(incoming, stored, uploaded)
    assert merged.album_images == ["http://old1", "http://new1"]


def test_merge_main_image_precedence(stored):
    assert merge_variant(VariantInput(), stored).main_image == "http://old-main"
    assert (
        merge_variant(VariantInput(main_image="http://given"), stored).main_image
        == "http://given"
    )
    uploaded = UploadedAssets(main="http://uploaded")
    assert (
        merge_variant(VariantInput(main_image="http://given"), stored, uploaded).main_image
        == "http://uploaded"
    )
    assert merge_variant(VariantInput(main_image={"preview": "blob:1"})).main_image is None


def test_merge_numbers_keep_explicit_zero(stored):
    merged = merge_variant(VariantInput(price="0", count_in_stock=0), stored)
    assert merged.price == 0.0
    assert merged.count_in_stock == 0


def test_merge_falls_back_to_stored_values(stored):
    merged = merge_variant(
        VariantInput(price="", count_in_stock="n/a", format="  ", isbn=None), stored
    )
    assert merged.price == 12.5
    assert merged.count_in_stock == 4
    assert merged.format == "Paperback"
    assert merged.isbn == "978-1"
    assert merged.page_count == 200
    assert merged.id == "v-1"


def test_merge_new_variant_defaults():
    merged = merge_variant(VariantInput(price="9.99"))
    assert merged.format == "Standard"
    assert merged.price == 9.99
    assert merged.count_in_stock == 0
    assert merged.album_images == []
    assert merged.id


def test_merge_does_not_modify_inputs(stored):
    incoming = VariantInput(price=1, album_images=["http://old1"])
    before_stored = stored.model_dump()
    before_incoming = incoming.model_dump()
    merge_variant(incoming, stored, UploadedAssets(album=["http://n"]))
    assert stored.model_dump() == before_stored
    assert incoming.model_dump() == before_incoming


def test_merge_variants_by_position(stored):
    merged = merge_variants(
        [VariantInput(price=15), VariantInput(format="Hardcover", price=30)],
        [stored],
        {1: UploadedAssets(main="http://hc-main")},
    )
    assert [v.format for v in merged] == ["Paperback", "Hardcover"]
    assert merged[0].id == "v-1"
    assert merged[0].price == 15
    assert merged[1].main_image == "http://hc-main"


def test_merge_variants_pairs_by_id_when_a_variant_is_removed():
    paperback = Variant(id="pb", format="Paperback", price=10, main_image="http://pb-main")
    large_print = Variant(id="lp", format="Large Print", price=18, count_in_stock=2)
    hardcover = Variant(
        id="hc", format="Hardcover", price=25, count_in_stock=1, main_image="http://hc-main"
    )

    merged = merge_variants(
        [
            VariantInput(id="pb", format="Paperback"),
            VariantInput(id="hc", format="Hardcover", price=30),
        ],
        [paperback, large_print, hardcover],
    )

    assert [(v.id, v.format, v.price) for v in merged] == [
        ("pb", "Paperback", 10),
        ("hc", "Hardcover", 30),
    ]
    assert merged[1].main_image == "http://hc-main"
    assert merged[1].count_in_stock == 1


def test_merge_variants_removed_first_does_not_leak_into_next(stored):
    hardcover = Variant(id="hc", format="Hardcover", price=25)
    merged = merge_variants([VariantInput(id="hc", price=30)], [stored, hardcover])

    assert [v.id for v in merged] == ["hc"]
    assert merged[0].format == "Hardcover"
    assert merged[0].main_image is None


def test_merge_variants_position_skips_variants_claimed_by_id(stored):
    hardcover = Variant(id="hc", format="Hardcover", price=25)
    merged = merge_variants(
        [VariantInput(format="Box Set", price=50), VariantInput(id="v-1")],
        [stored, hardcover],
    )

    assert merged[1].id == "v-1"
    assert merged[1].main_image == "http://old-main"
    assert merged[0].id not in {"v-1", "hc"}
    assert merged[0].format == "Box Set"


def test_merge_variants_repeated_id_gets_fresh_id(stored):
    merged = merge_variants([VariantInput(id="v-1"), VariantInput(id="v-1")], [stored])
    assert merged[0].id == "v-1"
    assert merged[1].id != "v-1"
    assert merged[1].main_image is None


def test_merge_ignores_stored_variant_with_other_id(stored):
    merged = merge_variant(VariantInput(id="other", format="Hardcover"), stored)
    assert merged.id == "other"
    assert merged.price == 0
    assert merged.main_image is None


def test_merge_variants_rejects_upload_without_variant():
    with pytest.raises(NotFoundError):
        merge_variants([VariantInput()], [], {3: UploadedAssets(main="http://x")})


def test_load_variants_rejects_malformed_storage():
    with pytest.raises(NotRetryableError):
        load_variants({"format": "Paperback"})
    with pytest.raises(NotRetryableError):
        load_variants(["Paperback"])
    with pytest.raises(NotRetryableError):
        load_variants([{"price": -5}])
    assert load_variants(None) == []


def test_find_variant():
    single = SimpleNamespace(variants=[{"id": "a", "format": "Paperback"}])
    double = SimpleNamespace(
        variants=[{"id": "a", "format": "Paperback"}, {"id": "b", "format": "Hardcover"}]
    )
    empty = SimpleNamespace(variants=[])

    assert find_variant(single, None).id == "a"
    assert find_variant(double, "b").format == "Hardcover"
    assert find_variant(empty, None) is None

    with pytest.raises(NotFoundError):
        find_variant(double, None)
    with pytest.raises(NotFoundError):
        find_variant(double, "zzz")
