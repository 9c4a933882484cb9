import uuid
from types import SimpleNamespace

from app.catalog.listing import PLACEHOLDER_IMAGE, expand, expand_all, group, price_range
from app.models.product import Product


def _product(name="Blue Period", slug=None, variants=None, **fields):
    return Product(
        name=name,
        slug=slug or name.lower().replace(" ", "-"),
        variants=variants or [],
        **fields,
    )


def test_expand_product_without_variants():
    item = _product(category="manga")
    rows = expand(item)

    assert len(rows) == 1
    row = rows[0]
    assert row.format == "Standard"
    assert row.price == 0
    assert row.count_in_stock == 0
    assert row.variants_count == 0
    assert row.key.variant_id is None
    assert row.id == str(item.id)
    assert row.category == "manga"


def test_expand_one_row_per_variant():
    item = _product(
        variants=[
            {"id": "p", "format": "Paperback", "price": 10, "count_in_stock": 2},
            {"id": "h", "format": "Hardcover", "price": 25, "count_in_stock": 0},
            {"id": "d", "format": "Deluxe", "price": 60, "count_in_stock": 1},
        ]
    )
    rows = expand(item)

    assert [r.format for r in rows] == ["Paperback", "Hardcover", "Deluxe"]
    assert all(r.variants_count == 3 for r in rows)
    assert all(r.name == "Blue Period" for r in rows)
    assert rows[1].key.parent_id == str(item.id)
    assert rows[1].key.variant_id == "h"
    assert rows[1].id == f"{item.id}-h"


def test_expand_does_not_touch_item():
    variants = [{"id": "p", "format": "Paperback", "price": 10, "count_in_stock": 2}]
    item = _product(variants=variants)
    expand(item)
    assert item.variants == [
        {"id": "p", "format": "Paperback", "price": 10, "count_in_stock": 2}
    ]


def test_group_collapses_expanded_item():
    variants = [
        {
            "id": "p",
            "format": "Paperback",
            "price": 10,
            "count_in_stock": 2,
            "main_image": "https://cdn/p.png",
            "album_images": ["https://cdn/p1.png", "https://cdn/p2.png"],
        },
        {
            "id": "h",
            "format": "Hardcover",
            "price": 25,
            "count_in_stock": 0,
            "main_image": None,
            "album_images": [],
        },
    ]
    item = _product(variants=variants)
    groups = group(expand(item))

    assert len(groups) == 1
    card = groups[0]
    assert card.key == item.slug
    assert card.image == "https://cdn/p.png"
    summaries = [
        {
            "id": v.variant_id,
            "format": v.format,
            "price": v.price,
            "count_in_stock": v.count_in_stock,
            "main_image": v.main_image,
            "album_images": v.album_images,
        }
        for v in card.variants
    ]
    assert summaries == variants
    assert card.price.low == 10
    assert card.price.high == 25


def test_group_keeps_first_seen_order_across_items():
    first = _product(name="Alpha", variants=[{"format": "Paperback", "price": 5}])
    second = _product(name="Beta", variants=[{"format": "Paperback", "price": 7}])
    groups = group(expand_all([first, second]))
    assert [g.name for g in groups] == ["Alpha", "Beta"]


def test_group_ignores_unset_prices_in_range():
    item = _product(
        variants=[
            {"format": "A", "price": 0},
            {"format": "B", "price": 250},
            {"format": "C", "price": 250},
            {"format": "D", "price": 0},
        ]
    )
    card = group(expand(item))[0]
    assert card.price.low == 250
    assert card.price.high == 250
    assert card.price.is_single


def test_group_image_falls_back_to_placeholder():
    item = _product(variants=[{"format": "A", "price": 3}])
    assert group(expand(item))[0].image == PLACEHOLDER_IMAGE
    assert group(expand(item), placeholder="/p.png")[0].image == "/p.png"


def test_group_image_uses_first_variant_with_main_image():
    item = _product(
        variants=[
            {"format": "A", "price": 3},
            {"format": "B", "price": 4, "main_image": "http://b"},
            {"format": "C", "price": 5, "main_image": "http://c"},
        ]
    )
    assert group(expand(item))[0].image == "http://b"


def test_group_key_falls_back_to_parent_id():
    parent_id = str(uuid.uuid4())
    item = SimpleNamespace(
        id=parent_id,
        name="No Slug",
        variants=[{"format": "A", "price": 3}, {"format": "B", "price": 4}],
    )
    groups = group(expand(item))
    assert len(groups) == 1
    assert groups[0].key == parent_id


def test_price_range():
    assert price_range([12.0]).low == 12.0
    assert price_range([0]).low == 0
    assert price_range([0, 0]) is None
    assert price_range([None, "bad", 3, 9]).high == 9
