import json

from sqlalchemy.exc import IntegrityError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"0" * 32

ADMIN_PRODUCTS = "/api/v1/admin/products"
PRODUCTS = "/api/v1/products"
CART = "/api/v1/cart"

PB, LP, HC = "https://cdn/pb.png", "https://cdn/lp.png", "https://cdn/hc.png"


def _create(client, **payload):
    response = client.post(ADMIN_PRODUCTS, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_admin_routes_require_admin(client, as_customer):
    assert client.get(ADMIN_PRODUCTS).status_code == 403


def test_admin_routes_reject_guests(client):
    assert client.post(ADMIN_PRODUCTS, json={"name": "X"}).status_code == 401


def test_create_product_json(client, as_admin):
    body = _create(
        client,
        name="The Last Saiyan",
        volume_number=3,
        category="manga",
        variants=[
            {"format": "Paperback", "price": "9.99", "count_in_stock": "5"},
            {
                "format": "Hardcover",
                "price": 19.5,
                "count_in_stock": 0,
                "album_images": ["https://cdn/a.png", {"preview": "blob:1"}, None],
            },
        ],
    )

    assert body["slug"] == "the-last-saiyan-vol-3"
    assert body["status"] == "Active"
    assert [v["format"] for v in body["variants"]] == ["Paperback", "Hardcover"]
    assert body["variants"][0]["price"] == 9.99
    assert body["variants"][0]["count_in_stock"] == 5
    assert body["variants"][1]["album_images"] == ["https://cdn/a.png"]
    assert all(v["id"] for v in body["variants"])


def test_create_without_stock_is_out_of_stock(client, as_admin):
    body = _create(
        client,
        name="Sold Out",
        status="Active",
        variants=[{"format": "Paperback", "price": 5, "count_in_stock": 0}],
    )
    assert body["status"] == "OutOfStock"


def test_create_requires_usable_name(client, as_admin):
    assert client.post(ADMIN_PRODUCTS, json={"name": "   "}).status_code == 422
    assert client.post(ADMIN_PRODUCTS, json={"name": "!!!"}).status_code == 400


def test_duplicate_slug_conflicts(client, as_admin):
    _create(client, name="Monster")
    response = client.post(ADMIN_PRODUCTS, json={"name": "Monster!"})
    assert response.status_code == 409


def test_create_product_multipart_with_images(client, as_admin, storage):
    variants = [
        {"format": "Paperback", "price": "12", "count_in_stock": "2"},
        {"format": "Hardcover", "price": "30", "count_in_stock": "1"},
    ]
    response = client.post(
        ADMIN_PRODUCTS,
        data={"name": "Pluto", "variants": json.dumps(variants), "description": ""},
        files=[
            ("variant_main_image_1", ("main.png", PNG_BYTES, "image/png")),
            ("variant_album_images_1", ("a1.png", PNG_BYTES, "image/png")),
            ("variant_album_images_1", ("a2.png", PNG_BYTES, "image/png")),
        ],
    )
    assert response.status_code == 201, response.text
    body = response.json()

    hardcover = body["variants"][1]
    assert hardcover["main_image"].startswith(storage.BASE)
    assert len(hardcover["album_images"]) == 2
    assert body["variants"][0]["main_image"] is None
    assert body["description"] is None
    assert len(storage.uploaded) == 3
    assert all(f"products/{body['id']}/variants/1/" in p for p in storage.uploaded)


def test_multipart_rejects_unknown_file_field(client, as_admin):
    response = client.post(
        ADMIN_PRODUCTS,
        data={"name": "Pluto"},
        files=[("cover", ("c.png", PNG_BYTES, "image/png"))],
    )
    assert response.status_code == 400


def test_multipart_rejects_unsupported_image(client, as_admin):
    response = client.post(
        ADMIN_PRODUCTS,
        data={"name": "Pluto", "variants": json.dumps([{"format": "Paperback"}])},
        files=[("variant_main_image_0", ("c.gif", b"GIF89a", "image/gif"))],
    )
    assert response.status_code == 400


def test_upload_for_missing_variant_is_not_found(client, as_admin, storage):
    response = client.post(
        ADMIN_PRODUCTS,
        data={"name": "Pluto"},
        files=[("variant_main_image_2", ("m.png", PNG_BYTES, "image/png"))],
    )
    assert response.status_code == 404
    assert storage.uploaded == {}


def test_malformed_variants_field_is_ignored(client, as_admin):
    response = client.post(
        ADMIN_PRODUCTS,
        data={"name": "Dorohedoro", "variants": "[{not json"},
    )
    assert response.status_code == 201
    assert response.json()["variants"] == []


def test_update_replaces_album_and_cleans_storage(client, as_admin, storage):
    created = _create(
        client,
        name="20th Century Boys",
        variants=[
            {
                "format": "Paperback",
                "price": 10,
                "count_in_stock": 3,
                "main_image": "https://cdn/main.png",
                "album_images": ["https://cdn/old1.png", "https://cdn/old2.png"],
            }
        ],
    )
    variant = created["variants"][0]
    variant["album_images"] = ["https://cdn/old1.png"]
    variant["price"] = ""

    response = client.put(
        f"{ADMIN_PRODUCTS}/{created['id']}", json={"variants": [variant]}
    )
    assert response.status_code == 200, response.text
    updated = response.json()["variants"][0]

    assert updated["id"] == variant["id"]
    assert updated["album_images"] == ["https://cdn/old1.png"]
    assert updated["price"] == 10
    assert updated["main_image"] == "https://cdn/main.png"
    assert storage.deleted == ["https://cdn/old2.png"]


def test_update_without_variants_keeps_them(client, as_admin):
    created = _create(
        client,
        name="Akira",
        variants=[{"format": "Paperback", "price": 10, "count_in_stock": 3}],
    )
    response = client.put(
        f"{ADMIN_PRODUCTS}/{created['id']}",
        json={"description": "Neo-Tokyo", "variants": []},
    )
    body = response.json()
    assert body["description"] == "Neo-Tokyo"
    assert body["variants"] == created["variants"]
    assert body["slug"] == "akira"


def test_update_removing_middle_variant_keeps_ids_and_images(
    client, as_admin, auth, customer, storage
):
    created = _create(
        client,
        name="Monster",
        variants=[
            {"format": "Paperback", "price": 10, "count_in_stock": 3, "main_image": PB},
            {"format": "Large Print", "price": 18, "count_in_stock": 2, "main_image": LP},
            {"format": "Hardcover", "price": 25, "count_in_stock": 1, "main_image": HC},
        ],
    )
    paperback, large_print, hardcover = created["variants"]
    hardcover["price"] = 30

    response = client.put(
        f"{ADMIN_PRODUCTS}/{created['id']}",
        json={"variants": [paperback, hardcover]},
    )
    assert response.status_code == 200, response.text
    variants = response.json()["variants"]

    assert [v["id"] for v in variants] == [paperback["id"], hardcover["id"]]
    assert variants[1]["format"] == "Hardcover"
    assert variants[1]["price"] == 30
    assert variants[1]["main_image"] == HC
    assert storage.deleted == [LP]

    auth.user_id = customer.id
    gone = client.post(
        CART,
        json={"product_id": created["id"], "variant_id": large_print["id"], "quantity": 1},
    )
    assert gone.status_code == 404
    cart = client.post(
        CART,
        json={"product_id": created["id"], "variant_id": hardcover["id"], "quantity": 1},
    ).json()
    assert cart["items"][0]["format"] == "Hardcover"
    assert cart["items"][0]["snapshot_price"] == 30


def test_create_conflict_removes_fresh_uploads(
    client, as_admin, storage, product_service, monkeypatch
):
    def duplicate(session, product):
        raise IntegrityError("INSERT INTO products", {}, Exception("duplicate slug"))

    monkeypatch.setattr(product_service.repo, "create", duplicate)
    response = client.post(
        ADMIN_PRODUCTS,
        data={"name": "Pluto", "variants": json.dumps([{"format": "Paperback"}])},
        files=[
            ("variant_main_image_0", ("m.png", PNG_BYTES, "image/png")),
            ("variant_album_images_0", ("a.png", PNG_BYTES, "image/png")),
        ],
    )

    assert response.status_code == 409
    assert len(storage.uploaded) == 2
    assert sorted(storage.deleted) == sorted(
        storage.BASE + path for path in storage.uploaded
    )


def test_update_rename_regenerates_slug(client, as_admin):
    created = _create(client, name="Akira")
    body = client.put(
        f"{ADMIN_PRODUCTS}/{created['id']}", json={"name": "Akira", "volume_number": 2}
    ).json()
    assert body["slug"] == "akira-vol-2"


def test_update_status_and_restock(client, as_admin):
    created = _create(
        client,
        name="Vinland Saga",
        variants=[{"format": "Paperback", "price": 10, "count_in_stock": 0}],
    )
    assert created["status"] == "OutOfStock"
    variant = created["variants"][0]

    variant["count_in_stock"] = 4
    url = f"{ADMIN_PRODUCTS}/{created['id']}"
    body = client.put(url, json={"variants": [variant]}).json()
    assert body["status"] == "OutOfStock"

    body = client.put(url, json={"status": "Active"}).json()
    assert body["status"] == "Active"

    body = client.put(url, json={"status": "Inactive"}).json()
    assert body["status"] == "Inactive"


def test_update_unknown_product(client, as_admin):
    response = client.put(
        f"{ADMIN_PRODUCTS}/00000000-0000-0000-0000-000000000000",
        json={"name": "Ghost"},
    )
    assert response.status_code == 404


def test_delete_product_removes_images(client, as_admin, storage):
    created = _create(
        client,
        name="Blame!",
        variants=[{"format": "Paperback", "main_image": "https://cdn/m.png"}],
    )
    response = client.delete(f"{ADMIN_PRODUCTS}/{created['id']}")
    assert response.status_code == 200
    assert storage.deleted == ["https://cdn/m.png"]
    assert client.get(f"{PRODUCTS}/{created['id']}").status_code == 404


def test_public_rows_and_groups(client, make_product):
    make_product(
        name="Berserk",
        category="manga",
        variants=[
            {"format": "Paperback", "price": 15, "count_in_stock": 1},
            {"format": "Deluxe", "price": 50, "count_in_stock": 1},
        ],
    )
    make_product(name="Hidden", status="Inactive", variants=[{"price": 5, "count_in_stock": 1}])
    make_product(name="Bare")

    rows = client.get(PRODUCTS).json()
    assert sorted(r["name"] for r in rows) == ["Bare", "Berserk", "Berserk"]
    berserk = [r for r in rows if r["name"] == "Berserk"]
    assert all(r["variants_count"] == 2 for r in berserk)

    cheap = client.get(PRODUCTS, params={"max_price": 20, "category": "manga"}).json()
    assert [r["format"] for r in cheap] == ["Paperback"]

    with_hidden = client.get(PRODUCTS, params={"include_inactive": True}).json()
    assert len(with_hidden) == 4

    groups = client.get(f"{PRODUCTS}/grouped").json()
    by_name = {g["name"]: g for g in groups}
    assert by_name["Berserk"]["price"] == {"low": 15.0, "high": 50.0}
    assert by_name["Bare"]["image"] == "/assets/placeholder-image.png"
    assert by_name["Bare"]["variants"][0]["format"] == "Standard"


def test_featured_sections(client, make_product):
    make_product(name="Promo", is_promotion=True, variants=[{"price": 5, "count_in_stock": 1}])
    make_product(name="Fresh", is_new_arrival=True, is_popular=True)
    make_product(name="Plain")

    body = client.get(f"{PRODUCTS}/featured").json()
    assert [g["name"] for g in body["promotions"]] == ["Promo"]
    assert [g["name"] for g in body["new_arrivals"]] == ["Fresh"]
    assert [g["name"] for g in body["popular"]] == ["Fresh"]


def test_category_listing(client, make_product):
    make_product(name="Shonen Book", category="manga", subcategory="shonen")
    make_product(name="Novel", category="fiction")

    assert [r["name"] for r in client.get(f"{PRODUCTS}/category/shonen").json()] == [
        "Shonen Book"
    ]
    assert len(client.get(f"{PRODUCTS}/category/manga").json()) == 1
    assert client.get(f"{PRODUCTS}/category/cooking").status_code == 404


def test_get_by_id_or_slug(client, make_product):
    product = make_product(name="Nana", volume_number=1)
    by_slug = client.get(f"{PRODUCTS}/nana-vol-1")
    assert by_slug.status_code == 200
    assert by_slug.json()["id"] == str(product.id)
    assert client.get(f"{PRODUCTS}/{product.id}").json()["slug"] == "nana-vol-1"
    assert client.get(f"{PRODUCTS}/missing").status_code == 404


def test_featured_flags_toggle(client, as_admin, make_product):
    product = make_product(name="Toggle")
    body = client.patch(
        f"{ADMIN_PRODUCTS}/{product.id}/featured", json={"is_popular": True}
    ).json()
    assert body["is_popular"] is True
    assert body["is_promotion"] is False
