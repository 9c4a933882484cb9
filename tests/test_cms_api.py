BANNERS = "/api/v1/cms/banners"
PAGES = "/api/v1/static-pages"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"1" * 16


def test_banner_lifecycle(client, as_admin, storage):
    response = client.post(
        BANNERS,
        data={"title": "Summer Sale", "order": "2", "cta_link": "/sale"},
        files={"image_desktop": ("d.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 201, response.text
    banner = response.json()
    assert banner["image_desktop"].startswith(storage.BASE)
    assert banner["image_mobile"] is None
    assert banner["is_active"] is True

    old_image = banner["image_desktop"]
    updated = client.put(
        f"{BANNERS}/{banner['id']}",
        data={"subtitle": "Up to 50% off"},
        files={"image_desktop": ("d2.png", PNG_BYTES, "image/png")},
    ).json()
    assert updated["title"] == "Summer Sale"
    assert updated["subtitle"] == "Up to 50% off"
    assert updated["image_desktop"] != old_image
    assert storage.deleted == [old_image]

    toggled = client.patch(f"{BANNERS}/{banner['id']}/toggle").json()
    assert toggled["is_active"] is False

    assert client.get(BANNERS, params={"active": True}).json() == []
    assert len(client.get(BANNERS).json()) == 1

    assert client.delete(f"{BANNERS}/{banner['id']}").status_code == 200
    assert updated["image_desktop"] in storage.deleted


def test_banner_requires_title(client, as_admin):
    assert client.post(BANNERS, data={"subtitle": "x"}).status_code == 400


def test_banners_sorted_by_order(client, as_admin):
    client.post(BANNERS, data={"title": "Second", "order": "2"})
    client.post(BANNERS, data={"title": "First", "order": "1"})
    titles = [b["title"] for b in client.get(BANNERS).json()]
    assert titles == ["First", "Second"]


def test_static_pages(client, as_admin, auth):
    created = client.post(
        PAGES, json={"title": "About Us", "content": "<p>Hi</p>"}
    ).json()
    assert created["slug"] == "about-us"

    assert client.post(PAGES, json={"title": "About us!"}).status_code == 409

    draft = client.post(
        PAGES, json={"title": "FAQ", "is_active": False}
    ).json()

    auth.user_id = None
    assert client.get(f"{PAGES}/about-us").json()["content"] == "<p>Hi</p>"
    assert client.get(f"{PAGES}/faq").status_code == 404
    assert client.get(PAGES).status_code == 401

    auth.user_id = as_admin.id
    updated = client.put(
        f"{PAGES}/{draft['id']}", json={"is_active": True, "slug": "help"}
    ).json()
    assert updated["slug"] == "help"
    assert [p["title"] for p in client.get(PAGES).json()] == ["About Us", "FAQ"]

    assert client.delete(f"{PAGES}/{draft['id']}").status_code == 200
    assert client.get(f"{PAGES}/help").status_code == 404
