import asyncio

import pytest

PROMO = {"slug": "promo", "url": "https://example.com/page"}


async def test_create_link(admin):
    response = await admin.post("/api/links", json=PROMO)

    assert response.status_code == 201
    body = response.json()
    assert body["slug"] == "promo"
    assert body["url"] == "https://example.com/page"
    assert body["created_at"]


async def test_duplicate_slug_conflicts(admin):
    await admin.post("/api/links", json=PROMO)

    response = await admin.post("/api/links", json={"slug": "promo", "url": "https://example.com/other"})

    assert response.status_code == 409
    assert response.json() == {"detail": "Slug already exists"}
    links = (await admin.get("/api/links")).json()
    assert [(link["slug"], link["url"]) for link in links] == [("promo", "https://example.com/page")]


async def test_concurrent_creates_have_one_winner(admin):
    responses = await asyncio.gather(
        *(
            admin.post("/api/links", json={"slug": "promo", "url": f"https://example.com/{i}"})
            for i in range(5)
        )
    )

    assert sorted(response.status_code for response in responses) == [201, 409, 409, 409, 409]
    links = (await admin.get("/api/links")).json()
    assert [link["slug"] for link in links] == ["promo"]


async def test_url_is_stored_as_submitted(admin, client):
    url = "https://Example.com/Path?q=1"

    response = await admin.post("/api/links", json={"slug": "promo", "url": url})

    assert response.json()["url"] == url
    assert (await admin.get("/api/links")).json()[0]["url"] == url
    assert (await client.get("/promo")).headers["location"] == url


@pytest.mark.parametrize(
    "body",
    [
        {"url": "https://example.com"},
        {"slug": "promo"},
        {"slug": "", "url": "https://example.com"},
        {"slug": "promo", "url": ""},
        {"slug": "promo", "url": "not a url"},
        {"slug": "promo", "url": "ftp://example.com/file"},
        {"slug": "logo.png", "url": "https://example.com"},
        {"slug": "with/slash", "url": "https://example.com"},
        {"slug": "api", "url": "https://example.com"},
        {"slug": "Metrics", "url": "https://example.com"},
    ],
)
async def test_invalid_link_is_rejected(admin, body):
    response = await admin.post("/api/links", json=body)

    assert response.status_code == 400
    assert response.json()["detail"]


async def test_list_links_newest_first(admin):
    await admin.post("/api/links", json={"slug": "first", "url": "https://example.com/1"})
    await admin.post("/api/links", json={"slug": "second", "url": "https://example.com/2"})

    response = await admin.get("/api/links")

    assert response.status_code == 200
    assert [link["slug"] for link in response.json()] == ["second", "first"]
    assert set(response.json()[0]) == {"slug", "url", "created_at"}


async def test_delete_link(admin, client):
    await admin.post("/api/links", json=PROMO)

    response = await admin.request("DELETE", "/api/links", json={"slug": "promo"})

    assert response.status_code == 200
    assert (await admin.get("/api/links")).json() == []
    assert (await client.get("/promo")).status_code == 404


async def test_delete_unknown_slug(admin):
    response = await admin.request("DELETE", "/api/links", json={"slug": "nope"})

    assert response.status_code == 404


async def test_delete_requires_slug(admin):
    response = await admin.request("DELETE", "/api/links", json={})

    assert response.status_code == 400


async def test_recreate_after_delete(admin, client):
    await admin.post("/api/links", json=PROMO)
    await admin.request("DELETE", "/api/links", json={"slug": "promo"})

    response = await admin.post("/api/links", json={"slug": "promo", "url": "https://example.com/new"})

    assert response.status_code == 201
    assert (await client.get("/promo")).headers["location"] == "https://example.com/new"
