import pytest
from httpx import ASGITransport, AsyncClient

from linktracker.main import create_app


@pytest.mark.parametrize(
    ("method", "path"),
    [("GET", "/api/links"), ("POST", "/api/links"), ("DELETE", "/api/links"), ("GET", "/api/analytics/promo")],
)
async def test_admin_api_requires_credentials(client, method, path):
    response = await client.request(method, path, json={"slug": "promo", "url": "https://example.com"})

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == 'Basic realm="Link Tracker"'


async def test_wrong_password_is_rejected(client):
    response = await client.get("/api/links", auth=("admin", "wrong"))

    assert response.status_code == 401


async def test_unconfigured_gate_refuses_access(settings):
    app = create_app(settings.model_copy(update={"basic_auth_pass": ""}))

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/api/links", auth=("admin", ""))

    assert response.status_code == 503
    await app.state.engine.dispose()


async def test_dashboard_is_gated(client, admin):
    assert (await client.get("/")).status_code == 401

    response = await admin.get("/")

    assert response.status_code == 200
    assert response.text == "<h1>Links</h1>"


async def test_stats_page_missing_from_static_dir(admin):
    assert (await admin.get("/analytics")).status_code == 404


async def test_redirects_need_no_credentials(admin, client):
    await admin.post("/api/links", json={"slug": "promo", "url": "https://example.com/page"})

    assert (await client.get("/promo")).status_code == 302


async def test_unknown_slug_analytics_is_not_found(admin):
    response = await admin.get("/api/analytics/nope")

    assert response.status_code == 404
