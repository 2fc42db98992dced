import re

import pytest
from httpx import ASGITransport, AsyncClient

from linktracker.core.database import init_db
from linktracker.core.middleware import parent_domain_origin_regex
from linktracker.main import create_app


@pytest.fixture
async def cors_client(settings):
    app = create_app(settings.model_copy(update={"cors_parent_domain": "example.com"}))
    await init_db(app.state.engine)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    await app.state.engine.dispose()


def preflight_headers(origin: str, method: str = "POST") -> dict[str, str]:
    return {"Origin": origin, "Access-Control-Request-Method": method}


async def test_preflight_from_subdomain_is_allowed(cors_client):
    response = await cors_client.options(
        "/api/links", headers=preflight_headers("https://admin.example.com")
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://admin.example.com"
    assert response.headers["access-control-allow-credentials"] == "true"
    assert response.headers["access-control-max-age"] == "600"
    assert set(response.headers["access-control-allow-methods"].split(", ")) == {"GET", "POST", "DELETE"}


async def test_preflight_from_foreign_origin_is_refused(cors_client):
    response = await cors_client.options(
        "/api/links", headers=preflight_headers("https://evil.example.net")
    )

    assert response.status_code == 400
    assert "access-control-allow-origin" not in response.headers


async def test_preflight_for_disallowed_method_is_refused(cors_client):
    response = await cors_client.options(
        "/api/links", headers=preflight_headers("https://example.com", method="PUT")
    )

    assert response.status_code == 400


async def test_cors_only_applies_to_admin_api(cors_client):
    response = await cors_client.get("/missing", headers={"Origin": "https://admin.example.com"})

    assert "access-control-allow-origin" not in response.headers


@pytest.mark.parametrize(
    ("origin", "allowed"),
    [
        ("https://example.com", True),
        ("https://a.b.example.com", True),
        ("http://example.com", False),
        ("https://notexample.com", False),
        ("https://example.com.evil.net", False),
    ],
)
def test_parent_domain_origin_regex(origin, allowed):
    assert bool(re.fullmatch(parent_domain_origin_regex("example.com"), origin)) is allowed
