import os

# The rate limiter is configured from the environment at import time
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from linktracker.core.config import Settings  # noqa: E402
from linktracker.core.database import init_db  # noqa: E402
from linktracker.main import create_app  # noqa: E402

ADMIN_AUTH = ("admin", "secret")


class FakeRedis:
    """In-memory stand-in for the handful of Redis calls the link cache makes."""

    def __init__(self):
        self.store: dict[str, str] = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value

    async def delete(self, key):
        self.store.pop(key, None)

    async def aclose(self):
        pass


@pytest.fixture
def static_dir(tmp_path):
    directory = tmp_path / "static"
    directory.mkdir()
    (directory / "index.html").write_text("<h1>Links</h1>")
    (directory / "app.js").write_text("console.log('dashboard');")
    return directory


@pytest.fixture
def settings(tmp_path, static_dir) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        basic_auth_user="admin",
        basic_auth_pass="secret",
        static_dir=str(static_dir),
        redis_url="",
        rate_limit_enabled=False,
    )


@pytest.fixture
async def app(settings):
    app = create_app(settings)
    await init_db(app.state.engine)
    yield app
    await app.state.click_recorder.stop()
    await app.state.engine.dispose()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def admin(app):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        auth=ADMIN_AUTH,
    ) as client:
        yield client


@pytest.fixture
async def session(app):
    async with app.state.session_factory() as session:
        yield session
