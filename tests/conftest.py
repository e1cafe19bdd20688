import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from starter.config import get_settings

TEMPLATE = """APP_NAME=Starter
APP_KEY=
APP_DEBUG=true
APP_URL=http://localhost

# Database
DB_URL=sqlite:///./app.db
"""


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep the real environment and ./.env out of every test."""
    for var in ("APP_NAME", "APP_ENV", "APP_KEY", "APP_DEBUG", "APP_URL", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def project_dir(tmp_path):
    project = tmp_path / "my-project"
    project.mkdir()
    (project / ".env.example").write_text(TEMPLATE)
    (project / "install.sh").write_text("#!/bin/sh\nstarter install \"$@\"\n")
    (project / "node_modules").mkdir()
    return project


async def _client(monkeypatch, **env):
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()

    from starter.main import create_app

    transport = ASGITransport(app=create_app())
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def client(monkeypatch):
    async with await _client(
        monkeypatch, APP_KEY="base64:test", APP_NAME="Demo", APP_URL="https://demo.test", APP_ENV="local"
    ) as c:
        yield c


@pytest_asyncio.fixture
async def client_not_installed(monkeypatch):
    async with await _client(monkeypatch) as c:
        yield c
