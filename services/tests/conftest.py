"""Shared fixtures: an in-process app and a respx router for upstream calls."""

import sys
from pathlib import Path

import pytest
import respx
from httpx import ASGITransport, AsyncClient

# Add services/ to sys.path so imports work like they do in Docker
SERVICES_DIR = Path(__file__).resolve().parent.parent
if str(SERVICES_DIR) not in sys.path:
    sys.path.insert(0, str(SERVICES_DIR))

from shared.config import Settings  # noqa: E402
from proxy_api.main import create_app  # noqa: E402

TEST_API_KEY = "test-openweather-key"


@pytest.fixture
def settings() -> Settings:
    return Settings(openweather_api_key=TEST_API_KEY, telemetry_enabled=False)


@pytest.fixture
def upstream():
    """respx router; requests to unmocked hosts fail the test."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
async def client(settings, upstream):
    app = create_app(settings)
    # ASGITransport does not send lifespan events; run them here
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
