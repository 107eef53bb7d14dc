"""Shared test fixtures for Shopbridge."""

import os
import pytest
from httpx import ASGITransport, AsyncClient

from tests.fakes import CLIENT_ID, CLIENT_SECRET, FakePlatform


API_KEY = "test-admin-api-key"
SHOP_SUFFIX = "example.com"
APP_URL = "https://bridge.test"
EVENT_BASE_URL = "https://events.test/webhook"


@pytest.fixture
def api_key():
    return API_KEY


@pytest.fixture
def platform():
    return FakePlatform()


@pytest.fixture
def app(platform):
    """Create a test app with in-memory DB and the fake platform."""
    os.environ["SHOPBRIDGE_DB_URL"] = "sqlite+aiosqlite://"
    os.environ["SHOPBRIDGE_API_KEY"] = API_KEY
    os.environ["SHOPBRIDGE_CLIENT_ID"] = CLIENT_ID
    os.environ["SHOPBRIDGE_CLIENT_SECRET"] = CLIENT_SECRET
    os.environ["SHOPBRIDGE_SHOP_DOMAIN_SUFFIX"] = SHOP_SUFFIX
    os.environ["SHOPBRIDGE_APP_URL"] = APP_URL
    os.environ["SHOPBRIDGE_EVENT_BASE_URL"] = EVENT_BASE_URL
    os.environ["SHOPBRIDGE_ENFORCE_WEBHOOK_HMAC"] = "false"

    # Clear caches and singletons so new env vars take effect
    from shopbridge.common.config import get_settings
    get_settings.cache_clear()

    from shopbridge.deps import reset_singletons, set_shopify_client
    reset_singletons()
    set_shopify_client(platform.client())

    from shopbridge.app import create_app
    return create_app()


@pytest.fixture
async def client(app):
    # Manually init DB since ASGITransport doesn't run lifespan
    from shopbridge.deps import get_db, get_shopify_client
    db = get_db()
    await db.init()
    await db.create_all()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await get_shopify_client().close()
    await db.close()


@pytest.fixture
def admin_headers():
    return {"X-Bridge-Api-Key": API_KEY}
