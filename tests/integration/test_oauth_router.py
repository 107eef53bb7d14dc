"""Integration tests for the install and callback routes."""

from urllib.parse import parse_qs, urlparse

from sqlalchemy import select

from shopbridge.deps import get_db
from shopbridge.shops.models import ShopModel
from tests.fakes import CLIENT_ID


async def _start(client, shop="acme") -> str:
    resp = await client.get("/install", params={"tenant": shop})
    assert resp.status_code == 302
    return parse_qs(urlparse(resp.headers["location"]).query)["state"][0]


async def _shops() -> list[ShopModel]:
    async with get_db().get_session() as session:
        return list((await session.execute(select(ShopModel))).scalars().all())


class TestInstall:
    async def test_redirects_to_authorization(self, client):
        resp = await client.get("/install", params={"tenant": "acme"})
        assert resp.status_code == 302
        location = urlparse(resp.headers["location"])
        query = parse_qs(location.query)
        assert location.netloc == "acme.example.com"
        assert location.path == "/admin/oauth/authorize"
        assert query["client_id"] == [CLIENT_ID]
        assert query["scope"] == ["read_orders,write_orders,read_customers,read_checkouts"]
        assert query["redirect_uri"] == ["https://bridge.test/callback"]
        assert query["state"][0]

    async def test_shop_alias(self, client):
        resp = await client.get("/install", params={"shop": "acme.example.com"})
        assert resp.status_code == 302

    async def test_missing_tenant(self, client):
        resp = await client.get("/install")
        assert resp.status_code == 400
        assert "Missing" in resp.text

    async def test_malformed_tenant(self, client):
        resp = await client.get("/install", params={"tenant": "acme.evil.com"})
        assert resp.status_code == 400


class TestCallback:
    async def test_end_to_end(self, client, platform):
        state = await _start(client, "acme")
        resp = await client.get("/callback", params={
            "tenant": "acme.example.com", "code": "abc", "state": state,
        })
        assert resp.status_code == 302
        location = urlparse(resp.headers["location"])
        assert f"{location.scheme}://{location.netloc}{location.path}" == (
            "https://bridge.test/onboarding/branding"
        )
        assert parse_qs(location.query) == {"shop": ["acme.example.com"], "success": ["true"]}

        [row] = await _shops()
        assert row.tenant_id == "acme.example.com"
        assert row.access_credential == "tok_123"
        assert platform.webhook_topics == ["checkouts/create", "orders/create"]

    async def test_missing_params_write_nothing(self, client, platform):
        state = await _start(client)
        for params in (
            {"code": "abc", "state": state},
            {"tenant": "acme.example.com", "state": state},
        ):
            resp = await client.get("/callback", params=params)
            assert resp.status_code == 400
        assert await _shops() == []
        assert platform.token_requests == []

    async def test_forged_state(self, client, platform):
        await _start(client)
        resp = await client.get("/callback", params={
            "tenant": "acme.example.com", "code": "abc", "state": "forged",
        })
        assert resp.status_code == 400
        assert await _shops() == []
        assert platform.token_requests == []

    async def test_state_from_other_shop(self, client):
        state = await _start(client, "other")
        resp = await client.get("/callback", params={
            "tenant": "acme.example.com", "code": "abc", "state": state,
        })
        assert resp.status_code == 400
        assert await _shops() == []

    async def test_replay_rejected(self, client):
        state = await _start(client)
        params = {"tenant": "acme.example.com", "code": "abc", "state": state}
        assert (await client.get("/callback", params=params)).status_code == 302
        assert (await client.get("/callback", params=params)).status_code == 400

    async def test_token_exchange_failure(self, client, platform):
        platform.token_status = 401
        state = await _start(client)
        resp = await client.get("/callback", params={
            "tenant": "acme.example.com", "code": "abc", "state": state,
        })
        assert resp.status_code == 500
        assert resp.text == "Authentication failed"
        assert await _shops() == []
        assert platform.webhook_topics == []

    async def test_webhook_failure_still_succeeds(self, client, platform):
        platform.webhook_status["checkouts/create"] = 500
        state = await _start(client)
        resp = await client.get("/callback", params={
            "tenant": "acme.example.com", "code": "abc", "state": state,
        })
        assert resp.status_code == 302
        assert "success=true" in resp.headers["location"]
        assert platform.webhook_topics == ["checkouts/create", "orders/create"]

    async def test_reinstall_is_idempotent(self, client, platform):
        first = await _start(client)
        second = await _start(client)
        await client.get("/callback", params={
            "tenant": "acme.example.com", "code": "abc", "state": first,
        })
        [before] = await _shops()

        platform.access_token = "tok_456"
        resp = await client.get("/callback", params={
            "tenant": "acme.example.com", "code": "def", "state": second,
        })
        assert resp.status_code == 302

        [after] = await _shops()
        assert after.access_credential == "tok_456"
        assert after.installed_at > before.installed_at
