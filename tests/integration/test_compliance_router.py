"""Integration tests for the compliance webhook routes."""

import json
import os
from urllib.parse import parse_qs, urlparse

import pytest

from shopbridge.common.config import get_settings
from shopbridge.common.security import sign_webhook_body
from tests.fakes import CLIENT_SECRET


async def _install(client, shop):
    resp = await client.get("/install", params={"tenant": shop})
    state = parse_qs(urlparse(resp.headers["location"]).query)["state"][0]
    await client.get("/callback", params={
        "tenant": f"{shop}.example.com", "code": "abc", "state": state,
    })
    await client.post("/config", json={"tenant_id": shop, "sender_name": shop})


class TestAcknowledge:
    @pytest.mark.parametrize("path", [
        "/compliance/data-request",
        "/compliance/customer-redact",
        "/compliance/shop-redact",
    ])
    async def test_always_ok(self, client, path):
        resp = await client.post(path, json={
            "shop_domain": "ghost.example.com",
            "customer": {"email": "jane@buyer.test"},
        })
        assert resp.status_code == 200
        assert resp.text == "OK"

    async def test_garbage_body_still_ok(self, client):
        resp = await client.post(
            "/compliance/shop-redact",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 200


class TestShopRedact:
    async def test_removes_shop_and_keeps_others(self, client):
        await _install(client, "acme")
        await _install(client, "other")

        resp = await client.post("/compliance/shop-redact", json={
            "shop_id": 1, "shop_domain": "acme.example.com",
        })
        assert resp.status_code == 200

        acme = await client.get("/status", params={"tenant": "acme"})
        other = await client.get("/status", params={"tenant": "other"})
        assert acme.json() == {"installed": False}
        assert other.json()["installed"] is True
        assert (await client.get("/config", params={"tenant": "acme"})).status_code == 404
        assert (await client.get("/config", params={"tenant": "other"})).status_code == 200

    @pytest.mark.parametrize("body", [
        {"tenant_id": "acme"},
        {"shop_domain": "ACME.example.com"},
    ])
    async def test_tenant_is_normalized(self, client, body):
        await _install(client, "acme")
        assert (await client.get("/status", params={"tenant": "acme"})).json()["installed"]

        resp = await client.post("/compliance/shop-redact", json=body)
        assert resp.status_code == 200

        status = await client.get("/status", params={"tenant": "acme"})
        assert status.json() == {"installed": False}
        assert (await client.get("/config", params={"tenant": "acme"})).status_code == 404

    async def test_invalid_shop_still_acknowledged(self, client):
        await _install(client, "acme")
        resp = await client.post("/compliance/shop-redact", json={"shop_domain": "acme.evil.com"})
        assert resp.status_code == 200
        assert resp.text == "OK"
        assert (await client.get("/status", params={"tenant": "acme"})).json()["installed"]

    async def test_duplicate_notice(self, client):
        await _install(client, "acme")
        body = {"shop_domain": "acme.example.com"}
        assert (await client.post("/compliance/shop-redact", json=body)).status_code == 200
        assert (await client.post("/compliance/shop-redact", json=body)).status_code == 200


class TestSignatureEnforcement:
    @pytest.fixture
    def enforce(self, client):
        os.environ["SHOPBRIDGE_ENFORCE_WEBHOOK_HMAC"] = "true"
        get_settings.cache_clear()
        yield
        os.environ["SHOPBRIDGE_ENFORCE_WEBHOOK_HMAC"] = "false"
        get_settings.cache_clear()

    async def test_unsigned_rejected(self, client, enforce):
        resp = await client.post("/compliance/data-request", json={"shop_domain": "a.example.com"})
        assert resp.status_code == 401

    async def test_signed_accepted(self, client, enforce):
        body = json.dumps({"shop_domain": "a.example.com"}).encode()
        resp = await client.post(
            "/compliance/data-request",
            content=body,
            headers={
                "Content-Type": "application/json",
                "X-Shopify-Hmac-Sha256": sign_webhook_body(body, CLIENT_SECRET),
            },
        )
        assert resp.status_code == 200
