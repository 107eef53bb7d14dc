"""HTTP client for the commerce platform's OAuth and Admin webhook APIs."""

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx

from shopbridge.common.exceptions import TokenExchangeError

logger = logging.getLogger(__name__)

ALREADY_EXISTS_MARKER = "already been taken"


@dataclass
class AccessGrant:
    """Result of a successful code-for-token exchange."""

    access_token: str
    scope: str = ""


class WebhookRegistrationError(Exception):
    """Raised when the platform rejects a webhook subscription."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ShopifyClient:
    """Calls the platform's token endpoint and webhook subscription endpoint.

    The httpx client is created lazily and shared across calls; tests inject
    one built on ``httpx.MockTransport``.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        api_version: str = "2024-01",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.api_version = api_version
        self.timeout = timeout
        self._http_client = http_client

    def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy-init httpx.AsyncClient."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def authorize_url(self, shop: str, scope: str, redirect_uri: str, state: str) -> str:
        query = urlencode(
            {
                "client_id": self.client_id,
                "scope": scope,
                "redirect_uri": redirect_uri,
                "state": state,
            }
        )
        return f"https://{shop}/admin/oauth/authorize?{query}"

    async def exchange_code(self, shop: str, code: str) -> AccessGrant:
        """Trade an authorization code for an access token.

        Any non-2xx response, malformed body, network error or timeout raises
        TokenExchangeError; the caller never sees a partial grant.
        """
        url = f"https://{shop}/admin/oauth/access_token"
        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
        }
        try:
            resp = await self._get_http_client().post(
                url, json=payload, timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            logger.warning(
                "Token exchange timed out",
                extra={"tenant_id": shop, "error": "timeout"},
            )
            raise TokenExchangeError("Token exchange timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "Token exchange request failed",
                extra={"tenant_id": shop, "error": str(exc)},
            )
            raise TokenExchangeError() from exc

        if not 200 <= resp.status_code < 300:
            logger.warning(
                "Token exchange rejected",
                extra={"tenant_id": shop, "status_code": resp.status_code, "error": resp.text[:500]},
            )
            raise TokenExchangeError()

        try:
            data = resp.json()
        except ValueError as exc:
            raise TokenExchangeError("Malformed token response") from exc

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise TokenExchangeError("Token response carried no access_token")
        return AccessGrant(access_token=token, scope=data.get("scope") or "")

    async def register_webhook(
        self,
        shop: str,
        access_token: str,
        topic: str,
        address: str,
        format: str = "json",
    ) -> str:
        """Create one webhook subscription.

        Returns ``"created"`` on 2xx and ``"exists"`` when the platform reports
        the (topic, address) pair as already registered. Raises
        WebhookRegistrationError for every other outcome.
        """
        url = f"https://{shop}/admin/api/{self.api_version}/webhooks.json"
        body = {"webhook": {"topic": topic, "address": address, "format": format}}
        try:
            resp = await self._get_http_client().post(
                url,
                json=body,
                headers={"X-Shopify-Access-Token": access_token},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            raise WebhookRegistrationError("timeout") from exc
        except httpx.HTTPError as exc:
            raise WebhookRegistrationError(str(exc) or type(exc).__name__) from exc

        if 200 <= resp.status_code < 300:
            return "created"
        if resp.status_code == 422 and _is_duplicate(resp):
            return "exists"
        raise WebhookRegistrationError(
            f"HTTP {resp.status_code}: {resp.text[:500]}",
            status_code=resp.status_code,
        )


def _is_duplicate(resp: httpx.Response) -> bool:
    try:
        errors: Any = resp.json().get("errors")
    except (ValueError, AttributeError):
        return ALREADY_EXISTS_MARKER in resp.text
    return ALREADY_EXISTS_MARKER in str(errors)
