"""Admin API key dependency and platform webhook signature checks."""

import base64
import hashlib
import hmac

from fastapi import Header, HTTPException


async def require_api_key(
    x_bridge_api_key: str = Header(..., alias="X-Bridge-Api-Key"),
) -> str:
    """FastAPI dependency that validates the admin API key from header."""
    from shopbridge.common.config import get_settings

    settings = get_settings()
    if not hmac.compare_digest(x_bridge_api_key, settings.api_key):
        raise HTTPException(status_code=403, detail="Invalid API key")
    return x_bridge_api_key


def sign_webhook_body(body: bytes, secret: str) -> str:
    """Base64 HMAC-SHA256 of a raw webhook body, as sent in X-Shopify-Hmac-Sha256."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_webhook_hmac(body: bytes, supplied: str | None, secret: str) -> bool:
    """Return True when ``supplied`` is the signature of ``body`` under ``secret``."""
    if not supplied or not secret:
        return False
    return hmac.compare_digest(sign_webhook_body(body, secret), supplied)
