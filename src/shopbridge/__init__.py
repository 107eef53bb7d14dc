"""Shopbridge: OAuth install bridge and webhook provisioner for a commerce platform app."""

from shopbridge.platform.client import ShopifyClient
from shopbridge.shops.domains import normalize_shop_domain
from shopbridge.webhooks.topics import build_subscriptions

__all__ = [
    "ShopifyClient",
    "normalize_shop_domain",
    "build_subscriptions",
]
__version__ = "0.1.0"
