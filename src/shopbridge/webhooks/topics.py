"""Static list of platform webhook subscriptions."""

from shopbridge.webhooks.schemas import WebhookSubscription

# (topic, path under the event delivery base URL)
SUBSCRIPTION_TOPICS: tuple[tuple[str, str], ...] = (
    ("checkouts/create", "shopify-cart-abandoned"),
    ("orders/create", "shopify-order-created"),
)


def build_subscriptions(event_base_url: str) -> list[WebhookSubscription]:
    base = event_base_url.rstrip("/")
    return [
        WebhookSubscription(topic=topic, address=f"{base}/{path}", format="json")
        for topic, path in SUBSCRIPTION_TOPICS
    ]
