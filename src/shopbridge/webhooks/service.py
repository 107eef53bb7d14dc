"""Webhook provisioning: register every subscription, tolerate partial failure."""

import logging

from shopbridge.platform.client import ShopifyClient, WebhookRegistrationError
from shopbridge.webhooks.schemas import (
    ProvisioningReport,
    SubscriptionOutcome,
    WebhookSubscription,
)

logger = logging.getLogger(__name__)


class WebhookProvisioner:
    """Registers the configured subscriptions on one shop."""

    def __init__(
        self,
        client: ShopifyClient,
        subscriptions: list[WebhookSubscription],
    ):
        self.client = client
        self.subscriptions = subscriptions

    async def provision(self, tenant_id: str, access_token: str) -> ProvisioningReport:
        """Attempt every subscription; one failure never stops the others.

        Never raises for platform errors. The caller gets the aggregate and
        decides what to do with it.
        """
        report = ProvisioningReport(tenant_id=tenant_id)

        for sub in self.subscriptions:
            error = None
            try:
                status = await self.client.register_webhook(
                    tenant_id,
                    access_token,
                    topic=sub.topic,
                    address=sub.address,
                    format=sub.format,
                )
            except WebhookRegistrationError as exc:
                error = str(exc)
            except Exception as exc:
                logger.exception("Unexpected error registering %s", sub.topic)
                error = f"{type(exc).__name__}: {exc}"

            if error is not None:
                logger.error(
                    "Webhook registration failed",
                    extra={"tenant_id": tenant_id, "topic": sub.topic, "error": error},
                )
                report.outcomes.append(
                    SubscriptionOutcome(
                        topic=sub.topic, address=sub.address,
                        status="failed", error=error,
                    )
                )
                continue

            logger.info(
                "Webhook %s: %s", status, sub.topic,
                extra={"tenant_id": tenant_id, "topic": sub.topic},
            )
            report.outcomes.append(
                SubscriptionOutcome(topic=sub.topic, address=sub.address, status=status)
            )

        if report.failed:
            logger.warning(
                "Webhook provisioning incomplete",
                extra={
                    "tenant_id": tenant_id,
                    "succeeded": report.succeeded,
                    "failed": report.failed,
                },
            )
        else:
            logger.info(
                "Webhook provisioning complete",
                extra={"tenant_id": tenant_id, "succeeded": report.succeeded, "failed": 0},
            )
        return report
