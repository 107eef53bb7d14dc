"""Pydantic schemas for webhook subscriptions and provisioning results."""

from typing import Optional

from pydantic import BaseModel, Field


class WebhookSubscription(BaseModel):
    """One platform subscription the app needs on every installed shop."""

    topic: str
    address: str
    format: str = "json"


class SubscriptionOutcome(BaseModel):
    topic: str
    address: str
    status: str = Field(..., pattern="^(created|exists|failed)$")
    error: Optional[str] = None


class ProvisioningReport(BaseModel):
    """Aggregate of independent per-subscription outcomes."""

    tenant_id: str
    outcomes: list[SubscriptionOutcome] = Field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.status != "failed")

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "failed")

    @property
    def partial(self) -> bool:
        """True when some but not all subscriptions failed."""
        return 0 < self.failed < len(self.outcomes)


class ProvisioningResponse(BaseModel):
    tenant_id: str
    succeeded: int
    failed: int
    outcomes: list[SubscriptionOutcome]
