"""Mandatory data-subject request handlers."""

import logging
from typing import Any

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from shopbridge.branding.service import BrandingService
from shopbridge.common.exceptions import InvalidParameterError, MissingParameterError
from shopbridge.compliance.models import AbandonedCartModel, ComplianceRequestModel
from shopbridge.oauth.state import StateStore
from shopbridge.shops.domains import normalize_shop_domain
from shopbridge.shops.service import CredentialStore

logger = logging.getLogger(__name__)

DATA_REQUEST = "customers/data_request"
CUSTOMER_REDACT = "customers/redact"
SHOP_REDACT = "shop/redact"


def tenant_of(payload: dict[str, Any]) -> str | None:
    return payload.get("shop_domain") or payload.get("tenant_id")


def customer_email_of(payload: dict[str, Any]) -> str | None:
    customer = payload.get("customer")
    if isinstance(customer, dict) and customer.get("email"):
        return customer["email"]
    return payload.get("customer_email")


class ComplianceService:
    """Each handler is idempotent and reports how many rows it removed."""

    def __init__(
        self,
        credentials: CredentialStore,
        branding: BrandingService,
        states: StateStore,
        shop_domain_suffix: str = "myshopify.com",
    ):
        self.credentials = credentials
        self.branding = branding
        self.states = states
        self.shop_domain_suffix = shop_domain_suffix

    def resolve_tenant(self, payload: dict[str, Any]) -> str | None:
        """Canonical tenant for the payload, or None when it names no valid shop."""
        raw = tenant_of(payload)
        try:
            return normalize_shop_domain(raw, self.shop_domain_suffix)
        except (MissingParameterError, InvalidParameterError) as exc:
            logger.warning(
                "Compliance notice with unusable shop %r", raw,
                extra={"error": exc.message},
            )
            return None

    async def _record(
        self,
        session: AsyncSession,
        topic: str,
        payload: dict[str, Any],
        tenant_id: str | None,
    ) -> ComplianceRequestModel:
        entry = ComplianceRequestModel(
            topic=topic,
            tenant_id=tenant_id or tenant_of(payload),
            customer_email=customer_email_of(payload),
            payload=payload,
        )
        session.add(entry)
        await session.flush()
        return entry

    async def data_request(
        self, session: AsyncSession, payload: dict[str, Any]
    ) -> ComplianceRequestModel:
        """Audit only; nothing is deleted."""
        tenant_id = self.resolve_tenant(payload)
        entry = await self._record(session, DATA_REQUEST, payload, tenant_id)
        logger.info("Customer data request recorded", extra={"tenant_id": entry.tenant_id})
        return entry

    async def customer_redact(
        self, session: AsyncSession, payload: dict[str, Any]
    ) -> int:
        tenant_id = self.resolve_tenant(payload)
        await self._record(session, CUSTOMER_REDACT, payload, tenant_id)
        email = (customer_email_of(payload) or "").strip().lower()
        if not tenant_id or not email:
            logger.warning("Customer redact without shop or email; nothing to delete")
            return 0

        result = await session.execute(
            delete(AbandonedCartModel)
            .where(
                AbandonedCartModel.tenant_id == tenant_id,
                func.lower(AbandonedCartModel.email) == email,
            )
            .execution_options(synchronize_session=False)
        )
        logger.info(
            "Customer redacted: %d cart(s)", result.rowcount,
            extra={"tenant_id": tenant_id},
        )
        return result.rowcount

    async def shop_redact(
        self, session: AsyncSession, payload: dict[str, Any]
    ) -> dict[str, int]:
        """Remove every row keyed by the shop."""
        tenant_id = self.resolve_tenant(payload)
        await self._record(session, SHOP_REDACT, payload, tenant_id)
        if not tenant_id:
            logger.warning("Shop redact without a valid shop; nothing to delete")
            return {}

        carts = await session.execute(
            delete(AbandonedCartModel)
            .where(AbandonedCartModel.tenant_id == tenant_id)
            .execution_options(synchronize_session=False)
        )
        removed = {
            "credentials": int(await self.credentials.delete(session, tenant_id)),
            "branding": int(await self.branding.delete(session, tenant_id)),
            "abandoned_carts": carts.rowcount,
            "authorization_states": await self.states.delete_for_tenant(session, tenant_id),
        }
        logger.info("Shop redacted", extra={"tenant_id": tenant_id})
        return removed
