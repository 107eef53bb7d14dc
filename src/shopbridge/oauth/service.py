"""InstallService: OAuth install handshake and post-install provisioning."""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

from sqlalchemy.exc import SQLAlchemyError

from shopbridge.common.config import BridgeSettings
from shopbridge.common.database import DatabaseManager
from shopbridge.common.exceptions import (
    InvalidOrExpiredStateError,
    MissingParameterError,
    NotInstalledError,
    PersistenceError,
)
from shopbridge.oauth.state import ConsumedState, StateStore
from shopbridge.platform.client import ShopifyClient
from shopbridge.shops.domains import normalize_shop_domain
from shopbridge.shops.service import CredentialStore
from shopbridge.webhooks.schemas import ProvisioningReport
from shopbridge.webhooks.service import WebhookProvisioner

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    tenant_id: str
    redirect_url: str
    provisioning: ProvisioningReport | None


class InstallService:
    """Sequences the install handshake.

    Steps within one callback run strictly in order: state consumption,
    token exchange, credential write, webhook provisioning. Exchange and
    persistence failures abort the callback; provisioning failures never do.
    """

    def __init__(
        self,
        settings: BridgeSettings,
        db: DatabaseManager,
        client: ShopifyClient,
        states: StateStore,
        credentials: CredentialStore,
        provisioner: WebhookProvisioner,
    ):
        self.settings = settings
        self.db = db
        self.client = client
        self.states = states
        self.credentials = credentials
        self.provisioner = provisioner

    def _normalize(self, raw_shop: str | None) -> str:
        return normalize_shop_domain(raw_shop, self.settings.shop_domain_suffix)

    # ── Authorization start ──

    async def begin_install(self, raw_shop: str | None) -> str:
        """Record a fresh state nonce and return the platform authorization URL."""
        tenant_id = self._normalize(raw_shop)
        try:
            async with self.db.get_session() as session:
                await self.states.purge_expired(session)
                state = await self.states.issue(session, tenant_id)
        except SQLAlchemyError as exc:
            logger.exception("Could not record OAuth state", extra={"tenant_id": tenant_id})
            raise PersistenceError() from exc

        logger.info("Install started", extra={"tenant_id": tenant_id})
        return self.client.authorize_url(
            tenant_id,
            scope=self.settings.scope_param,
            redirect_uri=self.settings.callback_url,
            state=state.nonce,
        )

    # ── Callback ──

    async def complete_install(
        self,
        raw_shop: str | None,
        code: str | None,
        state: str | None,
    ) -> InstallResult:
        tenant_id = self._normalize(raw_shop)
        if not code:
            raise MissingParameterError("code")

        consumed = await self._consume_state(state)
        if consumed is None or not consumed.matches(tenant_id):
            logger.warning(
                "Rejected OAuth callback state",
                extra={"tenant_id": tenant_id, "nonce": state},
            )
            raise InvalidOrExpiredStateError()

        # Raises TokenExchangeError; nothing has been written yet.
        grant = await self.client.exchange_code(tenant_id, code)

        try:
            async with self.db.get_session() as session:
                await self.credentials.upsert(
                    session, tenant_id, grant.access_token, scope=grant.scope,
                )
        except PersistenceError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("Credential commit failed", extra={"tenant_id": tenant_id})
            raise PersistenceError("Failed to store credential") from exc

        logger.info("Install completed", extra={"tenant_id": tenant_id})

        report = await self._provision_quietly(tenant_id, grant.access_token)
        return InstallResult(
            tenant_id=tenant_id,
            redirect_url=self.onboarding_redirect(tenant_id),
            provisioning=report,
        )

    def onboarding_redirect(self, tenant_id: str) -> str:
        query = urlencode({"shop": tenant_id, "success": "true"})
        return f"{self.settings.onboarding_url}?{query}"

    async def _consume_state(self, nonce: str | None) -> ConsumedState | None:
        if not nonce:
            return None
        # Committed before any network call so a replay cannot reuse it.
        try:
            async with self.db.transaction() as session:
                return await self.states.consume(session, nonce)
        except SQLAlchemyError as exc:
            logger.exception("Could not consume OAuth state", extra={"nonce": nonce})
            raise PersistenceError() from exc

    async def _provision_quietly(
        self, tenant_id: str, access_token: str
    ) -> ProvisioningReport | None:
        try:
            return await self.provisioner.provision(tenant_id, access_token)
        except Exception:
            logger.exception("Webhook provisioning aborted", extra={"tenant_id": tenant_id})
            return None

    # ── Manual re-provisioning ──

    async def reprovision(self, raw_shop: str | None) -> ProvisioningReport:
        """Re-run webhook provisioning with the stored credential."""
        tenant_id = self._normalize(raw_shop)
        async with self.db.get_session() as session:
            shop = await self.credentials.get(session, tenant_id)
        if shop is None:
            raise NotInstalledError()
        return await self.provisioner.provision(tenant_id, shop.access_credential)
