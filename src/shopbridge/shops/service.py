"""Credential store: one access credential per installed shop."""

import logging

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shopbridge.common.exceptions import PersistenceError
from shopbridge.common.models import as_utc, utcnow
from shopbridge.shops.models import ShopModel
from shopbridge.shops.schemas import InstallStatus

logger = logging.getLogger(__name__)


class CredentialStore:
    """Upsert, lookup and delete of shop credentials keyed by tenant id."""

    async def upsert(
        self,
        session: AsyncSession,
        tenant_id: str,
        access_credential: str,
        scope: str = "",
    ) -> ShopModel:
        """Write the credential, overwriting any previous install for the tenant."""
        try:
            shop = await session.get(ShopModel, tenant_id)
            if shop is None:
                shop = ShopModel(tenant_id=tenant_id)
                session.add(shop)
            shop.access_credential = access_credential
            shop.scope = scope
            shop.installed_at = utcnow()
            await session.flush()
        except SQLAlchemyError as exc:
            logger.exception(
                "Credential upsert failed", extra={"tenant_id": tenant_id}
            )
            raise PersistenceError("Failed to store credential") from exc
        return shop

    async def get(self, session: AsyncSession, tenant_id: str) -> ShopModel | None:
        try:
            return await session.get(ShopModel, tenant_id)
        except SQLAlchemyError as exc:
            logger.exception(
                "Credential lookup failed", extra={"tenant_id": tenant_id}
            )
            raise PersistenceError() from exc

    async def status(self, session: AsyncSession, tenant_id: str) -> InstallStatus:
        """Absence is a normal answer; only store errors raise."""
        shop = await self.get(session, tenant_id)
        if shop is None:
            return InstallStatus(installed=False)
        return InstallStatus(
            installed=True,
            tenant_id=shop.tenant_id,
            installed_at=as_utc(shop.installed_at),
        )

    async def delete(self, session: AsyncSession, tenant_id: str) -> bool:
        result = await session.execute(
            delete(ShopModel).where(ShopModel.tenant_id == tenant_id)
        )
        return result.rowcount > 0
