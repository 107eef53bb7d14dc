"""Branding configuration service."""

from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from shopbridge.branding.models import BrandingConfigModel
from shopbridge.common.models import utcnow

_FIELDS = (
    "sender_name",
    "sender_email",
    "primary_color",
    "secondary_color",
    "logo_url",
)


class BrandingService:
    """Upsert and delete of branding configuration keyed by tenant id."""

    async def save(
        self, session: AsyncSession, tenant_id: str, **fields: Any
    ) -> BrandingConfigModel:
        """Overwrite only the fields passed in; the rest keep their stored values."""
        config = await session.get(BrandingConfigModel, tenant_id)
        if config is None:
            config = BrandingConfigModel(tenant_id=tenant_id)
            session.add(config)
        for field in _FIELDS:
            if field in fields:
                setattr(config, field, fields[field])
        config.updated_at = utcnow()
        await session.flush()
        return config

    async def get(
        self, session: AsyncSession, tenant_id: str
    ) -> BrandingConfigModel | None:
        return await session.get(BrandingConfigModel, tenant_id)

    async def delete(self, session: AsyncSession, tenant_id: str) -> bool:
        result = await session.execute(
            delete(BrandingConfigModel).where(BrandingConfigModel.tenant_id == tenant_id)
        )
        return result.rowcount > 0
