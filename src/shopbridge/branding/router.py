"""Branding configuration API router."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from shopbridge.branding.schemas import BrandingConfigUpdate
from shopbridge.common.config import get_settings
from shopbridge.common.exceptions import MissingParameterError, PersistenceError
from shopbridge.common.schemas import SuccessResponse
from shopbridge.shops.domains import normalize_shop_domain

logger = logging.getLogger(__name__)

router = APIRouter()


class BrandingConfigResponse(BaseModel):
    tenant_id: str
    sender_name: Optional[str] = None
    sender_email: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    logo_url: Optional[str] = None
    updated_at: datetime

    model_config = {"from_attributes": True}


def _get_service():
    from shopbridge.deps import get_branding_service
    return get_branding_service()


def _get_db():
    from shopbridge.deps import get_db
    return get_db()


@router.post("/config", response_model=SuccessResponse)
async def save_config(body: BrandingConfigUpdate):
    raw_tenant = body.tenant_id or body.shop
    if not raw_tenant:
        raise MissingParameterError("tenant_id")
    tenant_id = normalize_shop_domain(raw_tenant, get_settings().shop_domain_suffix)

    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            await svc.save(session, tenant_id, **body.branding_fields())
    except SQLAlchemyError as exc:
        logger.exception("Save branding failed", extra={"tenant_id": tenant_id})
        raise PersistenceError("Failed to save configuration") from exc
    return SuccessResponse(message="Configuration saved")


@router.get("/config", response_model=BrandingConfigResponse)
async def get_config(
    tenant: str | None = Query(None),
    shop: str | None = Query(None),
):
    tenant_id = normalize_shop_domain(tenant or shop, get_settings().shop_domain_suffix)
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        config = await svc.get(session, tenant_id)
        if config is None:
            raise HTTPException(status_code=404, detail="Configuration not found")
        return BrandingConfigResponse.model_validate(config)
