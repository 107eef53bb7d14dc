"""Install status API router."""

from fastapi import APIRouter, Query

from shopbridge.common.config import get_settings
from shopbridge.shops.domains import normalize_shop_domain
from shopbridge.shops.schemas import InstallStatus

router = APIRouter()


def _get_service():
    from shopbridge.deps import get_credential_store
    return get_credential_store()


def _get_db():
    from shopbridge.deps import get_db
    return get_db()


@router.get(
    "/status",
    response_model=InstallStatus,
    response_model_exclude_none=True,
)
async def install_status(
    tenant: str | None = Query(None),
    shop: str | None = Query(None),
):
    tenant_id = normalize_shop_domain(tenant or shop, get_settings().shop_domain_suffix)
    store = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        return await store.status(session, tenant_id)
