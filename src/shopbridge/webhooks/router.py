"""Admin route for re-running webhook provisioning on an installed shop."""

from fastapi import APIRouter, Depends, Query

from shopbridge.common.security import require_api_key
from shopbridge.webhooks.schemas import ProvisioningResponse

router = APIRouter()


def _get_install_service():
    from shopbridge.deps import get_install_service
    return get_install_service()


@router.post("/webhooks/provision", response_model=ProvisioningResponse)
async def provision_webhooks(
    tenant: str | None = Query(None),
    shop: str | None = Query(None),
    _=Depends(require_api_key),
):
    svc = _get_install_service()
    report = await svc.reprovision(tenant or shop)
    return ProvisioningResponse(
        tenant_id=report.tenant_id,
        succeeded=report.succeeded,
        failed=report.failed,
        outcomes=report.outcomes,
    )
