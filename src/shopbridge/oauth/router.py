"""Browser-facing install and OAuth callback routes."""

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse, RedirectResponse

from shopbridge.common.exceptions import BridgeError, TokenExchangeError

router = APIRouter(tags=["oauth"])


def _get_service():
    from shopbridge.deps import get_install_service
    return get_install_service()


def _failure_page(exc: BridgeError) -> PlainTextResponse:
    # Upstream detail stays in the logs.
    message = "Authentication failed" if isinstance(exc, TokenExchangeError) else exc.message
    return PlainTextResponse(message, status_code=exc.status_code)


@router.get("/install")
async def install(
    tenant: str | None = Query(None),
    shop: str | None = Query(None),
):
    svc = _get_service()
    try:
        url = await svc.begin_install(tenant or shop)
    except BridgeError as exc:
        return _failure_page(exc)
    return RedirectResponse(url, status_code=302)


@router.get("/callback")
async def callback(
    tenant: str | None = Query(None),
    shop: str | None = Query(None),
    code: str | None = Query(None),
    state: str | None = Query(None),
):
    svc = _get_service()
    try:
        result = await svc.complete_install(tenant or shop, code, state)
    except BridgeError as exc:
        return _failure_page(exc)
    return RedirectResponse(result.redirect_url, status_code=302)
