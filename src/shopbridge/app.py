"""FastAPI application factory for Shopbridge."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shopbridge.common.config import get_settings
from shopbridge.common.exceptions import BridgeError
from shopbridge.common.logging import setup_logging
from shopbridge.common.schemas import ErrorResponse, HealthEnv, HealthResponse


def _error(status_code: int, error: str, code: str, detail: str = "") -> JSONResponse:
    body = ErrorResponse(error=error, code=code, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        from shopbridge.deps import get_db, get_shopify_client
        db = get_db()
        await db.init()
        await db.create_all()
        yield
        # Shutdown
        await get_shopify_client().close()
        await db.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(BridgeError)
    async def bridge_error_handler(request: Request, exc: BridgeError):
        return _error(exc.status_code, exc.message, exc.code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        detail = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'][1:])}: {err['msg']}"
            for err in exc.errors()
        )
        return _error(400, "Invalid request", "INVALID_PARAMETER", detail)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(
            version=settings.api_version,
            timestamp=datetime.now(timezone.utc),
            env=HealthEnv(
                has_client_id=bool(settings.client_id),
                has_client_secret=bool(settings.client_secret),
                has_database=bool(settings.db_url),
            ),
        )

    # Mount routers
    from shopbridge.oauth.router import router as oauth_router
    from shopbridge.shops.router import router as status_router
    from shopbridge.branding.router import router as branding_router
    from shopbridge.webhooks.router import router as webhook_router
    from shopbridge.compliance.router import router as compliance_router

    app.include_router(oauth_router)
    app.include_router(status_router, tags=["status"])
    app.include_router(branding_router, tags=["branding"])
    app.include_router(webhook_router, tags=["webhooks"])
    app.include_router(compliance_router)

    return app
