"""Shopbridge configuration via pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_DEFAULTS = {
    "api_key": "insecure-admin-key-change-me",
}


class BridgeSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SHOPBRIDGE_")

    environment: str = "development"
    log_level: str = "INFO"

    # Database (persistence endpoint; credentials live in the URL)
    db_url: str = "sqlite+aiosqlite:///./data/shopbridge.db"

    # API
    api_title: str = "Shopbridge"
    api_version: str = "0.1.0"
    api_key: str = "insecure-admin-key-change-me"
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = ["http://localhost:3000"]

    # Platform app credentials
    client_id: str = ""
    client_secret: str = ""
    scopes: list[str] = [
        "read_orders",
        "write_orders",
        "read_customers",
        "read_checkouts",
    ]
    shop_domain_suffix: str = "myshopify.com"
    platform_api_version: str = "2024-01"
    http_timeout_seconds: float = 10.0

    # Public URLs
    app_url: str = "http://localhost:8080"
    onboarding_path: str = "/onboarding/branding"
    event_base_url: str = "http://localhost:5678/webhook"

    # OAuth state
    state_ttl_seconds: int = 600  # 10 minutes

    # Compliance webhooks
    enforce_webhook_hmac: bool = False

    @property
    def callback_url(self) -> str:
        return f"{self.app_url.rstrip('/')}/callback"

    @property
    def onboarding_url(self) -> str:
        return f"{self.app_url.rstrip('/')}{self.onboarding_path}"

    @property
    def scope_param(self) -> str:
        """Comma-joined scope list as the platform expects it."""
        return ",".join(self.scopes)

    def validate_for_production(self) -> None:
        """Raise if insecure defaults or missing app credentials are used outside development."""
        insecure_fields = [
            field
            for field, default in _INSECURE_DEFAULTS.items()
            if getattr(self, field) == default
        ]
        missing = [
            field for field in ("client_id", "client_secret") if not getattr(self, field)
        ]

        if self.environment != "development" and (insecure_fields or missing):
            env_vars = ", ".join(
                f"SHOPBRIDGE_{f.upper()}" for f in insecure_fields + missing
            )
            raise RuntimeError(
                f"Insecure or missing configuration in '{self.environment}' environment. "
                f"Set these environment variables: {env_vars}."
            )

        if insecure_fields:
            warnings.warn(
                "Using insecure default admin key; set SHOPBRIDGE_API_KEY for production",
                UserWarning,
                stacklevel=2,
            )


@lru_cache
def get_settings() -> BridgeSettings:
    settings = BridgeSettings()
    settings.validate_for_production()
    return settings
