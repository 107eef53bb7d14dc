"""Dependency injection singletons for Shopbridge."""

from shopbridge.branding.service import BrandingService
from shopbridge.common.config import get_settings
from shopbridge.common.database import DatabaseManager
from shopbridge.compliance.service import ComplianceService
from shopbridge.oauth.service import InstallService
from shopbridge.oauth.state import StateStore
from shopbridge.platform.client import ShopifyClient
from shopbridge.shops.service import CredentialStore
from shopbridge.webhooks.service import WebhookProvisioner
from shopbridge.webhooks.topics import build_subscriptions

_db: DatabaseManager | None = None
_client: ShopifyClient | None = None
_credentials: CredentialStore | None = None
_branding: BrandingService | None = None
_states: StateStore | None = None
_provisioner: WebhookProvisioner | None = None
_install: InstallService | None = None
_compliance: ComplianceService | None = None


def get_db() -> DatabaseManager:
    global _db
    if _db is None:
        _db = DatabaseManager(get_settings())
    return _db


def get_shopify_client() -> ShopifyClient:
    global _client
    if _client is None:
        settings = get_settings()
        _client = ShopifyClient(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            api_version=settings.platform_api_version,
            timeout=settings.http_timeout_seconds,
        )
    return _client


def set_shopify_client(client: ShopifyClient) -> None:
    """Swap the platform client (tests inject one on httpx.MockTransport)."""
    global _client, _provisioner, _install
    _client = client
    _provisioner = None
    _install = None


def get_credential_store() -> CredentialStore:
    global _credentials
    if _credentials is None:
        _credentials = CredentialStore()
    return _credentials


def get_branding_service() -> BrandingService:
    global _branding
    if _branding is None:
        _branding = BrandingService()
    return _branding


def get_state_store() -> StateStore:
    global _states
    if _states is None:
        _states = StateStore(ttl_seconds=get_settings().state_ttl_seconds)
    return _states


def get_webhook_provisioner() -> WebhookProvisioner:
    global _provisioner
    if _provisioner is None:
        _provisioner = WebhookProvisioner(
            get_shopify_client(),
            build_subscriptions(get_settings().event_base_url),
        )
    return _provisioner


def get_install_service() -> InstallService:
    global _install
    if _install is None:
        _install = InstallService(
            get_settings(),
            get_db(),
            get_shopify_client(),
            states=get_state_store(),
            credentials=get_credential_store(),
            provisioner=get_webhook_provisioner(),
        )
    return _install


def get_compliance_service() -> ComplianceService:
    global _compliance
    if _compliance is None:
        _compliance = ComplianceService(
            get_credential_store(),
            get_branding_service(),
            get_state_store(),
            shop_domain_suffix=get_settings().shop_domain_suffix,
        )
    return _compliance


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _db, _client, _credentials, _branding, _states, _provisioner, _install, _compliance
    _db = None
    _client = None
    _credentials = None
    _branding = None
    _states = None
    _provisioner = None
    _install = None
    _compliance = None
