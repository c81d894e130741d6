"""Application wiring for the entitlement and notification services."""
from __future__ import annotations

import logging
from functools import lru_cache

from ..billing import AdaptyBillingClient
from ..config import AppConfig, load_app_config
from ..entitlements import EntitlementService
from ..identity.firebase import FirebaseIdentityProvider
from ..notifications import NotificationService, OneSignalDispatchClient

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    config = load_app_config()
    if not config.billing_api_key:
        logger.warning("ADAPTY_API_KEY is not configured; billing lookups will be rejected")
    if not config.dispatch_api_key or not config.dispatch_app_id:
        logger.warning("OneSignal credentials are incomplete; notifications will be rejected")
    return config


@lru_cache(maxsize=1)
def get_identity_provider() -> FirebaseIdentityProvider:
    return FirebaseIdentityProvider.from_config(get_app_config())


@lru_cache(maxsize=1)
def get_entitlement_service() -> EntitlementService:
    config = get_app_config()
    identity = get_identity_provider()
    return EntitlementService(
        verifier=identity,
        claim_store=identity,
        billing=AdaptyBillingClient.from_config(config),
        config=config,
    )


@lru_cache(maxsize=1)
def get_notification_service() -> NotificationService:
    config = get_app_config()
    identity = get_identity_provider()
    return NotificationService(
        verifier=identity,
        claim_store=identity,
        dispatch=OneSignalDispatchClient.from_config(config),
        config=config,
    )


__all__ = [
    "get_app_config",
    "get_entitlement_service",
    "get_identity_provider",
    "get_notification_service",
]
