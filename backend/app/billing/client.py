"""Billing provider integration."""
from __future__ import annotations

import logging
from typing import Protocol

from ..config import AppConfig
from ..http_client import request_json
from .models import BillingProfile

logger = logging.getLogger(__name__)

PROFILE_PATH = "/api/v2/server-side-api/profile/"


class BillingProvider(Protocol):
    """Source of truth for a customer's paid access levels."""

    def fetch_profile(self, customer_id: str) -> BillingProfile:
        """Return the customer's profile or raise ``UpstreamUnavailable``."""


class AdaptyBillingClient:
    """Reads customer profiles from the Adapty server-side API."""

    name = "adapty"

    def __init__(self, *, api_key: str, base_url: str, timeout: float) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: AppConfig) -> "AdaptyBillingClient":
        return cls(
            api_key=config.billing_api_key,
            base_url=config.billing_base_url,
            timeout=config.http_timeout_seconds,
        )

    def fetch_profile(self, customer_id: str) -> BillingProfile:
        payload = request_json(
            "GET",
            f"{self.base_url}{PROFILE_PATH}",
            provider=self.name,
            headers={
                "Authorization": f"Api-Key {self.api_key}",
                "adapty-customer-user-id": customer_id,
            },
            timeout=self.timeout,
        )
        profile = BillingProfile.from_payload(payload, customer_id=customer_id)
        logger.debug(
            "Fetched billing profile",
            extra={"customer_id": customer_id, "access_level_count": len(profile.access_levels)},
        )
        return profile


__all__ = ["AdaptyBillingClient", "BillingProvider"]
