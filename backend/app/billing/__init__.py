"""Billing package exposing profile models and the billing provider client."""

from .client import AdaptyBillingClient, BillingProvider
from .models import AccessLevel, BillingProfile

__all__ = [
    "AccessLevel",
    "AdaptyBillingClient",
    "BillingProfile",
    "BillingProvider",
]
