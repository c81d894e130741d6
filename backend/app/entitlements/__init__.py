"""Entitlement claim models, evaluation and reconciliation service."""

from .evaluator import is_entitlement_active
from .models import (
    EntitlementClaims,
    PremiumActivation,
    REVALIDATION_INTERVAL_MS,
    RevalidationResult,
    TRIAL_LENGTH_MS,
    TrialActivation,
    from_epoch_ms,
    load_claims,
    to_epoch_ms,
)
from .service import EntitlementService

__all__ = [
    "EntitlementClaims",
    "EntitlementService",
    "PremiumActivation",
    "REVALIDATION_INTERVAL_MS",
    "RevalidationResult",
    "TRIAL_LENGTH_MS",
    "TrialActivation",
    "from_epoch_ms",
    "load_claims",
    "is_entitlement_active",
    "to_epoch_ms",
]
