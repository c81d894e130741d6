"""Service reconciling trial and premium claims against the billing provider."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..billing.client import BillingProvider
from ..config import AppConfig
from ..identity.provider import ClaimStore, TokenVerifier, UserAccount, authenticate
from ..errors import AlreadyActivated
from .evaluator import is_entitlement_active
from .models import (
    EntitlementClaims,
    PremiumActivation,
    RevalidationResult,
    TRIAL_LENGTH_MS,
    TrialActivation,
    load_claims,
    to_epoch_ms,
)

logger = logging.getLogger(__name__)


class EntitlementService:
    """Coordinates trial activation and premium verification for one account.

    Each operation is a read-modify-write against the claim store with no
    compare-and-swap: two concurrent requests for the same uid may both pass
    their precondition before either writes.
    """

    def __init__(
        self,
        verifier: TokenVerifier,
        claim_store: ClaimStore,
        billing: BillingProvider,
        config: AppConfig,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._verifier = verifier
        self._claim_store = claim_store
        self._billing = billing
        self._config = config
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def activate_trial(self, id_token: Optional[str]) -> TrialActivation:
        """Stamp the trial expiry exactly once, seven days after sign-up."""

        account = authenticate(self._verifier, self._claim_store, id_token)
        claims = load_claims(account.claims)
        if claims.trial_expire_date is not None:
            raise AlreadyActivated("Trial already set")

        trial_expire_date = to_epoch_ms(account.created_at) + TRIAL_LENGTH_MS
        self._write(
            account,
            EntitlementClaims(
                trial_expire_date=trial_expire_date,
                has_premium=claims.has_premium,
            ),
        )
        logger.info("Trial activated", extra={"uid": account.uid, "trial_expire_date": trial_expire_date})
        return TrialActivation(trial_expire_date=trial_expire_date)

    def activate_premium(self, id_token: Optional[str]) -> PremiumActivation:
        """Run the first premium check and flag the account when it is entitled."""

        account = authenticate(self._verifier, self._claim_store, id_token)
        claims = load_claims(account.claims)
        if claims.is_premium:
            raise AlreadyActivated("Premium already activated")

        profile = self._billing.fetch_profile(account.uid)
        if not is_entitlement_active(profile, self._clock()):
            logger.info("No active entitlement found", extra={"uid": account.uid})
            return PremiumActivation(has_premium=False)

        self._write(
            account,
            EntitlementClaims(
                trial_expire_date=claims.trial_expire_date,
                has_premium=True,
            ),
        )
        logger.info("Premium activated", extra={"uid": account.uid})
        return PremiumActivation(has_premium=True)

    def revalidate_premium(self, id_token: Optional[str]) -> RevalidationResult:
        """Re-verify a premium account at most once per revalidation interval.

        A billing failure propagates as ``UpstreamUnavailable`` and nothing is
        written, so an outage never revokes premium.
        """

        account = authenticate(self._verifier, self._claim_store, id_token)
        claims = load_claims(account.claims)
        if not claims.has_premium:
            return RevalidationResult.skip(RevalidationResult.REASON_NO_PREMIUM)

        now = self._clock()
        now_ms = to_epoch_ms(now)
        if claims.checked_within(now_ms):
            return RevalidationResult.skip(RevalidationResult.REASON_TOO_RECENT)

        if self._config.is_override_email(account.email):
            logger.info("Premium granted by override list", extra={"uid": account.uid})
            active = True
        else:
            active = is_entitlement_active(self._billing.fetch_profile(account.uid), now)

        if active:
            updated = EntitlementClaims(
                trial_expire_date=claims.trial_expire_date,
                has_premium=True,
                last_subscription_check=now_ms,
            )
        else:
            # Dropping the check time lets the next revalidation run immediately.
            updated = EntitlementClaims(trial_expire_date=claims.trial_expire_date)
            logger.info("Premium revoked", extra={"uid": account.uid})

        self._write(account, updated)
        return RevalidationResult.updated(has_premium=active)

    def _write(self, account: UserAccount, claims: EntitlementClaims) -> None:
        self._claim_store.set_claims(account.uid, claims.to_claims())


__all__ = ["EntitlementService"]
