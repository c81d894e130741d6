"""Domain models for entitlement claims and handler outcomes."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import StoreError

TRIAL_LENGTH_MS = 604_800_000
REVALIDATION_INTERVAL_MS = 86_400_000

CLAIM_KEYS = ("trialExpireDate", "hasPremium", "lastSubscriptionCheck")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def to_epoch_ms(instant: datetime) -> int:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return (instant - _EPOCH) // _ONE_MS


def from_epoch_ms(value: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=value)


class EntitlementClaims(BaseModel):
    """The entitlement view stored in a user's custom claim set.

    Instances are always written whole; a field left as ``None`` is omitted
    from the stored claim set rather than written as ``null``.
    """

    trial_expire_date: Optional[int] = Field(default=None, alias="trialExpireDate")
    has_premium: Optional[bool] = Field(default=None, alias="hasPremium")
    last_subscription_check: Optional[int] = Field(default=None, alias="lastSubscriptionCheck")

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @classmethod
    def from_claims(cls, claims: Optional[Mapping[str, Any]]) -> "EntitlementClaims":
        """Pick the entitlement fields out of an arbitrary claim mapping."""

        if not claims:
            return cls()
        relevant = {key: claims[key] for key in CLAIM_KEYS if claims.get(key) is not None}
        return cls.model_validate(relevant)

    def to_claims(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    @property
    def is_premium(self) -> bool:
        return self.has_premium is True

    def trial_active(self, now_ms: int) -> bool:
        return self.trial_expire_date is not None and now_ms <= self.trial_expire_date

    def checked_within(self, now_ms: int, interval_ms: int = REVALIDATION_INTERVAL_MS) -> bool:
        """Return whether the last premium check is younger than ``interval_ms``."""

        if self.last_subscription_check is None:
            return False
        return now_ms - self.last_subscription_check < interval_ms


def load_claims(raw: Optional[Mapping[str, Any]]) -> EntitlementClaims:
    """Parse stored claims, reporting unreadable values as a store failure."""

    try:
        return EntitlementClaims.from_claims(raw)
    except ValidationError as exc:
        raise StoreError("Stored claims are malformed") from exc


@dataclass(frozen=True)
class TrialActivation:
    trial_expire_date: int


@dataclass(frozen=True)
class PremiumActivation:
    has_premium: bool


@dataclass(frozen=True)
class RevalidationResult:
    """Outcome of a premium re-verification: either skipped or updated."""

    skipped: bool
    reason: Optional[str] = None
    has_premium: Optional[bool] = None

    REASON_NO_PREMIUM = "no premium claim"
    REASON_TOO_RECENT = "checked too recently"

    @classmethod
    def skip(cls, reason: str) -> "RevalidationResult":
        return cls(skipped=True, reason=reason)

    @classmethod
    def updated(cls, has_premium: bool) -> "RevalidationResult":
        return cls(skipped=False, has_premium=has_premium)


__all__ = [
    "CLAIM_KEYS",
    "EntitlementClaims",
    "PremiumActivation",
    "REVALIDATION_INTERVAL_MS",
    "RevalidationResult",
    "TRIAL_LENGTH_MS",
    "TrialActivation",
    "from_epoch_ms",
    "load_claims",
    "to_epoch_ms",
]
