"""Decides whether a billing profile grants an active entitlement."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Optional, Union

from ..billing.models import AccessLevel, BillingProfile

ProfileLike = Union[BillingProfile, Iterable[Union[AccessLevel, Any]]]


def is_entitlement_active(profile: Optional[ProfileLike], now: datetime) -> bool:
    """Return ``True`` iff at least one access level is active at ``now``.

    Accepts a :class:`BillingProfile` or a raw iterable of access levels.
    Missing, empty or malformed data evaluates to ``False``.
    """

    if profile is None:
        return False
    if not isinstance(profile, BillingProfile):
        try:
            profile = BillingProfile.from_access_levels(profile)
        except TypeError:
            return False
    return any(level.is_active(now) for level in profile.access_levels)


__all__ = ["is_entitlement_active"]
