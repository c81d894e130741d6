"""Domain models for billing profiles returned by the billing provider."""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


def _ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AccessLevel(BaseModel):
    """A time-bounded grant inside a customer's billing profile."""

    access_level_id: Optional[str] = None
    starts_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("starts_at", "expires_at", mode="before")
    @classmethod
    def _normalize_offset(cls, value: Any) -> Any:
        # The provider emits offsets as +0000.
        if isinstance(value, str):
            return _COMPACT_OFFSET.sub(r"\1:\2", value.strip())
        return value

    @field_validator("starts_at", "expires_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _ensure_aware(value)

    def is_active(self, now: datetime) -> bool:
        """Return whether ``now`` falls inside the grant's window.

        A missing bound is unbounded on that side; both bounds are inclusive.
        """

        now = _ensure_aware(now)
        if self.starts_at is not None and now < self.starts_at:
            return False
        if self.expires_at is not None and now > self.expires_at:
            return False
        return True


class BillingProfile(BaseModel):
    """Customer profile as seen by the billing provider for a single request."""

    customer_id: Optional[str] = None
    access_levels: Tuple[AccessLevel, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_access_levels(
        cls,
        raw_levels: Iterable[Any],
        *,
        customer_id: Optional[str] = None,
    ) -> "BillingProfile":
        levels: List[AccessLevel] = []
        for raw in raw_levels:
            if isinstance(raw, AccessLevel):
                levels.append(raw)
                continue
            if not isinstance(raw, Mapping):
                logger.debug("Dropping non-object access level", extra={"customer_id": customer_id})
                continue
            try:
                levels.append(AccessLevel.model_validate(dict(raw)))
            except ValidationError:
                logger.debug("Dropping malformed access level", extra={"customer_id": customer_id})
        return cls(customer_id=customer_id, access_levels=tuple(levels))

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        *,
        customer_id: Optional[str] = None,
    ) -> "BillingProfile":
        """Build a profile from a provider response, failing closed on bad data."""

        if not isinstance(payload, Mapping):
            return cls(customer_id=customer_id)
        data = payload.get("data", payload)
        if not isinstance(data, Mapping):
            return cls(customer_id=customer_id)
        raw_levels = data.get("access_levels")
        if not isinstance(raw_levels, list):
            return cls(customer_id=customer_id)
        return cls.from_access_levels(raw_levels, customer_id=customer_id)


__all__ = ["AccessLevel", "BillingProfile"]
