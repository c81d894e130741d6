"""API schemas for trial and premium endpoints."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..entitlements.models import PremiumActivation, RevalidationResult, TrialActivation


class TokenRequest(BaseModel):
    id_token: Optional[str] = Field(default=None, alias="idToken")

    model_config = ConfigDict(populate_by_name=True)


class TrialActivationResponse(BaseModel):
    success: bool = True
    trial_expire_date: int = Field(alias="trialExpireDate")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_result(cls, result: TrialActivation) -> "TrialActivationResponse":
        return cls(trial_expire_date=result.trial_expire_date)


class PremiumActivationResponse(BaseModel):
    success: bool = True
    has_premium: bool = Field(alias="hasPremium")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_result(cls, result: PremiumActivation) -> "PremiumActivationResponse":
        return cls(has_premium=result.has_premium)


class RevalidationResponse(BaseModel):
    """Either ``{skipped, reason}`` or ``{updated, hasPremium}``."""

    skipped: Optional[bool] = None
    reason: Optional[str] = None
    updated: Optional[bool] = None
    has_premium: Optional[bool] = Field(default=None, alias="hasPremium")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_result(cls, result: RevalidationResult) -> "RevalidationResponse":
        if result.skipped:
            return cls(skipped=True, reason=result.reason)
        return cls(updated=True, has_premium=result.has_premium)
