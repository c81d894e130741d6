"""API routes for trial activation and premium verification."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ..entitlements import EntitlementService
from ..errors import EntitlementError
from ..schemas.entitlements import (
    PremiumActivationResponse,
    RevalidationResponse,
    TokenRequest,
    TrialActivationResponse,
)
from ..services.entitlements import get_entitlement_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["entitlements"])


def client_error(exc: EntitlementError, *, route: str, failure_message: str) -> EntitlementError:
    """Log a handler failure and return the error to surface to the caller."""

    if exc.is_client_error:
        logger.info("Request rejected", extra={"route": route, "error": exc.code})
    else:
        logger.error(
            "Request failed",
            extra={"route": route, "error": exc.code, "reason": exc.message},
            exc_info=exc,
        )
    return exc.for_client(failure_message)


@router.post("/trial", response_model=TrialActivationResponse)
def activate_trial(
    payload: TokenRequest,
    service: EntitlementService = Depends(get_entitlement_service),
) -> TrialActivationResponse:
    try:
        result = service.activate_trial(payload.id_token)
    except EntitlementError as exc:
        raise client_error(exc, route="POST /trial", failure_message="Failed to set trial")
    return TrialActivationResponse.from_result(result)


@router.post("/premium", response_model=PremiumActivationResponse)
def activate_premium(
    payload: TokenRequest,
    service: EntitlementService = Depends(get_entitlement_service),
) -> PremiumActivationResponse:
    try:
        result = service.activate_premium(payload.id_token)
    except EntitlementError as exc:
        raise client_error(exc, route="POST /premium", failure_message="Failed to activate premium")
    return PremiumActivationResponse.from_result(result)


@router.put("/premium", response_model=RevalidationResponse, response_model_exclude_none=True)
def revalidate_premium(
    payload: TokenRequest,
    service: EntitlementService = Depends(get_entitlement_service),
) -> RevalidationResponse:
    try:
        result = service.revalidate_premium(payload.id_token)
    except EntitlementError as exc:
        raise client_error(exc, route="PUT /premium", failure_message="Failed to check subscription")
    return RevalidationResponse.from_result(result)
