"""API route forwarding push notifications for entitled callers."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..errors import EntitlementError
from ..notifications import NotificationService
from ..schemas.notifications import NotificationContent, NotifyRequest
from ..services.entitlements import get_notification_service
from .entitlements import client_error

router = APIRouter(tags=["notifications"])


@router.post("/notify")
def send_notification(
    payload: NotifyRequest,
    service: NotificationService = Depends(get_notification_service),
) -> Dict[str, Any]:
    """Relay the dispatch provider's response verbatim."""
    content = payload.content or NotificationContent()
    try:
        return service.notify(
            payload.id_token,
            user_uids=payload.user_uids,
            titles=content.titles,
            messages=content.messages,
            checklist_id=payload.checklist_key,
        )
    except EntitlementError as exc:
        raise client_error(exc, route="POST /notify", failure_message="Failed to send notification")
