"""Entitlement-gated forwarding of push notifications."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from ..config import AppConfig
from ..entitlements.models import EntitlementClaims, load_claims, to_epoch_ms
from ..errors import Forbidden, MissingField
from ..identity.provider import ClaimStore, TokenVerifier, authenticate
from .dispatch import DispatchProvider, build_dispatch_payload

logger = logging.getLogger(__name__)


def has_valid_entitlement(claims: EntitlementClaims, now_ms: int) -> bool:
    """Premium, or a trial that has not yet expired."""

    return claims.is_premium or claims.trial_active(now_ms)


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _require_localized_content(
    titles: Optional[Mapping[str, str]],
    messages: Optional[Mapping[str, str]],
) -> None:
    """Every language needs both a non-blank title and a non-blank message."""

    if not titles:
        raise MissingField("content.titles")
    if not messages:
        raise MissingField("content.messages")
    for language in sorted(set(titles) | set(messages)):
        if not _has_text(titles.get(language)):
            raise MissingField("content.titles", f"Missing title for language: {language}")
        if not _has_text(messages.get(language)):
            raise MissingField("content.messages", f"Missing message for language: {language}")


class NotificationService:
    """Sends push notifications on behalf of entitled callers.

    Only reads entitlement state; never writes claims.
    """

    def __init__(
        self,
        verifier: TokenVerifier,
        claim_store: ClaimStore,
        dispatch: DispatchProvider,
        config: AppConfig,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._verifier = verifier
        self._claim_store = claim_store
        self._dispatch = dispatch
        self._config = config
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def notify(
        self,
        id_token: Optional[str],
        *,
        user_uids: Optional[Sequence[str]],
        titles: Optional[Mapping[str, str]],
        messages: Optional[Mapping[str, str]],
        checklist_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        recipients = [uid for uid in (user_uids or []) if uid]
        if not recipients:
            raise MissingField("userUids")
        _require_localized_content(titles, messages)

        account = authenticate(self._verifier, self._claim_store, id_token)
        claims = load_claims(account.claims)
        if not has_valid_entitlement(claims, to_epoch_ms(self._clock())):
            logger.info("Notification refused without entitlement", extra={"uid": account.uid})
            raise Forbidden("No permission to send notifications")

        payload = build_dispatch_payload(
            self._config,
            user_uids=recipients,
            titles=titles,
            messages=messages,
            checklist_id=checklist_id,
        )
        return self._dispatch.send(payload)


__all__ = ["NotificationService", "has_valid_entitlement"]
