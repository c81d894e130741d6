"""Push notification dispatch provider integration."""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence

from ..config import AppConfig
from ..http_client import request_json

logger = logging.getLogger(__name__)


class DispatchProvider(Protocol):
    """Delivers an assembled push payload."""

    def send(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Deliver ``payload`` or raise ``UpstreamUnavailable``."""


class OneSignalDispatchClient:
    """Posts notifications to the OneSignal REST API."""

    name = "onesignal"

    def __init__(self, *, api_key: str, base_url: str, timeout: float) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: AppConfig) -> "OneSignalDispatchClient":
        return cls(
            api_key=config.dispatch_api_key,
            base_url=config.dispatch_base_url,
            timeout=config.http_timeout_seconds,
        )

    def send(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        result = request_json(
            "POST",
            f"{self.base_url}/notifications",
            provider=self.name,
            headers={"Authorization": f"Key {self.api_key}"},
            timeout=self.timeout,
            body=payload,
        )
        logger.info("Notification dispatched", extra={"notification_id": result.get("id")})
        return result


def grouping_key(bundle_id: str, checklist_id: str) -> str:
    prefix = bundle_id.strip(".")
    return f"{prefix}.checklist.{checklist_id}" if prefix else f"checklist.{checklist_id}"


def build_dispatch_payload(
    config: AppConfig,
    *,
    user_uids: Sequence[str],
    titles: Mapping[str, str],
    messages: Mapping[str, str],
    checklist_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Assemble the provider payload addressed to external user ids."""

    payload: Dict[str, Any] = {
        "app_id": config.dispatch_app_id,
        "include_aliases": {"external_id": list(user_uids)},
        "target_channel": "push",
        "headings": dict(titles),
        "contents": dict(messages),
    }
    if config.dispatch_channel_id:
        payload["android_channel_id"] = config.dispatch_channel_id
    if checklist_id:
        key = grouping_key(config.bundle_id, checklist_id)
        payload["thread_id"] = key
        payload["android_group"] = key
        payload["collapse_id"] = key
    return payload


__all__ = [
    "DispatchProvider",
    "OneSignalDispatchClient",
    "build_dispatch_payload",
    "grouping_key",
]
