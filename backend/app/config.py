"""Application configuration helpers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional
import os


@dataclass(frozen=True)
class AppConfig:
    """Immutable settings shared by the identity, billing and dispatch adapters."""

    google_credentials: Optional[str]
    firebase_project_id: Optional[str]
    billing_api_key: str
    billing_base_url: str
    dispatch_api_key: str
    dispatch_base_url: str
    dispatch_app_id: str
    dispatch_channel_id: Optional[str]
    bundle_id: str
    premium_override_emails: FrozenSet[str] = field(default_factory=frozenset)
    http_timeout_seconds: float = 10.0
    port: int = 3000
    log_level: str = "INFO"

    def is_override_email(self, email: Optional[str]) -> bool:
        if not email:
            return False
        return email.strip().lower() in self.premium_override_emails


def _to_int(value: Optional[str], *, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected integer value, got {value!r}") from exc


def _to_float(value: Optional[str], *, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected float value, got {value!r}") from exc


def _to_email_set(value: Optional[str]) -> FrozenSet[str]:
    if not value:
        return frozenset()
    return frozenset(item.strip().lower() for item in value.split(",") if item.strip())


def load_app_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Load :class:`AppConfig` from environment variables."""

    env_mapping = os.environ if env is None else env

    timeout = _to_float(env_mapping.get("HTTP_TIMEOUT_SECONDS"), default=10.0)
    if timeout <= 0:
        raise ValueError("HTTP_TIMEOUT_SECONDS must be positive")

    return AppConfig(
        google_credentials=env_mapping.get("GOOGLE_CREDENTIALS") or None,
        firebase_project_id=env_mapping.get("FIREBASE_PROJECT_ID") or None,
        billing_api_key=env_mapping.get("ADAPTY_API_KEY", ""),
        billing_base_url=(env_mapping.get("ADAPTY_BASE_URL") or "https://api.adapty.io").rstrip("/"),
        dispatch_api_key=env_mapping.get("ONESIGNAL_API_KEY", ""),
        dispatch_base_url=(env_mapping.get("ONESIGNAL_BASE_URL") or "https://api.onesignal.com").rstrip("/"),
        dispatch_app_id=env_mapping.get("ONESIGNAL_APP_ID", ""),
        dispatch_channel_id=env_mapping.get("ONESIGNAL_ANDROID_CHANNEL_ID") or None,
        bundle_id=env_mapping.get("APP_BUNDLE_ID", ""),
        premium_override_emails=_to_email_set(env_mapping.get("PREMIUM_OVERRIDE_EMAILS")),
        http_timeout_seconds=timeout,
        port=_to_int(env_mapping.get("PORT"), default=3000),
        log_level=(env_mapping.get("LOG_LEVEL") or "INFO").strip().upper(),
    )


__all__ = ["AppConfig", "load_app_config"]
