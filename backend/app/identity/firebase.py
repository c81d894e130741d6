"""Firebase Authentication adapter for token verification and claim storage."""
from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Dict, Mapping, Optional

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin import exceptions as firebase_exceptions

from ..config import AppConfig
from ..entitlements.models import from_epoch_ms
from ..errors import InvalidToken, StoreError
from .provider import DecodedToken, UserAccount

logger = logging.getLogger(__name__)

APP_NAME = "entitlement-sync"


def decode_service_account(encoded: str) -> Dict[str, Any]:
    """Decode base64-encoded service account JSON."""

    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        payload = json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError("GOOGLE_CREDENTIALS must be base64-encoded service account JSON") from exc
    if not isinstance(payload, dict):
        raise ValueError("GOOGLE_CREDENTIALS must decode to a JSON object")
    return payload


def initialize_firebase_app(config: AppConfig) -> firebase_admin.App:
    try:
        return firebase_admin.get_app(APP_NAME)
    except ValueError:
        pass

    if config.google_credentials:
        credential = credentials.Certificate(decode_service_account(config.google_credentials))
    else:
        credential = credentials.ApplicationDefault()
    options = {"projectId": config.firebase_project_id} if config.firebase_project_id else None
    try:
        return firebase_admin.initialize_app(credential, options, name=APP_NAME)
    except ValueError:
        # Another request initialized the named app first.
        logger.debug("Firebase app already initialized", extra={"app_name": APP_NAME})
        return firebase_admin.get_app(APP_NAME)


class FirebaseIdentityProvider:
    """Implements both ``TokenVerifier`` and ``ClaimStore`` on one Firebase app."""

    def __init__(self, app: Optional[firebase_admin.App] = None) -> None:
        self.app = app

    @classmethod
    def from_config(cls, config: AppConfig) -> "FirebaseIdentityProvider":
        return cls(initialize_firebase_app(config))

    def verify_token(self, id_token: str) -> DecodedToken:
        try:
            decoded = auth.verify_id_token(id_token, app=self.app)
        except (ValueError, firebase_exceptions.FirebaseError) as exc:
            logger.info("Token verification failed", extra={"error_type": type(exc).__name__})
            raise InvalidToken("Token verification failed") from exc

        uid = decoded.get("uid")
        if not uid:
            raise InvalidToken("Token has no subject")
        return DecodedToken(uid=uid, claims=decoded)

    def get_user(self, uid: str) -> UserAccount:
        try:
            record = auth.get_user(uid, app=self.app)
        except (ValueError, firebase_exceptions.FirebaseError) as exc:
            logger.warning("Failed to read user record", extra={"uid": uid, "error_type": type(exc).__name__})
            raise StoreError("Failed to read user record") from exc

        created_ms = record.user_metadata.creation_timestamp
        if created_ms is None:
            raise StoreError("User record has no creation time")
        return UserAccount(
            uid=record.uid,
            created_at=from_epoch_ms(int(created_ms)),
            email=record.email,
            claims=dict(record.custom_claims or {}),
        )

    def set_claims(self, uid: str, claims: Mapping[str, Any]) -> None:
        try:
            auth.set_custom_user_claims(uid, dict(claims), app=self.app)
        except (ValueError, firebase_exceptions.FirebaseError) as exc:
            logger.warning("Failed to write custom claims", extra={"uid": uid, "error_type": type(exc).__name__})
            raise StoreError("Failed to write custom claims") from exc


__all__ = ["FirebaseIdentityProvider", "decode_service_account", "initialize_firebase_app"]
