from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest

from backend.app.billing import BillingProfile
from backend.app.config import AppConfig, load_app_config
from backend.app.entitlements import EntitlementService
from backend.app.errors import InvalidToken, StoreError
from backend.app.identity import DecodedToken, UserAccount
from backend.app.notifications import NotificationService

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryIdentityProvider:
    """Token verifier and claim store backed by dictionaries."""

    def __init__(self) -> None:
        self.users: Dict[str, UserAccount] = {}
        self.tokens: Dict[str, str] = {}
        self.writes: List[Tuple[str, Dict[str, Any]]] = []
        self.fail_writes = False

    def add_user(
        self,
        uid: str,
        *,
        created_at: datetime,
        email: Optional[str] = None,
        claims: Optional[Mapping[str, Any]] = None,
    ) -> str:
        token = f"token-{uid}"
        self.tokens[token] = uid
        self.users[uid] = UserAccount(uid=uid, created_at=created_at, email=email, claims=dict(claims or {}))
        return token

    def claims_of(self, uid: str) -> Dict[str, Any]:
        return dict(self.users[uid].claims)

    def verify_token(self, id_token: str) -> DecodedToken:
        uid = self.tokens.get(id_token)
        if uid is None:
            raise InvalidToken("unknown token")
        return DecodedToken(uid=uid)

    def get_user(self, uid: str) -> UserAccount:
        if uid not in self.users:
            raise StoreError("user not found")
        return self.users[uid]

    def set_claims(self, uid: str, claims: Mapping[str, Any]) -> None:
        if self.fail_writes:
            raise StoreError("write rejected")
        self.writes.append((uid, dict(claims)))
        self.users[uid] = replace(self.users[uid], claims=dict(claims))


class FakeBillingProvider:
    def __init__(self) -> None:
        self.profiles: Dict[str, BillingProfile] = {}
        self.calls: List[str] = []
        self.error: Optional[Exception] = None

    def set_access_levels(self, customer_id: str, *levels: Mapping[str, Any]) -> None:
        self.profiles[customer_id] = BillingProfile.from_access_levels(levels, customer_id=customer_id)

    def fetch_profile(self, customer_id: str) -> BillingProfile:
        self.calls.append(customer_id)
        if self.error is not None:
            raise self.error
        return self.profiles.get(customer_id, BillingProfile(customer_id=customer_id))


class FakeDispatchProvider:
    def __init__(self) -> None:
        self.sent: List[Dict[str, Any]] = []
        self.response: Dict[str, Any] = {"id": "notification-1", "external_id": None}
        self.error: Optional[Exception] = None

    def send(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        if self.error is not None:
            raise self.error
        self.sent.append(dict(payload))
        return self.response


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def app_config() -> AppConfig:
    return load_app_config(
        {
            "PREMIUM_OVERRIDE_EMAILS": "vip@example.com, QA@Example.com",
            "ONESIGNAL_APP_ID": "app-123",
            "ONESIGNAL_ANDROID_CHANNEL_ID": "channel-1",
            "APP_BUNDLE_ID": "com.example.checklists",
        }
    )


@pytest.fixture
def identity() -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider()


@pytest.fixture
def billing() -> FakeBillingProvider:
    return FakeBillingProvider()


@pytest.fixture
def dispatch() -> FakeDispatchProvider:
    return FakeDispatchProvider()


@pytest.fixture
def entitlement_service(identity, billing, app_config, now) -> EntitlementService:
    return EntitlementService(
        verifier=identity,
        claim_store=identity,
        billing=billing,
        config=app_config,
        clock=lambda: now,
    )


@pytest.fixture
def notification_service(identity, dispatch, app_config, now) -> NotificationService:
    return NotificationService(
        verifier=identity,
        claim_store=identity,
        dispatch=dispatch,
        config=app_config,
        clock=lambda: now,
    )
