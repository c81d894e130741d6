"""Protocols and value types for the identity provider."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Protocol

from ..errors import BadRequest


@dataclass(frozen=True)
class DecodedToken:
    """Identity proven by a verified bearer token.

    ``claims`` are the custom claims as of token issue time and may be stale.
    """

    uid: str
    claims: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UserAccount:
    """Canonical account record held by the claim store."""

    uid: str
    created_at: datetime
    email: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)


class TokenVerifier(Protocol):
    def verify_token(self, id_token: str) -> DecodedToken:
        """Verify ``id_token`` or raise ``InvalidToken``."""


class ClaimStore(Protocol):
    def get_user(self, uid: str) -> UserAccount:
        """Return the account or raise ``StoreError``."""

    def set_claims(self, uid: str, claims: Mapping[str, Any]) -> None:
        """Replace the whole custom claim set or raise ``StoreError``."""


def authenticate(verifier: TokenVerifier, store: ClaimStore, id_token: Optional[str]) -> UserAccount:
    """Resolve a bearer token to the canonical account.

    The token only proves identity. Entitlement decisions use the claims read
    back from the store, never the possibly stale claims embedded in the token.
    """

    if not id_token:
        raise BadRequest("No idToken provided")
    decoded = verifier.verify_token(id_token)
    return store.get_user(decoded.uid)


__all__ = ["ClaimStore", "DecodedToken", "TokenVerifier", "UserAccount", "authenticate"]
