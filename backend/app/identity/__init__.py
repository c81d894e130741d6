"""Identity provider protocols and the Firebase adapter."""

from .provider import ClaimStore, DecodedToken, TokenVerifier, UserAccount, authenticate

__all__ = [
    "ClaimStore",
    "DecodedToken",
    "TokenVerifier",
    "UserAccount",
    "authenticate",
]
