"""Error taxonomy shared by the entitlement handlers and their adapters."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from fastapi import HTTPException, status


class EntitlementError(Exception):
    """Base error carrying the client-facing code, message and HTTP status."""

    code = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    is_client_error = False

    def __init__(self, message: str, *, detail: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = dict(detail) if detail else None

    @property
    def payload(self) -> Mapping[str, Any]:
        """Serialized representation suitable for JSON responses."""

        body: Dict[str, Any] = {"error": self.code, "message": self.message}
        if self.detail:
            body.update(self.detail)
        return body

    def for_client(self, failure_message: str) -> "EntitlementError":
        """Return an error safe to show callers.

        Client errors keep their message; collaborator failures are replaced
        by ``failure_message`` with the same code and status.
        """

        if self.is_client_error:
            return self
        redacted = EntitlementError(failure_message)
        redacted.code = self.code
        redacted.status_code = self.status_code
        return redacted

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=dict(self.payload))


class BadRequest(EntitlementError):
    code = "bad_request"
    status_code = status.HTTP_400_BAD_REQUEST
    is_client_error = True


class MissingField(BadRequest):
    code = "missing_field"

    def __init__(self, field_name: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"Missing required field: {field_name}", detail={"field": field_name})
        self.field_name = field_name


class AlreadyActivated(EntitlementError):
    """Raised when a write-once activation has already happened."""

    code = "already_activated"
    status_code = status.HTTP_400_BAD_REQUEST
    is_client_error = True


class InvalidToken(EntitlementError):
    code = "invalid_token"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class Forbidden(EntitlementError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    is_client_error = True


class UpstreamUnavailable(EntitlementError):
    """Billing or dispatch provider failed or returned a non-success status."""

    code = "upstream_unavailable"


class StoreError(EntitlementError):
    """Claim store read or write failed."""

    code = "store_error"


__all__ = [
    "AlreadyActivated",
    "BadRequest",
    "EntitlementError",
    "Forbidden",
    "InvalidToken",
    "MissingField",
    "StoreError",
    "UpstreamUnavailable",
]
