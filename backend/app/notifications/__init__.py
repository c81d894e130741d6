"""Push notification dispatch and the entitlement gate in front of it."""

from .dispatch import DispatchProvider, OneSignalDispatchClient, build_dispatch_payload, grouping_key
from .service import NotificationService, has_valid_entitlement

__all__ = [
    "DispatchProvider",
    "NotificationService",
    "OneSignalDispatchClient",
    "build_dispatch_payload",
    "grouping_key",
    "has_valid_entitlement",
]
