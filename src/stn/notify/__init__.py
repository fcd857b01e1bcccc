from .base import DeliveryClient
from .payload import FAIL_COLOR, PASS_COLOR, NotificationPayload, build_payload
from .teams import DeliveryResult, TeamsWebhookClient

__all__ = [
    "DeliveryClient",
    "DeliveryResult",
    "FAIL_COLOR",
    "NotificationPayload",
    "PASS_COLOR",
    "TeamsWebhookClient",
    "build_payload",
]
