"""Protocolos e contratos do core da aplicação."""

from .captcha import CaptchaVerifierProtocol
from .http_client import TelegramHttpClientProtocol
from .key_value_store import KeyValueStoreProtocol
from .models import (
    AdmissionOutcome,
    ContactFormData,
    DeliveryResult,
    RouteTarget,
    TelegramSendResponse,
)
from .origin_patterns import OriginPatternProviderProtocol
from .outbound_sender import MessageDeliveryProtocol

__all__ = [
    "AdmissionOutcome",
    "CaptchaVerifierProtocol",
    "ContactFormData",
    "DeliveryResult",
    "KeyValueStoreProtocol",
    "MessageDeliveryProtocol",
    "OriginPatternProviderProtocol",
    "RouteTarget",
    "TelegramHttpClientProtocol",
    "TelegramSendResponse",
]
