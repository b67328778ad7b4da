"""Delivery error classification and service exceptions."""

from enum import Enum


class DeliveryErrorCategory(Enum):
    """Categories of per-endpoint delivery failures."""

    PERMANENTLY_INVALID = "permanently_invalid"
    TRANSIENT = "transient"
    UNKNOWN = "unknown"


class DeliveryErrorCode:
    """Error codes reported per endpoint by the push transport."""

    # Endpoint is gone for good
    REGISTRATION_TOKEN_NOT_REGISTERED = "messaging/registration-token-not-registered"
    INVALID_REGISTRATION_TOKEN = "messaging/invalid-registration-token"

    # Everything else
    INVALID_ARGUMENT = "messaging/invalid-argument"
    MESSAGE_RATE_EXCEEDED = "messaging/message-rate-exceeded"
    MISMATCHED_CREDENTIAL = "messaging/mismatched-credential"
    THIRD_PARTY_AUTH_ERROR = "messaging/third-party-auth-error"
    SERVER_UNAVAILABLE = "messaging/server-unavailable"
    INTERNAL_ERROR = "messaging/internal-error"
    UNKNOWN_ERROR = "messaging/unknown-error"


PERMANENT_INVALID_CODES: frozenset[str] = frozenset(
    {
        DeliveryErrorCode.REGISTRATION_TOKEN_NOT_REGISTERED,
        DeliveryErrorCode.INVALID_REGISTRATION_TOKEN,
    }
)

_TRANSIENT_CODES: frozenset[str] = frozenset(
    {
        DeliveryErrorCode.MESSAGE_RATE_EXCEEDED,
        DeliveryErrorCode.SERVER_UNAVAILABLE,
        DeliveryErrorCode.INTERNAL_ERROR,
    }
)


class PushTransportError(Exception):
    """Raised when the push transport cannot produce a usable batch result."""


class EndpointStoreError(Exception):
    """Raised when an endpoint record cannot be read or written."""


def classify_delivery_error(*, success: bool, error_code: str | None) -> DeliveryErrorCategory | None:
    """Classify a single delivery outcome.

    Returns None for successful deliveries.
    """
    if success:
        return None
    if error_code in PERMANENT_INVALID_CODES:
        return DeliveryErrorCategory.PERMANENTLY_INVALID
    if error_code in _TRANSIENT_CODES:
        return DeliveryErrorCategory.TRANSIENT
    return DeliveryErrorCategory.UNKNOWN


def is_permanently_invalid(*, success: bool, error_code: str | None) -> bool:
    """Return True if the endpoint behind this outcome will never succeed again."""
    return classify_delivery_error(success=success, error_code=error_code) is DeliveryErrorCategory.PERMANENTLY_INVALID
