"""Firebase Cloud Messaging push transport using the HTTP v1 API via httpx."""

import asyncio
import logging
from typing import Any

import httpx

from household_notify.core.config import constants, settings
from household_notify.core.errors import DeliveryErrorCode
from household_notify.domain.endpoint import DeliveryOutcome
from household_notify.domain.notification import MulticastMessage


logger = logging.getLogger(__name__)


# FCM v1 error codes (from FcmError details) mapped onto messaging/* codes
_FCM_ERROR_CODES: dict[str, str] = {
    "UNREGISTERED": DeliveryErrorCode.REGISTRATION_TOKEN_NOT_REGISTERED,
    "INVALID_ARGUMENT": DeliveryErrorCode.INVALID_ARGUMENT,
    "QUOTA_EXCEEDED": DeliveryErrorCode.MESSAGE_RATE_EXCEEDED,
    "SENDER_ID_MISMATCH": DeliveryErrorCode.MISMATCHED_CREDENTIAL,
    "THIRD_PARTY_AUTH_ERROR": DeliveryErrorCode.THIRD_PARTY_AUTH_ERROR,
    "APNS_AUTH_ERROR": DeliveryErrorCode.THIRD_PARTY_AUTH_ERROR,
    "UNAVAILABLE": DeliveryErrorCode.SERVER_UNAVAILABLE,
    "INTERNAL": DeliveryErrorCode.INTERNAL_ERROR,
}

# Canonical Google API statuses, used when the response carries no FcmError detail
_HTTP_STATUS_CODES: dict[str, str] = {
    "NOT_FOUND": DeliveryErrorCode.REGISTRATION_TOKEN_NOT_REGISTERED,
    "INVALID_ARGUMENT": DeliveryErrorCode.INVALID_ARGUMENT,
    "RESOURCE_EXHAUSTED": DeliveryErrorCode.MESSAGE_RATE_EXCEEDED,
    "PERMISSION_DENIED": DeliveryErrorCode.MISMATCHED_CREDENTIAL,
    "UNAVAILABLE": DeliveryErrorCode.SERVER_UNAVAILABLE,
    "INTERNAL": DeliveryErrorCode.INTERNAL_ERROR,
}


def build_fcm_message(message: MulticastMessage, token: str) -> dict[str, Any]:
    """Build the v1 ``message`` object for a single token."""
    fcm_message: dict[str, Any] = {
        "token": token,
        "notification": {
            "title": message.notification.title,
            "body": message.notification.body,
        },
        "data": message.notification.data,
    }
    if message.android:
        fcm_message["android"] = message.android
    if message.apns:
        fcm_message["apns"] = message.apns
    return fcm_message


def extract_error_code(payload: dict[str, Any]) -> str:
    """Map an FCM v1 error response body onto a messaging/* error code."""
    error = payload.get("error")
    if not isinstance(error, dict):
        return DeliveryErrorCode.UNKNOWN_ERROR

    fcm_code = None
    for detail in error.get("details") or []:
        if isinstance(detail, dict) and detail.get("@type", "").endswith("FcmError"):
            fcm_code = detail.get("errorCode")
            break

    code = _FCM_ERROR_CODES.get(fcm_code or "") or _HTTP_STATUS_CODES.get(error.get("status", ""))
    if code is None:
        return DeliveryErrorCode.UNKNOWN_ERROR

    # FCM reports malformed tokens as a generic INVALID_ARGUMENT
    if code == DeliveryErrorCode.INVALID_ARGUMENT and "registration token" in str(error.get("message", "")).lower():
        return DeliveryErrorCode.INVALID_REGISTRATION_TOKEN
    return code


class FcmTransport:
    """Sends each token its own v1 request, concurrently, like sendEachForMulticast."""

    def __init__(
        self,
        *,
        project_id: str,
        access_token: str,
        base_url: str = "https://fcm.googleapis.com",
        max_concurrency: int = constants.FCM_MAX_CONCURRENT_REQUESTS,
        timeout: float = constants.API_TIMEOUT_SECONDS,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}/v1/projects/{project_id}/messages:send"
        self._headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }
        self._max_concurrency = max_concurrency
        self._timeout = timeout

    @classmethod
    def from_settings(cls) -> "FcmTransport":
        """Build a transport from application settings, failing fast on missing credentials."""
        return cls(
            project_id=settings.require_credential("fcm_project_id", "FCM project ID"),
            access_token=settings.require_credential("fcm_access_token", "FCM access token"),
            base_url=settings.fcm_base_url,
        )

    async def send_multicast(self, message: MulticastMessage) -> list[DeliveryOutcome]:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async with httpx.AsyncClient(timeout=self._timeout) as client:

            async def send_one(token: str) -> DeliveryOutcome:
                async with semaphore:
                    return await self._send_one(client=client, message=message, token=token)

            return list(await asyncio.gather(*(send_one(token) for token in message.tokens)))

    async def _send_one(self, *, client: httpx.AsyncClient, message: MulticastMessage, token: str) -> DeliveryOutcome:
        try:
            response = await client.post(
                self._url,
                json={"message": build_fcm_message(message, token)},
                headers=self._headers,
            )
        except httpx.HTTPError as e:
            logger.warning("FCM request failed", extra={"error": str(e)})
            return DeliveryOutcome(success=False, error_code=DeliveryErrorCode.UNKNOWN_ERROR)

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if response.is_success:
            return DeliveryOutcome(success=True, message_id=payload.get("name"))

        error_code = extract_error_code(payload)
        logger.debug(
            "FCM rejected message",
            extra={"status_code": response.status_code, "error_code": error_code},
        )
        return DeliveryOutcome(success=False, error_code=error_code)
