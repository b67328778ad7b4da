"""Shared-secret authentication for inbound event webhooks."""

import logging
import secrets
from typing import NamedTuple


logger = logging.getLogger(__name__)


class WebhookSecurityResult(NamedTuple):
    """Result of webhook security validation."""

    is_valid: bool
    error_message: str | None
    http_status_code: int | None


def validate_webhook_secret(received_secret: str | None, expected_secret: str | None) -> WebhookSecurityResult:
    """Validate webhook secret (authentication).

    Args:
        received_secret: Secret received in request header
        expected_secret: Secret configured in settings

    Returns:
        WebhookSecurityResult indicating if secret is valid
    """
    if not expected_secret:
        # Secret not configured, accept all callers
        return WebhookSecurityResult(is_valid=True, error_message=None, http_status_code=None)

    if not received_secret:
        logger.warning("Missing webhook secret")
        return WebhookSecurityResult(
            is_valid=False,
            error_message="Missing webhook secret",
            http_status_code=401,
        )

    if not secrets.compare_digest(received_secret, expected_secret):
        logger.warning("Invalid webhook secret")
        return WebhookSecurityResult(
            is_valid=False,
            error_message="Invalid webhook secret",
            http_status_code=403,
        )

    return WebhookSecurityResult(is_valid=True, error_message=None, http_status_code=None)
