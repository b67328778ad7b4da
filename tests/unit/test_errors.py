"""Unit tests for delivery error classification."""

import pytest

from household_notify.core.errors import (
    PERMANENT_INVALID_CODES,
    DeliveryErrorCategory,
    DeliveryErrorCode,
    classify_delivery_error,
    is_permanently_invalid,
)
from household_notify.domain.endpoint import DeliveryOutcome


@pytest.mark.unit
class TestClassifyDeliveryError:
    """Tests for classify_delivery_error."""

    def test_success_has_no_category(self):
        assert classify_delivery_error(success=True, error_code=None) is None

    @pytest.mark.parametrize("code", sorted(PERMANENT_INVALID_CODES))
    def test_permanent_codes(self, code):
        assert classify_delivery_error(success=False, error_code=code) is DeliveryErrorCategory.PERMANENTLY_INVALID

    def test_transient_codes(self):
        result = classify_delivery_error(success=False, error_code=DeliveryErrorCode.SERVER_UNAVAILABLE)

        assert result is DeliveryErrorCategory.TRANSIENT

    def test_unknown_code(self):
        assert classify_delivery_error(success=False, error_code="messaging/new-thing") is DeliveryErrorCategory.UNKNOWN
        assert classify_delivery_error(success=False, error_code=None) is DeliveryErrorCategory.UNKNOWN

    def test_success_with_permanent_code_is_not_invalid(self):
        """A stray error code on a successful outcome never triggers deletion."""
        assert is_permanently_invalid(success=True, error_code=DeliveryErrorCode.INVALID_REGISTRATION_TOKEN) is False

    def test_outcome_property(self):
        outcome = DeliveryOutcome(success=False, error_code=DeliveryErrorCode.REGISTRATION_TOKEN_NOT_REGISTERED)

        assert outcome.is_permanently_invalid is True
        assert DeliveryOutcome(success=False, error_code="messaging/internal-error").is_permanently_invalid is False
