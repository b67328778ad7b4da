"""Unit tests for the multicast dispatcher."""

import pytest

from household_notify.core.errors import DeliveryErrorCode, PushTransportError
from household_notify.domain.endpoint import DeliveryOutcome
from household_notify.domain.notification import Notification
from household_notify.services.multicast_dispatcher import MulticastDispatcher
from tests.unit.mocks import FakePushTransport


@pytest.fixture
def notification():
    return Notification(title="Task Completed!", body='"Laundry" has been completed.', data={"type": "task_completed"})


@pytest.mark.unit
class TestMulticastDispatcher:
    """Tests for MulticastDispatcher.send."""

    @pytest.mark.asyncio
    async def test_empty_tokens_skip_transport(self, notification):
        transport = FakePushTransport()

        outcomes = await MulticastDispatcher(transport).send([], notification)

        assert outcomes == []
        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_outcomes_align_with_tokens(self, notification):
        transport = FakePushTransport(
            {"t2": DeliveryOutcome(success=False, error_code=DeliveryErrorCode.INTERNAL_ERROR)}
        )

        outcomes = await MulticastDispatcher(transport).send(["t1", "t2", "t3"], notification)

        assert [outcome.success for outcome in outcomes] == [True, False, True]
        assert outcomes[1].error_code == DeliveryErrorCode.INTERNAL_ERROR
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_platform_hints_are_attached(self, notification):
        transport = FakePushTransport()

        await MulticastDispatcher(transport).send(["t1"], notification)

        message = transport.messages[0]
        assert message.android == {"priority": "high"}
        assert message.apns == {"payload": {"aps": {"sound": "default"}}}
        assert message.notification == notification

    @pytest.mark.asyncio
    async def test_large_token_lists_are_chunked_in_order(self, notification):
        transport = FakePushTransport({"t4": DeliveryOutcome(success=False, error_code="messaging/unknown-error")})
        tokens = [f"t{i}" for i in range(5)]

        outcomes = await MulticastDispatcher(transport, batch_size=2).send(tokens, notification)

        assert [message.tokens for message in transport.messages] == [["t0", "t1"], ["t2", "t3"], ["t4"]]
        assert [outcome.success for outcome in outcomes] == [True, True, True, True, False]

    def test_batch_size_is_capped_at_fcm_limit(self):
        dispatcher = MulticastDispatcher(FakePushTransport(), batch_size=10_000)

        assert dispatcher._batch_size == 500

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValueError, match="batch_size"):
            MulticastDispatcher(FakePushTransport(), batch_size=0)

    @pytest.mark.asyncio
    async def test_misaligned_transport_result_raises(self, notification):
        transport = FakePushTransport()
        transport.respond = lambda message: [DeliveryOutcome(success=True)]

        with pytest.raises(PushTransportError, match="1 outcomes for 2 tokens"):
            await MulticastDispatcher(transport).send(["t1", "t2"], notification)
