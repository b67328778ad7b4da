"""Unit tests for the failure reconciler."""

import pytest

from household_notify.core.errors import DeliveryErrorCode
from household_notify.domain.endpoint import DeliveryOutcome
from household_notify.services.failure_reconciler import FailureReconciler
from tests.unit.mocks import InMemoryEndpointStore


def _failed(code: str) -> DeliveryOutcome:
    return DeliveryOutcome(success=False, error_code=code)


@pytest.mark.unit
class TestFailureReconciler:
    """Tests for FailureReconciler.reconcile."""

    @pytest.mark.asyncio
    async def test_only_permanently_invalid_tokens_are_deleted(self):
        """t1 is invalid and deleted; t3 failed transiently and is kept."""
        store = InMemoryEndpointStore()
        store.add("alice", "t1")
        store.add("alice", "t2")
        store.add("bob", "t3")

        deleted = await FailureReconciler(store).reconcile(
            ["t1", "t2", "t3"],
            [
                _failed("messaging/invalid-registration-token"),
                DeliveryOutcome(success=True),
                _failed("messaging/internal-error"),
            ],
        )

        assert [endpoint.token for endpoint in deleted] == ["t1"]
        assert store.tokens == ["t2", "t3"]

    @pytest.mark.asyncio
    async def test_unregistered_token_is_deleted(self):
        store = InMemoryEndpointStore()
        store.add("alice", "t1")

        await FailureReconciler(store).reconcile(["t1"], [_failed(DeliveryErrorCode.REGISTRATION_TOKEN_NOT_REGISTERED)])

        assert store.tokens == []

    @pytest.mark.asyncio
    async def test_token_is_deleted_under_every_owner(self):
        """The same token stored for two users is removed from both."""
        store = InMemoryEndpointStore()
        store.add("alice", "shared")
        store.add("bob", "shared")
        store.add("bob", "other")

        deleted = await FailureReconciler(store).reconcile(
            ["shared"], [_failed(DeliveryErrorCode.REGISTRATION_TOKEN_NOT_REGISTERED)]
        )

        assert {endpoint.user_id for endpoint in deleted} == {"alice", "bob"}
        assert store.tokens == ["other"]

    @pytest.mark.asyncio
    async def test_duplicate_invalid_tokens_are_looked_up_once(self):
        store = InMemoryEndpointStore()
        store.add("alice", "t1")

        deleted = await FailureReconciler(store).reconcile(
            ["t1", "t1"],
            [_failed(DeliveryErrorCode.INVALID_REGISTRATION_TOKEN)] * 2,
        )

        assert len(deleted) == 1

    @pytest.mark.asyncio
    async def test_unknown_and_missing_codes_are_tolerated(self):
        store = InMemoryEndpointStore()
        store.add("alice", "t1")
        store.add("alice", "t2")

        deleted = await FailureReconciler(store).reconcile(
            ["t1", "t2"],
            [_failed("messaging/quota-exceeded"), DeliveryOutcome(success=False)],
        )

        assert deleted == []
        assert store.deleted == []

    @pytest.mark.asyncio
    async def test_unprefixed_codes_are_not_permanent(self):
        store = InMemoryEndpointStore()
        store.add("alice", "t1")

        deleted = await FailureReconciler(store).reconcile(["t1"], [_failed("registration-token-not-registered")])

        assert deleted == []

    @pytest.mark.asyncio
    async def test_one_failed_deletion_does_not_stop_others(self):
        store = InMemoryEndpointStore()
        broken = store.add("alice", "t1")
        store.add("bob", "t1")
        store.add("carol", "t2")
        store.failing_delete_ids.add(broken.id)

        deleted = await FailureReconciler(store).reconcile(
            ["t1", "t2"],
            [_failed(DeliveryErrorCode.INVALID_REGISTRATION_TOKEN)] * 2,
        )

        assert {(endpoint.user_id, endpoint.token) for endpoint in deleted} == {("bob", "t1"), ("carol", "t2")}
        assert store.tokens == ["t1"]

    @pytest.mark.asyncio
    async def test_failed_lookup_does_not_stop_others(self):
        store = InMemoryEndpointStore()
        store.add("alice", "t1")
        store.add("bob", "t2")
        store.failing_lookup_tokens.add("t1")

        deleted = await FailureReconciler(store).reconcile(
            ["t1", "t2"],
            [_failed(DeliveryErrorCode.INVALID_REGISTRATION_TOKEN)] * 2,
        )

        assert [endpoint.token for endpoint in deleted] == ["t2"]

    @pytest.mark.asyncio
    async def test_misaligned_outcomes_raise(self):
        with pytest.raises(ValueError, match="1 outcomes for 2 tokens"):
            await FailureReconciler(InMemoryEndpointStore()).reconcile(["t1", "t2"], [DeliveryOutcome(success=True)])
