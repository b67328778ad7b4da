"""Pytest configuration and fixtures for unit tests."""

import pytest

from household_notify.services.failure_reconciler import FailureReconciler
from household_notify.services.multicast_dispatcher import MulticastDispatcher
from household_notify.services.task_event_handlers import TaskEventHandlers
from tests.unit.mocks import FakePushTransport, InMemoryEndpointStore, InMemoryGroupDirectory, InMemoryProfileStore


@pytest.fixture
def group_directory():
    """Household h1 with members alice, bob and carol."""
    return InMemoryGroupDirectory({"h1": {"name": "Flat 4", "memberIds": ["alice", "bob", "carol"]}})


@pytest.fixture
def profile_store():
    return InMemoryProfileStore(
        {
            "alice": {"name": "Alice"},
            "bob": {"displayName": "Bobby"},
            "carol": {"username": "carol99"},
        }
    )


@pytest.fixture
def endpoint_store():
    return InMemoryEndpointStore()


@pytest.fixture
def push_transport():
    return FakePushTransport()


@pytest.fixture
def handlers(group_directory, profile_store, endpoint_store, push_transport):
    """TaskEventHandlers wired to in-memory collaborators."""
    return TaskEventHandlers(
        group_directory=group_directory,
        profile_store=profile_store,
        endpoint_store=endpoint_store,
        dispatcher=MulticastDispatcher(push_transport),
        reconciler=FailureReconciler(endpoint_store),
    )
