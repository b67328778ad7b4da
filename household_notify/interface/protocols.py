"""Collaborator interfaces the notification engine is built against.

Concrete implementations live in sqlite_stores.py and fcm_sender.py; tests
substitute in-memory fakes.
"""

from typing import Protocol

from household_notify.domain.endpoint import DeliveryOutcome, Endpoint
from household_notify.domain.household import Household
from household_notify.domain.notification import MulticastMessage
from household_notify.domain.user import UserProfile


class GroupDirectory(Protocol):
    """Looks up households by ID."""

    async def get_household(self, household_id: str) -> Household | None:
        """Return the household, or None if it does not exist."""
        ...


class ProfileStore(Protocol):
    """Looks up user profiles by ID."""

    async def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the profile, or None if it does not exist."""
        ...


class EndpointStore(Protocol):
    """Stores push endpoints (registration tokens) per user."""

    async def list_endpoints(self, user_id: str) -> list[Endpoint]:
        """Return the user's endpoints in registration order."""
        ...

    async def find_endpoints_by_token(self, token: str) -> list[Endpoint]:
        """Return every endpoint holding this token, across all users."""
        ...

    async def delete_endpoint(self, endpoint: Endpoint) -> None:
        """Delete one endpoint record."""
        ...

    async def register_endpoint(self, *, user_id: str, token: str, platform: str | None = None) -> Endpoint:
        """Store a token for a user, returning the existing record if already registered."""
        ...

    async def deregister_endpoint(self, *, user_id: str, token: str) -> bool:
        """Remove a user's token. Returns False if the user never registered it."""
        ...


class PushTransport(Protocol):
    """Delivers one message to many tokens."""

    async def send_multicast(self, message: MulticastMessage) -> list[DeliveryOutcome]:
        """Send to every token; result[i] describes message.tokens[i]."""
        ...
