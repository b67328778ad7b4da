"""In-memory collaborators for unit testing the notification engine."""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from household_notify.domain.endpoint import DeliveryOutcome, Endpoint
from household_notify.domain.household import Household
from household_notify.domain.notification import MulticastMessage
from household_notify.domain.user import UserProfile


class InMemoryGroupDirectory:
    """Households keyed by ID, stored as raw records like the document store holds them."""

    def __init__(self, households: dict[str, dict[str, Any]] | None = None):
        self._households = households or {}
        self.lookups: list[str] = []
        self.error: Exception | None = None

    async def get_household(self, household_id: str) -> Household | None:
        self.lookups.append(household_id)
        if self.error:
            raise self.error
        record = self._households.get(household_id)
        if record is None:
            return None
        return Household.from_record({"id": household_id, **record})


class InMemoryProfileStore:
    """User profiles keyed by ID."""

    def __init__(self, profiles: dict[str, dict[str, Any]] | None = None):
        self._profiles = profiles or {}
        self.lookups: list[str] = []
        self.error: Exception | None = None

    async def get_profile(self, user_id: str) -> UserProfile | None:
        self.lookups.append(user_id)
        if self.error:
            raise self.error
        record = self._profiles.get(user_id)
        if record is None:
            return None
        return UserProfile.model_validate({"id": user_id, **record})


class InMemoryEndpointStore:
    """Push endpoints in a flat list, searchable by owner or token."""

    def __init__(self):
        self._endpoints: list[Endpoint] = []
        self._id_counter = 1000
        self.deleted: list[Endpoint] = []
        self.failing_user_ids: set[str] = set()
        self.failing_delete_ids: set[str] = set()
        self.failing_lookup_tokens: set[str] = set()

    def add(self, user_id: str, token: str, platform: str | None = None) -> Endpoint:
        """Seed an endpoint without going through register_endpoint's dedupe."""
        endpoint = Endpoint.model_validate(
            {
                "id": str(self._id_counter),
                "user_id": user_id,
                "token": token,
                "platform": platform,
                "created": datetime.now(UTC).isoformat(),
            }
        )
        self._id_counter += 1
        self._endpoints.append(endpoint)
        return endpoint

    @property
    def tokens(self) -> list[str]:
        return [endpoint.token for endpoint in self._endpoints]

    async def list_endpoints(self, user_id: str) -> list[Endpoint]:
        if user_id in self.failing_user_ids:
            raise RuntimeError(f"Endpoint store unavailable for {user_id}")
        return [endpoint for endpoint in self._endpoints if endpoint.user_id == user_id]

    async def find_endpoints_by_token(self, token: str) -> list[Endpoint]:
        if token in self.failing_lookup_tokens:
            raise RuntimeError(f"Token lookup failed for {token}")
        return [endpoint for endpoint in self._endpoints if endpoint.token == token]

    async def delete_endpoint(self, endpoint: Endpoint) -> None:
        if endpoint.id in self.failing_delete_ids:
            raise RuntimeError(f"Delete failed for {endpoint.id}")
        self._endpoints = [existing for existing in self._endpoints if existing.id != endpoint.id]
        self.deleted.append(endpoint)

    async def register_endpoint(self, *, user_id: str, token: str, platform: str | None = None) -> Endpoint:
        for endpoint in self._endpoints:
            if endpoint.user_id == user_id and endpoint.token == token:
                return endpoint
        return self.add(user_id, token, platform)

    async def deregister_endpoint(self, *, user_id: str, token: str) -> bool:
        for endpoint in self._endpoints:
            if endpoint.user_id == user_id and endpoint.token == token:
                await self.delete_endpoint(endpoint)
                return True
        return False


class FakePushTransport:
    """Records every multicast and answers with per-token outcomes.

    Tokens without a configured outcome succeed.
    """

    def __init__(self, outcomes: dict[str, DeliveryOutcome] | None = None):
        self._outcomes = outcomes or {}
        self.messages: list[MulticastMessage] = []
        self.respond: Callable[[MulticastMessage], list[DeliveryOutcome]] | None = None

    @property
    def call_count(self) -> int:
        return len(self.messages)

    async def send_multicast(self, message: MulticastMessage) -> list[DeliveryOutcome]:
        self.messages.append(message)
        if self.respond is not None:
            return self.respond(message)
        return [self._outcomes.get(token, DeliveryOutcome(success=True)) for token in message.tokens]
