"""SQLite-backed implementations of the directory, profile and endpoint stores."""

import json
import logging
from datetime import UTC, datetime
from typing import Any

from household_notify.core import db_client
from household_notify.domain.endpoint import Endpoint
from household_notify.domain.household import Household
from household_notify.domain.user import UserProfile


logger = logging.getLogger(__name__)

ENDPOINTS_COLLECTION = "push_endpoints"


def _decode_members(raw: Any) -> Any:
    """Households store membership as JSON text; decode it back to its original shape."""
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Household members column is not valid JSON")
            return None
    return raw


class SqliteGroupDirectory:
    """Household lookups from the households table."""

    def __init__(self, *, db_path: str | None = None) -> None:
        self._db_path = db_path

    async def get_household(self, household_id: str) -> Household | None:
        try:
            record = await db_client.get_record(collection="households", record_id=household_id, db_path=self._db_path)
        except KeyError:
            return None
        return Household.from_record({**record, "members": _decode_members(record.get("members"))})


class SqliteProfileStore:
    """User profile lookups from the users table."""

    def __init__(self, *, db_path: str | None = None) -> None:
        self._db_path = db_path

    async def get_profile(self, user_id: str) -> UserProfile | None:
        try:
            record = await db_client.get_record(collection="users", record_id=user_id, db_path=self._db_path)
        except KeyError:
            return None
        return UserProfile.model_validate(record)


class SqliteEndpointStore:
    """Push endpoints kept in the push_endpoints table."""

    def __init__(self, *, db_path: str | None = None) -> None:
        self._db_path = db_path

    async def list_endpoints(self, user_id: str) -> list[Endpoint]:
        records = await db_client.list_records(
            collection=ENDPOINTS_COLLECTION,
            where={"user_id": user_id},
            per_page=None,
            db_path=self._db_path,
        )
        return [Endpoint.model_validate(record) for record in records if record.get("token")]

    async def find_endpoints_by_token(self, token: str) -> list[Endpoint]:
        records = await db_client.list_records(
            collection=ENDPOINTS_COLLECTION,
            where={"token": token},
            per_page=None,
            db_path=self._db_path,
        )
        return [Endpoint.model_validate(record) for record in records]

    async def delete_endpoint(self, endpoint: Endpoint) -> None:
        try:
            await db_client.delete_record(collection=ENDPOINTS_COLLECTION, record_id=endpoint.id, db_path=self._db_path)
        except KeyError:
            # Already gone; a concurrent reconciliation got there first
            logger.debug("Endpoint already deleted", extra={"endpoint_id": endpoint.id})

    async def register_endpoint(self, *, user_id: str, token: str, platform: str | None = None) -> Endpoint:
        existing = await db_client.get_first_record(
            collection=ENDPOINTS_COLLECTION,
            where={"user_id": user_id, "token": token},
            db_path=self._db_path,
        )
        if existing:
            return Endpoint.model_validate(existing)

        record = await db_client.create_record(
            collection=ENDPOINTS_COLLECTION,
            data={
                "user_id": user_id,
                "token": token,
                "platform": platform,
                "created": datetime.now(UTC).isoformat(),
            },
            db_path=self._db_path,
        )
        logger.info("Registered push endpoint", extra={"user_id": user_id, "endpoint_id": record["id"]})
        return Endpoint.model_validate(record)

    async def deregister_endpoint(self, *, user_id: str, token: str) -> bool:
        """Remove a user's token. Returns False if the user never registered it."""
        existing = await db_client.get_first_record(
            collection=ENDPOINTS_COLLECTION,
            where={"user_id": user_id, "token": token},
            db_path=self._db_path,
        )
        if not existing:
            return False
        await self.delete_endpoint(Endpoint.model_validate(existing))
        logger.info("Deregistered push endpoint", extra={"user_id": user_id, "endpoint_id": existing["id"]})
        return True
