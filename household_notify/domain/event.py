"""Document event feed models."""

import logging
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from household_notify.domain.task import TaskSnapshot


logger = logging.getLogger(__name__)


class EventKind(StrEnum):
    """Kind of write reported by the document event feed."""

    CREATED = "created"
    UPDATED = "updated"


class TaskEvent(BaseModel):
    """A create/update event for a single task document."""

    event_id: str = Field(..., description="Unique event ID assigned by the feed")
    kind: EventKind = Field(..., description="created or updated")
    task_id: str = Field(default="", description="ID of the task document")
    before: dict[str, Any] | None = Field(default=None, description="Raw snapshot before the write")
    after: dict[str, Any] | None = Field(default=None, description="Raw snapshot after the write")

    def before_task(self) -> TaskSnapshot | None:
        """Parse the before-snapshot, or None if absent or malformed."""
        return _parse_snapshot(self.before, event_id=self.event_id, side="before")

    def after_task(self) -> TaskSnapshot | None:
        """Parse the after-snapshot, or None if absent or malformed."""
        return _parse_snapshot(self.after, event_id=self.event_id, side="after")


def _parse_snapshot(raw: dict[str, Any] | None, *, event_id: str, side: str) -> TaskSnapshot | None:
    if raw is None:
        return None
    try:
        return TaskSnapshot.model_validate(raw)
    except ValidationError as e:
        logger.warning(
            "Malformed task snapshot",
            extra={"event_id": event_id, "side": side, "error_count": e.error_count()},
        )
        return None
