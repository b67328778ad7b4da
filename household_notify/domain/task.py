"""Task domain models and enums."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TaskStatus(StrEnum):
    """Task visibility / lifecycle status as written by the mobile client."""

    PUBLIC = "public"
    PRIVATE = "private"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskSnapshot(BaseModel):
    """One side (before or after) of a task write.

    Every field is optional: the document store does not enforce a schema, so the
    handlers decide what is required for each notification.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    household_id: str | None = Field(default=None, description="Household the task belongs to")
    created_by: str | None = Field(default=None, description="User ID of the task creator")
    claimed_by: str | None = Field(default=None, description="User ID of the member who claimed the task")
    title: str | None = Field(default=None, description="Task title")
    status: str | None = Field(default=None, description="public, private, completed, ...")

    @field_validator("household_id", "created_by", "claimed_by", "title", "status", mode="before")
    @classmethod
    def coerce_scalar_to_str(cls, v: object) -> object:
        """Accept numeric ids from loosely typed clients.

        Empty values collapse to None, and so do non-scalar values (lists,
        maps, booleans) so one odd field never discards the whole snapshot.
        """
        if v is None or v == "":
            return None
        if isinstance(v, str):
            return v
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(v)
        return None

    @property
    def is_public(self) -> bool:
        return self.status == TaskStatus.PUBLIC

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED
