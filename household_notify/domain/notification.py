"""Notification, multicast message and handler outcome models."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class NotificationKind(StrEnum):
    """Kinds of push notification the service emits."""

    TASK_CREATED_PUBLIC = "task_created_public"
    TASK_CLAIMED = "task_claimed"
    TASK_COMPLETED = "task_completed"


class Notification(BaseModel):
    """Composed notification ready for dispatch."""

    title: str
    body: str
    data: dict[str, str] = Field(default_factory=dict, description="Flat string-valued data attributes")


class MulticastMessage(BaseModel):
    """One notification addressed to a batch of tokens."""

    tokens: list[str]
    notification: Notification
    android: dict[str, Any] = Field(default_factory=dict, description="Android delivery hints")
    apns: dict[str, Any] = Field(default_factory=dict, description="APNs delivery hints")


class HandlerOutcome(BaseModel):
    """What a task event handler did. Only used for logging and tests."""

    kind: NotificationKind
    skipped_reason: str | None = None
    token_count: int = 0
    success_count: int = 0
    deleted_tokens: list[str] = Field(default_factory=list)

    @property
    def dispatched(self) -> bool:
        return self.skipped_reason is None
