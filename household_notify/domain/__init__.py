"""Domain models and DTOs."""

from household_notify.domain.endpoint import DeliveryOutcome, Endpoint, EndpointPlatform
from household_notify.domain.event import EventKind, TaskEvent
from household_notify.domain.household import Household, normalize_member_ids
from household_notify.domain.notification import HandlerOutcome, MulticastMessage, Notification, NotificationKind
from household_notify.domain.task import TaskSnapshot, TaskStatus
from household_notify.domain.user import UserProfile


__all__ = [
    "DeliveryOutcome",
    "Endpoint",
    "EndpointPlatform",
    "EventKind",
    "HandlerOutcome",
    "Household",
    "MulticastMessage",
    "Notification",
    "NotificationKind",
    "TaskEvent",
    "TaskSnapshot",
    "TaskStatus",
    "UserProfile",
    "normalize_member_ids",
]
