from household_notify.services import (
    failure_reconciler,
    multicast_dispatcher,
    notification_composer,
    recipient_resolver,
    task_event_handlers,
)


__all__ = [
    "failure_reconciler",
    "multicast_dispatcher",
    "notification_composer",
    "recipient_resolver",
    "task_event_handlers",
]
