"""Document event feed webhook endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from household_notify.core.config import settings
from household_notify.domain.event import EventKind, TaskEvent
from household_notify.interface import webhook_security
from household_notify.services.task_event_handlers import TaskEventHandlers


router = APIRouter(prefix="/events", tags=["events"])
logger = logging.getLogger(__name__)


def get_task_event_handlers(request: Request) -> TaskEventHandlers:
    """Handlers are built once at startup and kept on app.state."""
    return request.app.state.task_event_handlers


@router.post("/tasks/{task_id}")
async def receive_task_event(
    task_id: str,
    payload: dict[str, Any],
    handlers: Annotated[TaskEventHandlers, Depends(get_task_event_handlers)],
    x_event_secret: Annotated[str | None, Header()] = None,
) -> dict[str, str]:
    """Receive a create/update event for one task document.

    Every handled event answers {"status": "processed"}, whether or not a
    notification was sent. Collaborator failures propagate as 500 so the feed
    retries the delivery.

    Raises:
        HTTPException: If the secret check fails or the payload is not an event
    """
    security_result = webhook_security.validate_webhook_secret(x_event_secret, settings.event_webhook_secret)
    if not security_result.is_valid:
        raise HTTPException(
            status_code=security_result.http_status_code or 401,
            detail=security_result.error_message,
        )

    kind = payload.get("kind")
    if not isinstance(kind, str) or kind not in {k.value for k in EventKind}:
        logger.warning("Ignoring malformed task event", extra={"task_id": task_id, "kind": str(kind)})
        raise HTTPException(status_code=400, detail="Expected kind of created|updated")

    event_id = payload.get("event_id")
    if not event_id:
        event_id = f"{task_id}-{kind}"
        logger.info("Task event has no event_id, using derived id", extra={"event_id": event_id})

    event = TaskEvent(
        event_id=str(event_id),
        kind=EventKind(kind),
        task_id=task_id,
        before=payload.get("before") if isinstance(payload.get("before"), dict) else None,
        after=payload.get("after") if isinstance(payload.get("after"), dict) else None,
    )

    logger.info("Task event received", extra={"event_id": event.event_id, "task_id": task_id, "kind": event.kind})
    if event.kind == EventKind.CREATED:
        await handlers.on_task_created(event)
    else:
        await handlers.on_task_updated(event)

    return {"status": "processed"}
