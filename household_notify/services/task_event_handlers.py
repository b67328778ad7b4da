"""Task event handlers: fan task writes out to household members as push notifications."""

import asyncio
import logging

from household_notify.core.logging import log_with_event_context, span
from household_notify.domain.event import TaskEvent
from household_notify.domain.notification import HandlerOutcome, Notification, NotificationKind
from household_notify.domain.task import TaskStatus
from household_notify.interface.protocols import EndpointStore, GroupDirectory, ProfileStore
from household_notify.services import notification_composer
from household_notify.services.failure_reconciler import FailureReconciler
from household_notify.services.multicast_dispatcher import MulticastDispatcher
from household_notify.services.recipient_resolver import resolve_recipients


logger = logging.getLogger(__name__)


class TaskEventHandlers:
    """Orchestrates recipient resolution, dispatch and reconciliation per trigger.

    Each call works only from the snapshots carried by the event; nothing is
    re-read from the task store. Skips are logged and returned as outcomes with
    a skipped_reason. Collaborator failures propagate to the caller.
    """

    def __init__(
        self,
        *,
        group_directory: GroupDirectory,
        profile_store: ProfileStore,
        endpoint_store: EndpointStore,
        dispatcher: MulticastDispatcher,
        reconciler: FailureReconciler,
    ) -> None:
        self._group_directory = group_directory
        self._profile_store = profile_store
        self._endpoint_store = endpoint_store
        self._dispatcher = dispatcher
        self._reconciler = reconciler

    async def on_task_created(self, event: TaskEvent) -> HandlerOutcome:
        """Notify every household member except the creator about a new public task."""
        kind = NotificationKind.TASK_CREATED_PUBLIC
        with span("task_event_handlers.on_task_created"):
            task = event.after_task()
            if task is None:
                return self._skip(kind, event, "No data in event")

            if not task.is_public:
                return self._skip(kind, event, f"Skipping: task not public: {event.task_id or '(no id)'}")

            if not task.household_id:
                return self._skip(kind, event, "Skipping: missing householdId")

            household = await self._group_directory.get_household(task.household_id)
            if household is None:
                return self._skip(kind, event, f"No household for ID: {task.household_id}")

            recipients = resolve_recipients(household, exclude_user_ids=[task.created_by])
            if not recipients:
                return self._skip(kind, event, "No recipients after excluding creator.")

            tokens = await self._collect_tokens(recipients)
            if not tokens:
                return self._skip(kind, event, "No tokens found for recipients.")

            notification = notification_composer.compose(
                kind,
                {
                    "task_id": event.task_id,
                    "title": task.title,
                    "household_id": task.household_id,
                    "created_by": task.created_by,
                },
            )
            return await self._deliver(kind, event, tokens, notification)

    async def on_task_claimed(self, event: TaskEvent) -> HandlerOutcome:
        """Tell the creator that someone else claimed their task."""
        kind = NotificationKind.TASK_CLAIMED
        with span("task_event_handlers.on_task_claimed"):
            before, after = event.before_task(), event.after_task()
            if before is None or after is None:
                return self._skip(kind, event, "No data in event")

            if before.claimed_by or not after.claimed_by:
                return self._skip(kind, event, "Not a claim transition", level="debug")

            created_by, claimed_by = after.created_by, after.claimed_by
            if not created_by or not claimed_by:
                return self._skip(kind, event, "Skipping: missing createdBy or claimedBy")

            if created_by == claimed_by:
                return self._skip(kind, event, "Skipping: creator claimed their own task")

            claimer_name = await notification_composer.lookup_display_name(self._profile_store, claimed_by)

            tokens = await self._collect_tokens([created_by])
            if not tokens:
                return self._skip(kind, event, "No tokens found for creator")

            notification = notification_composer.compose(
                kind,
                {
                    "task_id": event.task_id,
                    "title": after.title,
                    "claimed_by": claimed_by,
                    "claimer_name": claimer_name,
                },
            )
            return await self._deliver(kind, event, tokens, notification)

    async def on_task_completed(self, event: TaskEvent) -> HandlerOutcome:
        """Tell the creator that their task was completed."""
        kind = NotificationKind.TASK_COMPLETED
        with span("task_event_handlers.on_task_completed"):
            before, after = event.before_task(), event.after_task()
            if before is None or after is None:
                return self._skip(kind, event, "No data in event")

            if before.status == TaskStatus.COMPLETED or not after.is_completed:
                return self._skip(kind, event, "Not a completion transition", level="debug")

            if not after.created_by:
                return self._skip(kind, event, "Skipping: no creator to notify")

            tokens = await self._collect_tokens([after.created_by])
            if not tokens:
                return self._skip(kind, event, "No tokens found for creator")

            notification = notification_composer.compose(kind, {"task_id": event.task_id, "title": after.title})
            return await self._deliver(kind, event, tokens, notification)

    async def on_task_updated(self, event: TaskEvent) -> list[HandlerOutcome]:
        """Run both update triggers; each decides independently whether to act.

        Both triggers always run to completion. If either raised, the first
        failure is re-raised once the other has settled.
        """
        results = await asyncio.gather(
            self.on_task_claimed(event),
            self.on_task_completed(event),
            return_exceptions=True,
        )

        failures = [result for result in results if isinstance(result, BaseException)]
        for failure in failures:
            log_with_event_context(
                logger,
                "error",
                "Update trigger failed",
                event_id=event.event_id,
                task_id=event.task_id,
                error=str(failure),
            )
        if failures:
            raise failures[0]
        return list(results)

    async def _collect_tokens(self, user_ids: list[str]) -> list[str]:
        """Fetch endpoints for all users concurrently and pool their tokens.

        Any single lookup failure fails the whole call.
        """
        endpoint_lists = await asyncio.gather(*(self._endpoint_store.list_endpoints(uid) for uid in user_ids))
        return [endpoint.token for endpoints in endpoint_lists for endpoint in endpoints if endpoint.token]

    async def _deliver(
        self,
        kind: NotificationKind,
        event: TaskEvent,
        tokens: list[str],
        notification: Notification,
    ) -> HandlerOutcome:
        outcomes = await self._dispatcher.send(tokens, notification)
        deleted = await self._reconciler.reconcile(tokens, outcomes)

        success_count = sum(1 for outcome in outcomes if outcome.success)
        log_with_event_context(
            logger,
            "info",
            "Notification delivered",
            event_id=event.event_id,
            task_id=event.task_id,
            notification_type=kind.value,
            success_count=success_count,
            token_count=len(tokens),
            deleted_count=len(deleted),
        )
        return HandlerOutcome(
            kind=kind,
            token_count=len(tokens),
            success_count=success_count,
            deleted_tokens=sorted({endpoint.token for endpoint in deleted}),
        )

    def _skip(self, kind: NotificationKind, event: TaskEvent, reason: str, *, level: str = "info") -> HandlerOutcome:
        log_with_event_context(
            logger,
            level,
            reason,
            event_id=event.event_id,
            task_id=event.task_id,
            notification_type=kind.value,
        )
        return HandlerOutcome(kind=kind, skipped_reason=reason)
