"""Assemble production collaborators into task event handlers."""

from household_notify.core.config import settings
from household_notify.interface.fcm_sender import FcmTransport
from household_notify.interface.protocols import PushTransport
from household_notify.interface.sqlite_stores import SqliteEndpointStore, SqliteGroupDirectory, SqliteProfileStore
from household_notify.services.failure_reconciler import FailureReconciler
from household_notify.services.multicast_dispatcher import MulticastDispatcher
from household_notify.services.task_event_handlers import TaskEventHandlers


def build_task_event_handlers(
    *,
    db_path: str | None = None,
    transport: PushTransport | None = None,
) -> TaskEventHandlers:
    """Build handlers backed by SQLite stores and the FCM transport.

    Raises:
        ValueError: If no transport is given and FCM credentials are not configured
    """
    endpoint_store = SqliteEndpointStore(db_path=db_path)
    return TaskEventHandlers(
        group_directory=SqliteGroupDirectory(db_path=db_path),
        profile_store=SqliteProfileStore(db_path=db_path),
        endpoint_store=endpoint_store,
        dispatcher=MulticastDispatcher(
            transport or FcmTransport.from_settings(),
            batch_size=settings.multicast_batch_size,
        ),
        reconciler=FailureReconciler(endpoint_store),
    )
