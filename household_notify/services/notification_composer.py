"""Notification templates for task events."""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from household_notify.core.config import Constants
from household_notify.domain.notification import Notification, NotificationKind
from household_notify.domain.user import UserProfile
from household_notify.interface.protocols import ProfileStore


logger = logging.getLogger(__name__)


def _as_str(value: Any) -> str:
    """Data values must be strings; absent ids become empty strings."""
    if value is None:
        return ""
    return str(value)


def _task_created_public(payload: Mapping[str, Any]) -> Notification:
    title = payload.get("title") or Constants.DEFAULT_NEW_TASK_TITLE
    return Notification(
        title="New Public Task",
        body=f'"{title}" was added to your household.',
        data={
            "type": "public_task_created",
            "taskId": _as_str(payload.get("task_id")),
            "householdId": _as_str(payload.get("household_id")),
            "createdBy": _as_str(payload.get("created_by")),
        },
    )


def _task_claimed(payload: Mapping[str, Any]) -> Notification:
    title = payload.get("title") or Constants.DEFAULT_TASK_TITLE
    claimer_name = payload.get("claimer_name") or Constants.DEFAULT_DISPLAY_NAME
    return Notification(
        title="Task Claimed",
        body=f'{claimer_name} claimed "{title}"',
        data={
            "type": "task_claimed",
            "taskId": _as_str(payload.get("task_id")),
            "claimedBy": _as_str(payload.get("claimed_by")),
        },
    )


def _task_completed(payload: Mapping[str, Any]) -> Notification:
    title = payload.get("title") or Constants.DEFAULT_TASK_TITLE
    return Notification(
        title="Task Completed!",
        body=f'"{title}" has been completed.',
        data={
            "type": "task_completed",
            "taskId": _as_str(payload.get("task_id")),
        },
    )


_TEMPLATES: dict[NotificationKind, Callable[[Mapping[str, Any]], Notification]] = {
    NotificationKind.TASK_CREATED_PUBLIC: _task_created_public,
    NotificationKind.TASK_CLAIMED: _task_claimed,
    NotificationKind.TASK_COMPLETED: _task_completed,
}


def compose(kind: NotificationKind | str, payload: Mapping[str, Any]) -> Notification:
    """Build the notification for an event kind.

    Args:
        kind: One of the NotificationKind values
        payload: task_id, title and the kind-specific ids (household_id,
            created_by, claimed_by, claimer_name)

    Returns:
        Notification with a flat string-valued data map

    Raises:
        ValueError: If kind has no template
    """
    try:
        template = _TEMPLATES[NotificationKind(kind)]
    except ValueError as e:
        raise ValueError(f"No notification template for kind: {kind}") from e
    return template(payload)


def resolve_display_name(profile: UserProfile | None) -> str:
    """Pick the best name to show for a user: name, then display name, then username."""
    if profile is None:
        return Constants.DEFAULT_DISPLAY_NAME
    return profile.name or profile.display_name or profile.username or Constants.DEFAULT_DISPLAY_NAME


async def lookup_display_name(profile_store: ProfileStore, user_id: str) -> str:
    """Fetch a user's profile and resolve their display name.

    Store failures propagate; a missing profile falls back to the placeholder.
    """
    profile = await profile_store.get_profile(user_id)
    if profile is None:
        logger.info("No profile found for user, using placeholder name", extra={"user_id": user_id})
    return resolve_display_name(profile)
