"""Resolve which household members should receive a notification."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from household_notify.domain.household import Household, normalize_member_ids


logger = logging.getLogger(__name__)


def resolve_recipients(
    household: Household | Mapping[str, Any] | None,
    exclude_user_ids: Iterable[str | None] = (),
) -> list[str]:
    """Return the household's members minus the excluded users.

    Args:
        household: Household model, raw household record, or None if not found
        exclude_user_ids: Users who must not be notified (usually the actor)

    Returns:
        Deduplicated user IDs in membership order. Empty when the household is
        missing, has no members, or every member is excluded.
    """
    if household is None:
        return []

    member_ids = household.member_ids if isinstance(household, Household) else normalize_member_ids(household)
    excluded = {user_id for user_id in exclude_user_ids if user_id}

    recipients = [user_id for user_id in member_ids if user_id not in excluded]
    logger.debug(
        "Resolved recipients",
        extra={"member_count": len(member_ids), "excluded_count": len(excluded), "recipient_count": len(recipients)},
    )
    return recipients
