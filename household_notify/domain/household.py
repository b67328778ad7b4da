"""Household domain model and membership normalization."""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field


class Household(BaseModel):
    """Household with a canonical member list."""

    id: str = Field(..., description="Household ID")
    name: str = Field(default="", description="Household display name")
    member_ids: tuple[str, ...] = Field(
        default=(), description="Member user IDs, deduplicated, in first-seen order, no empty entries"
    )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Household":
        """Build a Household from a raw stored record of any supported membership shape."""
        return cls(
            id=str(record.get("id", "")),
            name=record.get("name") or "",
            member_ids=normalize_member_ids(record),
        )


def _dedupe(ids: Iterable[object]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for raw in ids:
        if not raw:
            continue
        seen.setdefault(str(raw), None)
    return tuple(seen)


def normalize_member_ids(record: Mapping[str, Any] | None) -> tuple[str, ...]:
    """Normalize household membership into a deduplicated tuple of user IDs.

    Supported shapes, checked in this order:
      - ``memberIds``: list of ids
      - ``members``: list of ids, possibly with null/empty holes
      - ``members``: mapping whose keys are user ids

    Anything else yields an empty tuple.
    """
    if not record:
        return ()

    member_ids = record.get("memberIds")
    if isinstance(member_ids, list | tuple):
        return _dedupe(member_ids)

    members = record.get("members")
    if isinstance(members, list | tuple):
        return _dedupe(members)
    if isinstance(members, Mapping):
        return _dedupe(members.keys())

    return ()
