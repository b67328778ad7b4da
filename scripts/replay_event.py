#!/usr/bin/env python3
"""Operator script to replay a task event through the notification handlers.

The event file holds the same JSON the feed posts to /events/tasks/{task_id}:
    {"event_id": "...", "kind": "created" | "updated", "before": {...}, "after": {...}}

Usage:
    uv run python scripts/replay_event.py <task_id> <event.json>
    uv run python scripts/replay_event.py <task_id> <event.json> --db ./data/household_notify.db
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from household_notify.core import db_client
from household_notify.domain.event import EventKind, TaskEvent
from household_notify.services.wiring import build_task_event_handlers


logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def load_event(task_id: str, path: Path) -> TaskEvent:
    """Read an event file into a TaskEvent."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    return TaskEvent(
        event_id=str(raw.get("event_id") or f"replay-{task_id}"),
        kind=EventKind(raw["kind"]),
        task_id=task_id,
        before=raw.get("before"),
        after=raw.get("after"),
    )


async def replay(task_id: str, path: Path, db_path: str | None) -> None:
    """Run the event through the production handlers and log each outcome."""
    await db_client.init_db(db_path=db_path)
    handlers = build_task_event_handlers(db_path=db_path)
    event = load_event(task_id, path)

    if event.kind == EventKind.CREATED:
        outcomes = [await handlers.on_task_created(event)]
    else:
        outcomes = await handlers.on_task_updated(event)

    for outcome in outcomes:
        if outcome.dispatched:
            logger.info(
                f"{outcome.kind}: sent {outcome.success_count}/{outcome.token_count}, "
                f"pruned {len(outcome.deleted_tokens)} token(s)"
            )
        else:
            logger.info(f"{outcome.kind}: skipped ({outcome.skipped_reason})")

    await db_client.close_connection(db_path=db_path)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("task_id", help="ID of the task the event belongs to")
    parser.add_argument("event_file", type=Path, help="JSON file holding the event")
    parser.add_argument("--db", dest="db_path", default=None, help="SQLite database path (defaults to settings)")
    args = parser.parse_args()

    if not args.event_file.exists():
        logger.error(f"Event file not found: {args.event_file}")
        sys.exit(1)

    asyncio.run(replay(args.task_id, args.event_file, args.db_path))


if __name__ == "__main__":
    main()
