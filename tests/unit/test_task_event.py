"""Unit tests for task event and snapshot parsing."""

import pytest

from household_notify.domain.event import EventKind, TaskEvent
from household_notify.domain.task import TaskSnapshot
from household_notify.interface.webhook_security import validate_webhook_secret


@pytest.mark.unit
class TestTaskSnapshot:
    """Tests for TaskSnapshot."""

    def test_reads_camel_case_fields(self):
        task = TaskSnapshot.model_validate(
            {"householdId": "h1", "createdBy": "alice", "claimedBy": "bob", "title": "Dishes", "status": "public"}
        )

        assert task.household_id == "h1"
        assert task.created_by == "alice"
        assert task.claimed_by == "bob"
        assert task.is_public

    def test_empty_strings_become_none(self):
        task = TaskSnapshot.model_validate({"claimedBy": "", "title": ""})

        assert task.claimed_by is None
        assert task.title is None

    def test_numeric_ids_become_strings(self):
        assert TaskSnapshot.model_validate({"createdBy": 7}).created_by == "7"

    def test_unknown_fields_are_ignored(self):
        task = TaskSnapshot.model_validate({"status": "completed", "dueDate": "2026-01-01"})

        assert task.is_completed


@pytest.mark.unit
class TestTaskEvent:
    """Tests for TaskEvent snapshot access."""

    def test_absent_snapshots(self):
        event = TaskEvent(event_id="e1", kind=EventKind.UPDATED, task_id="t1")

        assert event.before_task() is None
        assert event.after_task() is None

    def test_odd_field_values_are_dropped_not_the_snapshot(self):
        event = TaskEvent(
            event_id="e1",
            kind=EventKind.CREATED,
            after={"title": ["not", "a", "string"], "claimedBy": True, "householdId": "h1", "status": "public"},
        )

        task = event.after_task()

        assert task is not None
        assert task.title is None
        assert task.claimed_by is None
        assert task.household_id == "h1"
        assert task.is_public


@pytest.mark.unit
class TestValidateWebhookSecret:
    """Tests for validate_webhook_secret."""

    def test_no_secret_configured_accepts(self):
        assert validate_webhook_secret(None, None).is_valid

    def test_missing_secret(self):
        result = validate_webhook_secret(None, "s3cret")

        assert not result.is_valid
        assert result.http_status_code == 401

    def test_wrong_secret(self):
        assert validate_webhook_secret("nope", "s3cret").http_status_code == 403

    def test_matching_secret(self):
        assert validate_webhook_secret("s3cret", "s3cret").is_valid
