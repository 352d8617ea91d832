# tests/test_task_service.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from todo_app.errors import ValidationError
from todo_app.models.task import Recurrence
from todo_app.services.task_service import TaskService

from .helpers import ALICE


def test_create_task_sets_defaults(alice_store: TaskService) -> None:
    task = alice_store.create_task("Buy milk")

    assert task.id
    assert task.owner == ALICE
    assert task.title == "Buy milk"
    assert task.done is False
    assert task.due_date is None
    assert task.recurrence == Recurrence.NONE
    assert task.created_at is not None
    assert task.updated_at is not None


def test_create_task_keeps_due_date_and_recurrence(alice_store: TaskService) -> None:
    due = datetime(2024, 1, 31, tzinfo=UTC)
    task = alice_store.create_task("Pay rent", due_date=due, recurrence=Recurrence.MONTHLY)

    assert task.due_date == due
    assert task.recurrence == Recurrence.MONTHLY


@pytest.mark.parametrize("title", ["", "   ", "\t\n", None])
def test_create_task_rejects_blank_title(alice_store: TaskService, title) -> None:
    with pytest.raises(ValidationError):
        alice_store.create_task(title)

    assert alice_store.count() == 0


def test_store_requires_owner(session) -> None:
    with pytest.raises(ValidationError):
        TaskService(session, "")


def test_owners_only_see_their_own_tasks(alice_store: TaskService, bob_store: TaskService) -> None:
    alice_store.create_task("Alice 1")
    alice_store.create_task("Alice 2")
    bob_store.create_task("Bob 1")

    assert {t.title for t in alice_store.list_tasks()} == {"Alice 1", "Alice 2"}
    assert [t.title for t in bob_store.list_tasks()] == ["Bob 1"]
    assert alice_store.count() == 2
    assert bob_store.count() == 1


def test_other_owner_cannot_read_update_or_delete(alice_store: TaskService, bob_store: TaskService) -> None:
    task_id = alice_store.create_task("Private").id

    assert bob_store.get_task(task_id) is None
    assert bob_store.set_done(task_id, True) == (None, False)
    assert bob_store.update_fields(task_id, {"title": "Hijacked"}) is None
    assert bob_store.delete_task(task_id) is False

    task = alice_store.get_task(task_id)
    assert task is not None
    assert task.title == "Private"
    assert task.done is False


def test_set_done_reports_transition_only_once(alice_store: TaskService) -> None:
    task_id = alice_store.create_task("Stretch").id

    task, transitioned = alice_store.set_done(task_id, True)
    assert task.done is True
    assert transitioned is True

    task, transitioned = alice_store.set_done(task_id, True)
    assert task.done is True
    assert transitioned is False

    task, transitioned = alice_store.set_done(task_id, False)
    assert task.done is False
    assert transitioned is True


def test_set_done_on_missing_task_is_a_noop(alice_store: TaskService) -> None:
    assert alice_store.set_done("does-not-exist", True) == (None, False)


def test_timestamps_are_stored_as_aware_utc(alice_store: TaskService) -> None:
    task = alice_store.create_task("Water plants")
    created_at = task.created_at

    task, transitioned = alice_store.set_done(task.id, True)

    assert transitioned is True
    assert created_at.tzinfo is not None
    assert created_at.utcoffset() == timedelta(0)
    assert task.updated_at.utcoffset() == timedelta(0)
    assert task.updated_at >= created_at


def test_due_date_is_normalised_to_utc(alice_store: TaskService) -> None:
    offset = timezone(timedelta(hours=2))
    task = alice_store.create_task("Standup", due_date=datetime(2024, 6, 1, 15, 0, tzinfo=offset))
    naive = alice_store.create_task("Lunch", due_date=datetime(2024, 6, 1, 12, 0))

    assert task.due_date == datetime(2024, 6, 1, 13, 0, tzinfo=UTC)
    assert task.due_date.utcoffset() == timedelta(0)
    assert naive.due_date == datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def test_update_fields_clears_due_date_with_explicit_none(alice_store: TaskService) -> None:
    task_id = alice_store.create_task("Dentist", due_date=datetime(2024, 3, 1, tzinfo=UTC)).id

    task = alice_store.update_fields(task_id, {"due_date": None})

    assert task.due_date is None
    assert task.title == "Dentist"


def test_update_fields_leaves_omitted_fields_untouched(alice_store: TaskService) -> None:
    due = datetime(2024, 3, 1, tzinfo=UTC)
    task_id = alice_store.create_task("Dentist", due_date=due, recurrence=Recurrence.WEEKLY).id

    task = alice_store.update_fields(task_id, {"title": "Dentist appointment"})

    assert task.title == "Dentist appointment"
    assert task.due_date == due
    assert task.recurrence == Recurrence.WEEKLY


def test_update_fields_changes_recurrence(alice_store: TaskService) -> None:
    task_id = alice_store.create_task("Water plants").id

    task = alice_store.update_fields(task_id, {"recurrence": Recurrence.DAILY})

    assert task.recurrence == Recurrence.DAILY


def test_update_fields_rejects_empty_title(alice_store: TaskService) -> None:
    task_id = alice_store.create_task("Keep me").id

    with pytest.raises(ValidationError):
        alice_store.update_fields(task_id, {"title": "  "})

    assert alice_store.get_task(task_id).title == "Keep me"


def test_update_fields_rejects_owner_change(alice_store: TaskService) -> None:
    task_id = alice_store.create_task("Mine").id

    with pytest.raises(ValidationError):
        alice_store.update_fields(task_id, {"owner": "mallory@example.com"})

    assert alice_store.get_task(task_id).owner == ALICE


def test_delete_task(alice_store: TaskService) -> None:
    task_id = alice_store.create_task("Temporary").id

    assert alice_store.delete_task(task_id) is True
    assert alice_store.get_task(task_id) is None
    assert alice_store.delete_task(task_id) is False


def test_delete_all_only_touches_owner(alice_store: TaskService, bob_store: TaskService) -> None:
    alice_store.create_task("A1")
    alice_store.create_task("A2")
    bob_store.create_task("B1")

    assert alice_store.delete_all() == 2
    assert alice_store.list_tasks() == []
    assert [t.title for t in bob_store.list_tasks()] == ["B1"]
