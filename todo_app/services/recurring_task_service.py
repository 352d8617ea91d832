"""
Recurring Task Service

Creates the next occurrence of a recurring task when it is marked done.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from todo_app.models.task import Recurrence, Task, utcnow
from todo_app.services.task_service import TaskService
from todo_app.utils.logger import get_logger

logger = get_logger(__name__)

SPAWN_FAILED_MESSAGE = "Task completed, but its next occurrence could not be created"


def add_one_month(base: datetime) -> datetime:
    """
    Same day next month, clamped to the last day of that month.

    2024-01-31 -> 2024-02-29, 2023-01-31 -> 2023-02-28.
    """
    next_month = base.month + 1
    next_year = base.year
    if next_month > 12:
        next_month = 1
        next_year += 1

    max_day = calendar.monthrange(next_year, next_month)[1]
    return base.replace(year=next_year, month=next_month, day=min(base.day, max_day))


@dataclass
class DoneOutcome:
    """Result of marking a task done or pending."""

    task: Optional[Task] = None
    successor: Optional[Task] = None
    recurrence_error: Optional[str] = None


class RecurringTaskService:
    """Service to handle recurring task logic for one owner's store."""

    def __init__(self, store: TaskService):
        self.store = store

    @staticmethod
    def calculate_next_occurrence(recurrence: Recurrence, base: datetime) -> Optional[datetime]:
        """Calculate the next due date from ``base`` for the given recurrence."""
        if recurrence == Recurrence.DAILY:
            return base + timedelta(days=1)
        elif recurrence == Recurrence.WEEKLY:
            return base + timedelta(weeks=1)
        elif recurrence == Recurrence.MONTHLY:
            return add_one_month(base)
        return None

    def spawn_next_occurrence(self, task: Task, now: Optional[datetime] = None) -> Optional[Task]:
        """
        Insert the successor of a completed recurring task.

        The base date is the task's due date, or the completion time when it
        has none. The completed task itself is never modified.

        Returns:
            The new task, or None when the task is pending or not recurring.
        """
        if not task.done or not task.is_recurring:
            return None
        if task.owner != self.store.owner:
            raise ValueError("Task does not belong to this store's owner")

        base = task.due_date or now or utcnow()
        next_due = self.calculate_next_occurrence(task.recurrence, base)
        if next_due is None:
            return None

        successor = self.store.create_task(
            title=task.title,
            due_date=next_due,
            recurrence=task.recurrence,
        )
        logger.info(
            "Created next occurrence",
            task_id=task.id,
            successor_id=successor.id,
            due_date=next_due.isoformat(),
        )
        return successor

    def apply_done(self, task_id: str, done: bool) -> DoneOutcome:
        """
        Set the done flag and spawn a successor on a false -> true transition.

        A failed successor insert does not undo the completion: the error is
        logged and reported in ``recurrence_error``.
        """
        task, transitioned = self.store.set_done(task_id, done)
        outcome = DoneOutcome(task=task)
        if task is None or not transitioned or not done:
            return outcome

        try:
            outcome.successor = self.spawn_next_occurrence(task)
        except SQLAlchemyError:
            self.store.session.rollback()
            logger.exception("Failed to create next occurrence", task_id=task_id, owner=self.store.owner)
            outcome.recurrence_error = SPAWN_FAILED_MESSAGE
        return outcome
