"""Owner-scoped task store for the To-Do API."""
from sqlmodel import Session, select, func
from sqlalchemy import delete, update
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime

from todo_app.errors import ValidationError
from todo_app.models.task import Recurrence, Task, utcnow
from todo_app.utils.logger import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS = {"title", "due_date", "recurrence"}


class TaskService:
    """
    CRUD over the tasks of a single owner.

    The owner is bound at construction and every statement filters on it,
    so no method can read or write another owner's rows. Missing or
    unowned ids are reported as ``None``/``False``, never as errors.
    """

    def __init__(self, session: Session, owner: str):
        if not owner:
            raise ValidationError("Task owner is required", {"field": "owner"})
        self.session = session
        self.owner = owner

    def _owned(self):
        return select(Task).where(Task.owner == self.owner)

    @staticmethod
    def _clean_title(title: Optional[str]) -> str:
        if title is None or not title.strip():
            raise ValidationError("Title cannot be empty", {"field": "title"})
        return title.strip()

    def list_tasks(self) -> List[Task]:
        """Get all tasks of the owner."""
        statement = self._owned().order_by(Task.created_at.asc())
        return list(self.session.exec(statement).all())

    def get_task(self, task_id: str) -> Optional[Task]:
        """Get a specific task by ID, ensuring ownership."""
        statement = self._owned().where(Task.id == task_id)
        return self.session.exec(statement).first()

    def count(self) -> int:
        statement = select(func.count()).select_from(Task).where(Task.owner == self.owner)
        return self.session.exec(statement).one()

    def create_task(
        self,
        title: str,
        due_date: Optional[datetime] = None,
        recurrence: Optional[Recurrence] = None,
        done: bool = False,
    ) -> Task:
        """Create a new task for the owner."""
        task = Task(
            owner=self.owner,
            title=self._clean_title(title),
            done=done,
            due_date=due_date,
            recurrence=recurrence or Recurrence.NONE,
        )

        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)

        logger.info("Task created", task_id=task.id, owner=self.owner, recurrence=Recurrence(task.recurrence).value)
        return task

    def set_done(self, task_id: str, done: bool) -> Tuple[Optional[Task], bool]:
        """
        Set the completion flag of a task.

        The flag is changed with a single filtered UPDATE that only matches
        when the stored value differs, so concurrent toggles of the same
        task observe at most one transition.

        Returns:
            ``(task, transitioned)``; ``(None, False)`` when the task does
            not exist for this owner.
        """
        statement = (
            update(Task)
            .where(Task.id == task_id, Task.owner == self.owner, Task.done != done)
            .values(done=done, updated_at=utcnow())
        )
        result = self.session.connection().execute(statement)
        transitioned = result.rowcount == 1
        self.session.commit()

        task = self.get_task(task_id)
        if task is None:
            return None, False
        return task, transitioned

    def update_fields(self, task_id: str, changes: Dict[str, Any]) -> Optional[Task]:
        """
        Apply a partial update, touching only the keys present in ``changes``.

        ``due_date: None`` clears the deadline; an explicit empty title is
        rejected before anything is read or written.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        if "title" in changes:
            changes = {**changes, "title": self._clean_title(changes["title"])}

        task = self.get_task(task_id)
        if not task:
            return None

        if "title" in changes:
            task.title = changes["title"]
        if "due_date" in changes:
            task.due_date = changes["due_date"]
        if "recurrence" in changes:
            task.recurrence = changes["recurrence"] or Recurrence.NONE

        task.updated_at = utcnow()
        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return task

    def delete_task(self, task_id: str) -> bool:
        """Delete a task, ensuring ownership."""
        task = self.get_task(task_id)
        if not task:
            return False

        self.session.delete(task)
        self.session.commit()
        logger.info("Task deleted", task_id=task_id, owner=self.owner)
        return True

    def delete_all(self) -> int:
        """Delete every task of the owner. Only used by account deletion."""
        statement = delete(Task).where(Task.owner == self.owner)
        result = self.session.connection().execute(statement)
        self.session.commit()
        logger.info("All tasks deleted for owner", owner=self.owner, count=result.rowcount)
        return result.rowcount
