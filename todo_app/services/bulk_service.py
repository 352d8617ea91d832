"""
Bulk task operations.

Each bulk call is a sequence of independent single-task operations with no
surrounding transaction: a failure on one item is recorded and the sequence
continues, leaving earlier items applied.
"""

from typing import Any, Dict, Iterable, List, Tuple

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError

from todo_app.errors import StoreUnavailableError, ValidationError, format_validation_errors
from todo_app.models.task import Task
from todo_app.schemas.task import TaskImportItem
from todo_app.services.recurring_task_service import RecurringTaskService
from todo_app.services.task_service import TaskService
from todo_app.utils.logger import get_logger

logger = get_logger(__name__)


class BulkTaskService:
    """Batch done/delete plus JSON import and export for one owner."""

    def __init__(self, store: TaskService, recurring: RecurringTaskService):
        self.store = store
        self.recurring = recurring

    def _store_failed(self, action: str, **context) -> str:
        self.store.session.rollback()
        logger.exception(f"Bulk {action} step failed", owner=self.store.owner, **context)
        return StoreUnavailableError().message

    def set_done_many(self, task_ids: Iterable[str], done: bool) -> List[Dict[str, Any]]:
        results = []
        for task_id in task_ids:
            try:
                outcome = self.recurring.apply_done(task_id, done)
            except SQLAlchemyError:
                results.append({"id": task_id, "ok": False, "error": self._store_failed("done", task_id=task_id)})
                continue

            results.append({
                "id": task_id,
                "ok": outcome.task is not None,
                "successor_id": outcome.successor.id if outcome.successor else None,
                "error": outcome.recurrence_error,
            })
        return results

    def delete_many(self, task_ids: Iterable[str]) -> List[Dict[str, Any]]:
        results = []
        for task_id in task_ids:
            try:
                deleted = self.store.delete_task(task_id)
            except SQLAlchemyError:
                results.append({"id": task_id, "ok": False, "error": self._store_failed("delete", task_id=task_id)})
                continue
            results.append({"id": task_id, "ok": deleted})
        return results

    def import_tasks(self, items: Iterable[Dict[str, Any]]) -> Tuple[List[Task], List[Dict[str, Any]]]:
        """
        Create one task per imported item.

        Each raw item is validated on its own, so a malformed entry is
        reported without rejecting the rest. Items are stored as given,
        including ``done``; importing a completed recurring task does not
        spawn a successor.

        Returns:
            ``(created, errors)`` where each error carries the item index.
        """
        created: List[Task] = []
        errors: List[Dict[str, Any]] = []
        for index, raw in enumerate(items):
            try:
                item = TaskImportItem.model_validate(raw)
            except SchemaValidationError as e:
                errors.append({"index": index, "error": format_validation_errors(e)})
                continue

            try:
                created.append(self.store.create_task(
                    title=item.title,
                    due_date=item.due_date,
                    recurrence=item.recurrence,
                    done=item.done,
                ))
            except ValidationError as e:
                errors.append({"index": index, "error": e.message})
            except SQLAlchemyError:
                errors.append({"index": index, "error": self._store_failed("import", index=index)})

        logger.info("Tasks imported", owner=self.store.owner, created=len(created), failed=len(errors))
        return created, errors

    def export_tasks(self) -> List[Task]:
        return self.store.list_tasks()
