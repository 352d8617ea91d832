"""Task router for the To-Do API."""
from fastapi import APIRouter, Depends, status
from typing import List, Optional
from sqlmodel import Session

from todo_app.schemas.task import (
    BulkDeleteRequest,
    BulkDoneRequest,
    BulkItemResult,
    BulkResponse,
    ImportItemError,
    TaskCreate,
    TaskDelete,
    TaskDeleteResponse,
    TaskDone,
    TaskDoneResponse,
    TaskExportResponse,
    TaskImportItem,
    TaskImportRequest,
    TaskImportResponse,
    TaskResponse,
    TaskUpdate,
)
from todo_app.services.bulk_service import BulkTaskService
from todo_app.services.recurring_task_service import RecurringTaskService
from todo_app.services.task_service import TaskService
from todo_app.middleware.auth import get_current_user, CurrentUser
from todo_app.db.config import get_session

router = APIRouter(tags=["Tasks"])


def _to_response(task) -> Optional[TaskResponse]:
    return TaskResponse.model_validate(task) if task is not None else None


def get_task_service(
    session: Session = Depends(get_session),
    current_user: CurrentUser = Depends(get_current_user),
) -> TaskService:
    """Dependency for a TaskService bound to the authenticated owner."""
    return TaskService(session, current_user.owner)


def get_recurring_service(service: TaskService = Depends(get_task_service)) -> RecurringTaskService:
    return RecurringTaskService(service)


def get_bulk_service(
    service: TaskService = Depends(get_task_service),
    recurring: RecurringTaskService = Depends(get_recurring_service),
) -> BulkTaskService:
    return BulkTaskService(service, recurring)


@router.get("/tasks", response_model=List[TaskResponse])
async def list_tasks(service: TaskService = Depends(get_task_service)):
    """List tasks for the authenticated owner."""
    return service.list_tasks()


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(task_data: TaskCreate, service: TaskService = Depends(get_task_service)):
    """Create a new task with an optional due date and recurrence."""
    return service.create_task(
        title=task_data.title,
        due_date=task_data.due_date,
        recurrence=task_data.recurrence,
    )


@router.put("/tasks", response_model=TaskDoneResponse)
async def set_done(task_data: TaskDone, recurring: RecurringTaskService = Depends(get_recurring_service)):
    """
    Mark a task done or pending.

    Completing a recurring task inserts its next occurrence; ``task`` is
    null when the id does not exist for this owner.
    """
    outcome = recurring.apply_done(task_data.id, task_data.done)
    return TaskDoneResponse(
        task=_to_response(outcome.task),
        next_occurrence=_to_response(outcome.successor),
        recurrence_error=outcome.recurrence_error,
    )


@router.patch("/tasks", response_model=Optional[TaskResponse])
async def update_task(task_data: TaskUpdate, service: TaskService = Depends(get_task_service)):
    """Update only the fields present in the body."""
    return service.update_fields(task_data.id, task_data.changes())


@router.delete("/tasks", response_model=TaskDeleteResponse)
async def delete_task(task_data: TaskDelete, service: TaskService = Depends(get_task_service)):
    """Delete a task; deleting a missing task is not an error."""
    return TaskDeleteResponse(deleted=service.delete_task(task_data.id))


@router.post("/tasks/bulk/done", response_model=BulkResponse)
async def bulk_set_done(request: BulkDoneRequest, bulk: BulkTaskService = Depends(get_bulk_service)):
    """Mark several tasks done or pending, one at a time."""
    results = bulk.set_done_many(request.ids, request.done)
    return BulkResponse(results=[BulkItemResult(**r) for r in results])


@router.post("/tasks/bulk/delete", response_model=BulkResponse)
async def bulk_delete(request: BulkDeleteRequest, bulk: BulkTaskService = Depends(get_bulk_service)):
    """Delete several tasks, one at a time."""
    results = bulk.delete_many(request.ids)
    return BulkResponse(results=[BulkItemResult(**r) for r in results])


@router.post("/tasks/import", response_model=TaskImportResponse)
async def import_tasks(request: TaskImportRequest, bulk: BulkTaskService = Depends(get_bulk_service)):
    """Import tasks from an export document."""
    created, errors = bulk.import_tasks(request.tasks)
    return TaskImportResponse(
        created=[TaskResponse.model_validate(task) for task in created],
        errors=[ImportItemError(**e) for e in errors],
    )


@router.get("/tasks/export", response_model=TaskExportResponse)
async def export_tasks(bulk: BulkTaskService = Depends(get_bulk_service)):
    """Export the owner's tasks in the import format."""
    return TaskExportResponse(
        tasks=[TaskImportItem.model_validate(task) for task in bulk.export_tasks()]
    )
