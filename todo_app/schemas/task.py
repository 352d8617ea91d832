"""Task schemas for the To-Do API."""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from todo_app.models.task import Recurrence


def parse_due_date(value: Any) -> Optional[datetime]:
    """
    Normalise an incoming due date to an aware UTC datetime.

    Accepts ISO dates (``2024-01-31``), ISO datetimes with or without an
    offset (a trailing ``Z`` is allowed) and ``datetime``/``date`` objects.
    Values without an offset, date-only input included, are taken as UTC.
    An empty string means "no due date".
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("Invalid date format. Use ISO format (YYYY-MM-DD)")
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif not isinstance(value, datetime):
        raise ValueError("Due date must be an ISO date string")

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_recurrence(value: Any) -> Any:
    if value is None:
        return Recurrence.NONE
    if isinstance(value, str):
        value = value.strip().lower()
        return value or Recurrence.NONE
    return value


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskFieldsModel(CamelModel):
    """Shared parsing for the editable task fields."""

    @field_validator("due_date", mode="before", check_fields=False)
    @classmethod
    def validate_due_date(cls, value):
        return parse_due_date(value)

    @field_validator("recurrence", mode="before", check_fields=False)
    @classmethod
    def validate_recurrence(cls, value):
        return parse_recurrence(value)


class TaskCreate(TaskFieldsModel):
    """Schema for creating a task."""
    title: str = Field(..., max_length=200)
    due_date: Optional[datetime] = None
    recurrence: Recurrence = Recurrence.NONE


class TaskDone(CamelModel):
    """Schema for marking a task done or pending."""
    id: str = Field(..., min_length=1, validation_alias=AliasChoices("id", "_id"))
    done: bool


class TaskUpdate(TaskFieldsModel):
    """
    Schema for a partial field update.

    Only the fields present in the request body are applied; an explicit
    ``dueDate: null`` (or ``""``) clears the deadline.
    """
    id: str = Field(..., min_length=1, validation_alias=AliasChoices("id", "_id"))
    title: Optional[str] = Field(None, max_length=200)
    due_date: Optional[datetime] = None
    recurrence: Optional[Recurrence] = None

    def changes(self) -> dict:
        """Fields explicitly sent by the client, excluding the id."""
        return self.model_dump(include=self.model_fields_set - {"id"})


class TaskDelete(CamelModel):
    """Schema for deleting a single task."""
    id: str = Field(..., min_length=1, validation_alias=AliasChoices("id", "_id"))


class TaskResponse(CamelModel):
    """Schema for task API responses."""
    id: str
    owner: str
    title: str
    done: bool
    due_date: Optional[datetime] = None
    recurrence: Recurrence = Recurrence.NONE
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskDoneResponse(CamelModel):
    """Result of a completion toggle, including any spawned successor."""
    task: Optional[TaskResponse] = None
    next_occurrence: Optional[TaskResponse] = None
    recurrence_error: Optional[str] = None


class TaskDeleteResponse(CamelModel):
    success: bool = True
    deleted: bool


class BulkDoneRequest(CamelModel):
    ids: List[str] = Field(..., min_length=1)
    done: bool


class BulkDeleteRequest(CamelModel):
    ids: List[str] = Field(..., min_length=1)


class BulkItemResult(CamelModel):
    """Outcome of one step of a bulk operation."""
    id: str
    ok: bool
    successor_id: Optional[str] = None
    error: Optional[str] = None


class BulkResponse(CamelModel):
    results: List[BulkItemResult]


class TaskImportItem(TaskFieldsModel):
    """One task in the import/export document."""
    title: str = Field(..., max_length=200)
    done: bool = False
    due_date: Optional[datetime] = None
    recurrence: Recurrence = Recurrence.NONE

    model_config = ConfigDict(from_attributes=True)


class TaskImportRequest(CamelModel):
    """Raw import items; each one is validated separately on import."""
    tasks: List[Dict[str, Any]]


class ImportItemError(CamelModel):
    index: int
    error: str


class TaskImportResponse(CamelModel):
    created: List[TaskResponse]
    errors: List[ImportItemError] = []


class TaskExportResponse(CamelModel):
    tasks: List[TaskImportItem]
