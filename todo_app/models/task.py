"""Task model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
import uuid


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class UTCTimestamp(TypeDecorator):
    """
    Timestamp column that always hands back aware UTC datetimes.

    Naive values are taken to be UTC on the way in. SQLite keeps no offset,
    so loaded values get ``timezone.utc`` attached; backends that do store
    one are converted to UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Recurrence(str, Enum):
    """How a task repeats once it is completed."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Task(SQLModel, table=True):
    """Task entity representing a to-do item owned by a single identity."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
    )
    owner: str = Field(index=True, max_length=255)  # authenticated email, never reassigned
    title: str = Field(max_length=200, min_length=1)
    done: bool = Field(default=False)
    due_date: Optional[datetime] = Field(default=None, sa_type=UTCTimestamp)
    recurrence: Recurrence = Field(default=Recurrence.NONE)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCTimestamp)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCTimestamp)

    @property
    def is_recurring(self) -> bool:
        return self.recurrence != Recurrence.NONE
