"""Database models for the To-Do API."""

from .task import Recurrence, Task, utcnow

__all__ = ["Recurrence", "Task", "utcnow"]
