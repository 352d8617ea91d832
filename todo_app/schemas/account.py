"""Account schemas for the To-Do API."""
from typing import Optional

from todo_app.schemas.task import CamelModel


class AccountResponse(CamelModel):
    """Profile summary for the authenticated identity."""
    owner: str
    email: Optional[str] = None
    task_count: int


class AccountDeleteResponse(CamelModel):
    """Response after removing every task of an account."""
    success: bool = True
    deleted: int
