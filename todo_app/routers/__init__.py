"""Routers package for the To-Do API."""

from .account import router as account_router
from .tasks import router as tasks_router

__all__ = ["account_router", "tasks_router"]
