"""
Error taxonomy and FastAPI exception handlers.

Every error leaves the API as ``{"error": "<message>"}`` with the status
code of its kind. Missing or unowned tasks are not errors: the store
returns ``None`` and the routers pass that through.
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from todo_app.utils.logger import get_logger

logger = get_logger(__name__)


class TodoAppError(Exception):
    """Base exception for task API errors"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(TodoAppError):
    """Empty title, missing id or otherwise unusable input."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class StoreUnavailableError(TodoAppError):
    """The task store could not be reached."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str = "Task store unavailable"):
        super().__init__("STORE_UNAVAILABLE", message)


def error_response(status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def format_validation_errors(exc) -> str:
    """Flatten a request or schema validation error into "field: msg; ..."."""
    parts = []
    for err in exc.errors():
        # Drop the leading "body"/"query" segment of the location
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return "; ".join(parts) or "Invalid data"


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers that shape every failure as ``{"error": ...}``."""

    @app.exception_handler(TodoAppError)
    async def handle_todo_error(request: Request, exc: TodoAppError):
        logger.warning("Request rejected", code=exc.code, error=exc.message, path=request.url.path)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException):
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = format_validation_errors(exc)
        logger.warning("Invalid request body", error=message, path=request.url.path)
        return error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_failure(request: Request, exc: SQLAlchemyError):
        logger.exception("Task store failure", path=request.url.path)
        unavailable = StoreUnavailableError()
        return error_response(unavailable.status_code, unavailable.message)
