"""Main FastAPI application for the To-Do API."""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from todo_app.db.config import build_engine
from todo_app.db.init import init_db
from todo_app.errors import register_exception_handlers
from todo_app.middleware.cors import add_cors_middleware
from todo_app.routers import account_router, tasks_router
from todo_app.utils.logger import get_logger

VERSION = "1.0.0"

logger = get_logger(__name__)


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """
    Build the application and its task store handle.

    The engine is created once here and shared by every request through
    ``app.state.engine``; tables are created at startup.
    """
    engine = build_engine(database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        logger.info("[SUCCESS] Application startup complete.", version=VERSION)
        yield
        engine.dispose()

    app = FastAPI(
        title="Recurring To-Do API",
        description="Personal task tracking with due dates and recurring tasks",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.engine = engine

    add_cors_middleware(app)
    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": VERSION}

    @app.get("/")
    async def root():
        """Root endpoint - API welcome message."""
        return {
            "message": "Welcome to the Recurring To-Do API",
            "version": VERSION,
            "docs": "/docs",
            "health": "/health",
        }

    app.include_router(tasks_router)  # /tasks, /tasks/bulk/*, /tasks/import, /tasks/export
    app.include_router(account_router)  # /account

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "todo_app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
