"""Database configuration for the To-Do API."""
from typing import Generator, Optional
from fastapi import Request
from sqlmodel import create_engine, Session
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
import os
from dotenv import load_dotenv

from todo_app.utils.logger import get_logger

# Load environment variables but prioritize local development
load_dotenv()

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./todo_app.db")
DB_ECHO = os.environ.get("DB_ECHO", "false").lower() == "true"

logger = get_logger(__name__)


def is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def build_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create the process-wide engine for the task store.

    Called once by the application factory; the result is kept on
    ``app.state.engine`` and handed to requests through ``get_session``.
    """
    database_url = database_url or DATABASE_URL

    if not is_sqlite(database_url):
        logger.info("[DB CONFIG] Using server database", dialect=database_url.split(":", 1)[0])
        return create_engine(database_url, echo=DB_ECHO, pool_pre_ping=True)

    logger.info("[DB CONFIG] Using SQLite database", url=database_url)
    connect_args = {"check_same_thread": False}

    # In-memory databases live per connection, so every session must share one
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        engine = create_engine(
            database_url, echo=DB_ECHO, connect_args=connect_args, poolclass=StaticPool
        )
    else:
        engine = create_engine(database_url, echo=DB_ECHO, connect_args=connect_args)

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def get_session(request: Request) -> Generator[Session, None, None]:
    """Dependency for getting database sessions bound to the app's engine."""
    with Session(request.app.state.engine) as session:
        yield session
