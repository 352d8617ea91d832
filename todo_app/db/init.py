"""Initialize database tables."""
from sqlmodel import SQLModel
from sqlalchemy.engine import Engine

from todo_app.models.task import Task  # noqa: F401  registers the table
from todo_app.db.config import build_engine
from todo_app.utils.logger import get_logger

logger = get_logger(__name__)


def init_db(engine: Engine) -> None:
    """Create all tables in the database."""
    logger.info("[DB INIT] Creating all tables...")
    SQLModel.metadata.create_all(engine)
    logger.info("[DB INIT] Tables created successfully.")


if __name__ == "__main__":
    init_db(build_engine())
