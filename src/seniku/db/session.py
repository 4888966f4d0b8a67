# File location: src/seniku/db/session.py
import logging
from typing import Generator

from sqlmodel import Session, SQLModel, create_engine

from src.seniku.config.settings import DATABASE_URL, DB_ECHO

logger = logging.getLogger(__name__)

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    DATABASE_URL,
    echo=DB_ECHO,
    pool_pre_ping=True,
    connect_args=connect_args,
)


def create_db_and_tables() -> None:
    # Importing the package registers every table on SQLModel.metadata
    import src.seniku.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created or verified.")


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def open_session() -> Session:
    """Standalone session for work that runs outside a request (background tasks, scripts)."""
    return Session(engine)


def dispose_engine() -> None:
    engine.dispose()
    logger.info("Database connections closed.")
