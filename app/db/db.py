import logging
import os
from functools import lru_cache
from typing import Optional

from sqlmodel import SQLModel, create_engine

from app.repository.base import Repository
from app.repository.memory import InMemoryRepository
from app.repository.sql import SQLRepository

# registers the tables on SQLModel.metadata
from app.models import found_item, lost_item, match_request, notification, user  # noqa: F401

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("memory", "database")


def make_engine(database_url: Optional[str] = None):
    url = database_url or os.getenv("DATABASE_URL", "sqlite:///./lostfound.db")

    connect_args = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}

    return create_engine(url, connect_args=connect_args)


def create_db_and_tables(engine) -> None:
    SQLModel.metadata.create_all(engine)


def build_repository(backend: Optional[str] = None) -> Repository:
    backend = (backend or os.getenv("STORAGE_BACKEND", "memory")).lower()

    if backend not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown STORAGE_BACKEND '{backend}', expected one of {STORAGE_BACKENDS}")

    if backend == "database":
        engine = make_engine()
        create_db_and_tables(engine)
        logger.info("Using database repository")
        return SQLRepository(engine)

    logger.info("Using in-memory repository")
    return InMemoryRepository()


@lru_cache
def get_repository() -> Repository:
    """Process-wide repository, chosen once from STORAGE_BACKEND."""
    return build_repository()
