"""Factory for creating node repositories."""
import logging
from typing import Generator

from config import DATABASE_BACKEND
from .base import NodeRepository
from .sqlite import SQLiteNodeRepository
# Lazy import PostgresNodeRepository to avoid requiring a pool unless configured

logger = logging.getLogger("jigsaw")


def _use_postgres() -> bool:
    if DATABASE_BACKEND not in ("sqlite", "postgres"):
        raise ValueError(f"Unsupported DATABASE_BACKEND: {DATABASE_BACKEND!r} (expected 'sqlite' or 'postgres')")
    return DATABASE_BACKEND == "postgres"


def init_node_store() -> None:
    """Create the nodes schema for the configured backend. Safe to call repeatedly."""
    logger.info(f"Initialising node store (backend={DATABASE_BACKEND})")
    if _use_postgres():
        from db_postgres import init_postgres_db
        init_postgres_db()
    else:
        from db_sqlite import init_sqlite_db
        init_sqlite_db()


def create_node_repository() -> NodeRepository:
    """Open a repository (one connection, one transaction) on the configured backend."""
    if _use_postgres():
        from .postgres import PostgresNodeRepository
        return PostgresNodeRepository()
    return SQLiteNodeRepository()


def get_node_repository() -> Generator[NodeRepository, None, None]:
    """
    FastAPI dependency that yields a request-scoped repository.

    Uncommitted writes are rolled back if the request fails; the connection
    is always released.
    """
    with create_node_repository() as repo:
        yield repo
