"""
SQLite database connection utility.
Default node store for local development and tests.
"""
import sqlite3
import logging
from typing import Optional

from config import SQLITE_DB_PATH

logger = logging.getLogger("jigsaw")

DB_PATH = SQLITE_DB_PATH


def get_db_connection(db_path: Optional[str] = None):
    """Create a new database connection."""
    # Sync FastAPI dependencies and handlers may run on different threadpool workers.
    conn = sqlite3.connect(db_path or DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def adapt_query(query: str) -> str:
    """Adapt Postgres query syntax to SQLite."""
    # Replace %s with ?
    return query.replace("%s", "?")


def init_sqlite_db(db_path: Optional[str] = None) -> None:
    """Create the nodes table and its index if they don't exist."""
    conn = get_db_connection(db_path)
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS nodes (
                id TEXT PRIMARY KEY,
                parent_id TEXT NOT NULL,
                node_id TEXT NULL REFERENCES nodes(id)
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS ix_nodes_node_id ON nodes(node_id)")
        conn.commit()
        logger.info(f"[db_sqlite] Schema initialised at {db_path or DB_PATH}")
    except Exception as e:
        logger.error(f"[db_sqlite] Schema init failed: {e}")
        conn.rollback()
        raise
    finally:
        conn.close()
