"""
Postgres database connection utility.
Used as the node store when DATABASE_BACKEND=postgres.
"""
import atexit
import logging
import threading
from typing import Optional

import psycopg2
import psycopg2.pool
from psycopg2.extras import RealDictCursor

from config import POSTGRES_CONNECTION_STRING, POSTGRES_POOL_MIN, POSTGRES_POOL_MAX

logger = logging.getLogger("jigsaw")

# ---------------------------------------------------------------------------
# Connection pool — shared across all threads / requests
# ---------------------------------------------------------------------------
_pool: Optional[psycopg2.pool.ThreadedConnectionPool] = None
_pool_lock = threading.Lock()


def _require_connection_string() -> str:
    if not POSTGRES_CONNECTION_STRING:
        raise ValueError(
            "POSTGRES_CONNECTION_STRING environment variable is required when DATABASE_BACKEND=postgres."
        )
    return POSTGRES_CONNECTION_STRING


def _get_pool() -> psycopg2.pool.ThreadedConnectionPool:
    """Return the singleton connection pool, creating it lazily on first call."""
    global _pool
    if _pool is not None:
        return _pool
    with _pool_lock:
        if _pool is None:
            _pool = psycopg2.pool.ThreadedConnectionPool(
                POSTGRES_POOL_MIN,
                POSTGRES_POOL_MAX,
                _require_connection_string(),
            )
            # Close the pool cleanly when the process exits
            atexit.register(_pool.closeall)
            logger.info(
                f"[db_postgres] Connection pool created (min={POSTGRES_POOL_MIN}, max={POSTGRES_POOL_MAX})"
            )
    return _pool


def get_db_connection():
    """
    Borrow a connection from the pool.

    IMPORTANT: You MUST call `return_db_connection(conn)` when you're done —
    borrowed connections are not auto-returned.
    """
    pool = _get_pool()
    try:
        return pool.getconn()
    except psycopg2.pool.PoolError as e:
        logger.error(f"[db_postgres] Pool exhausted — all {POSTGRES_POOL_MAX} connections in use: {e}")
        raise


def return_db_connection(conn, error: bool = False) -> None:
    """Return a borrowed connection to the pool. Broken connections are discarded."""
    _get_pool().putconn(conn, close=error)


def get_db_cursor(conn):
    """Get a cursor that returns rows as dictionaries."""
    return conn.cursor(cursor_factory=RealDictCursor)


# ---------------------------------------------------------------------------
# Schema initialisation — run once at startup via main.py lifespan
# ---------------------------------------------------------------------------

def init_postgres_db():
    """Initialize the nodes table if it doesn't exist."""
    statements = [
        """
        CREATE TABLE IF NOT EXISTS nodes (
            id VARCHAR(450) PRIMARY KEY,
            parent_id TEXT NOT NULL,
            node_id VARCHAR(450) NULL,
            CONSTRAINT fk_nodes_nodes_node_id FOREIGN KEY (node_id) REFERENCES nodes(id)
        );
        """,
        "CREATE INDEX IF NOT EXISTS ix_nodes_node_id ON nodes(node_id);",
    ]

    # Use a raw direct connection for schema init (pool may not exist yet)
    conn = psycopg2.connect(_require_connection_string())
    try:
        with conn.cursor() as cur:
            for stmt in statements:
                cur.execute(stmt)
        conn.commit()
        logger.info("[db_postgres] Schema initialised — nodes table and index verified.")
    except Exception as e:
        logger.error(f"[db_postgres] Schema init failed: {e}")
        conn.rollback()
        raise
    finally:
        conn.close()
