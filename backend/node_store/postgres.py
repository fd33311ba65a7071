"""PostgreSQL implementation of the node store."""
import logging
from typing import Any, Dict, List

import psycopg2

from db_postgres import get_db_connection, get_db_cursor, return_db_connection
from .base import NodeRepository

logger = logging.getLogger("jigsaw")


class PostgresNodeRepository(NodeRepository):
    """Node repository on a connection borrowed from the shared pool."""

    def __init__(self):
        super().__init__(get_db_connection())

    def _fetchall(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        with get_db_cursor(self.conn) as cur:
            cur.execute(query, params)
            return [dict(row) for row in cur.fetchall()]

    def _execute(self, query: str, params: tuple = ()) -> None:
        with self.conn.cursor() as cur:
            cur.execute(query, params)

    def _release(self, error: bool) -> None:
        try:
            if not error:
                # Don't hand a connection back to the pool mid-transaction
                self.conn.rollback()
        except psycopg2.Error as e:
            logger.warning(f"[db_postgres] Discarding connection after failed rollback: {e}")
            error = True
        finally:
            return_db_connection(self.conn, error=error)
