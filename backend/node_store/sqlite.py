"""SQLite implementation of the node store (default)."""
import sqlite3
from typing import Any, Dict, List, Optional

from db_sqlite import adapt_query, get_db_connection
from .base import NodeRepository


class SQLiteNodeRepository(NodeRepository):
    """SQLite-backed node repository."""

    def __init__(self, db_path: Optional[str] = None):
        """
        Open a connection to the SQLite file.

        Args:
            db_path: Path to the database file (defaults to config SQLITE_DB_PATH)
        """
        super().__init__(get_db_connection(db_path))

    def _fetchall(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        cursor = self.conn.execute(adapt_query(query), params)
        return [dict(row) for row in cursor.fetchall()]

    def _execute(self, query: str, params: tuple = ()) -> None:
        self.conn.execute(adapt_query(query), params)

    def _release(self, error: bool) -> None:
        try:
            if error:
                self.conn.rollback()
        except sqlite3.Error:
            pass
        self.conn.close()
