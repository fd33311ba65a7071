"""Repository interface over the `nodes` table."""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from models import Node

logger = logging.getLogger("jigsaw")


def build_forest(rows: Iterable[Dict[str, Any]]) -> List[Node]:
    """
    Materialize flat `nodes` rows into Node objects with children attached.

    Every row becomes a Node; a row whose `node_id` references another row is
    appended to that row's children, in row order. All nodes are returned
    (not just roots), in row order. A dangling `node_id` leaves the node
    unattached.
    """
    rows = list(rows)
    by_id: Dict[str, Node] = {}
    ordered: List[Node] = []
    for row in rows:
        node = Node(id=row["id"], parent_id=row["parent_id"])
        by_id[node.id] = node
        ordered.append(node)

    for row, node in zip(rows, ordered):
        owner_id = row.get("node_id")
        if owner_id is None:
            continue
        owner = by_id.get(owner_id)
        if owner is not None:
            owner.children.append(node)
    return ordered


class NodeRepository(ABC):
    """
    Unit of work over the node store.

    One repository wraps one connection and one open transaction. Writes made
    through `insert` become visible to other requests only after `save`.
    Use as a context manager to get rollback-on-error and cleanup.
    """

    def __init__(self, conn):
        self.conn = conn
        self._closed = False

    # -- driver hooks --------------------------------------------------

    @abstractmethod
    def _fetchall(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """Run a read query and return rows as dicts."""

    @abstractmethod
    def _execute(self, query: str, params: tuple = ()) -> None:
        """Run a write statement inside the current transaction."""

    @abstractmethod
    def _release(self, error: bool) -> None:
        """Give the connection back (close or return to pool)."""

    # -- repository API ------------------------------------------------

    def list_all(self) -> List[Node]:
        """All stored nodes, each with its subtree attached, in storage order."""
        rows = self._fetchall("SELECT id, parent_id, node_id FROM nodes")
        return build_forest(rows)

    def count(self) -> int:
        rows = self._fetchall("SELECT COUNT(*) AS total FROM nodes")
        return int(rows[0]["total"]) if rows else 0

    def insert(self, node: Node, parent: Optional[Node] = None) -> None:
        """
        Stage `node` (and any children it already carries) in the transaction.

        `parent` is the stored node it is being attached under; None makes it
        a root row. Nothing is committed until `save()`.
        """
        stack = [(node, parent.id if parent is not None else None)]
        while stack:
            current, owner_id = stack.pop()
            self._execute(
                "INSERT INTO nodes (id, parent_id, node_id) VALUES (%s, %s, %s)",
                (current.id, current.parent_id, owner_id),
            )
            # reversed so siblings are written left to right
            stack.extend((child, current.id) for child in reversed(current.children))

    def save(self) -> None:
        """Commit the current transaction."""
        self.conn.commit()

    def rollback(self) -> None:
        self.conn.rollback()

    def ping(self) -> bool:
        rows = self._fetchall("SELECT 1 AS ok")
        return bool(rows) and rows[0]["ok"] == 1

    def close(self, error: bool = False) -> None:
        if self._closed:
            return
        self._closed = True
        self._release(error)

    def __enter__(self) -> "NodeRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        error = exc_type is not None
        try:
            if error:
                self.rollback()
        except Exception as e:
            # Keep the original exception; the connection is discarded below
            logger.error(f"Node store rollback failed: {e}")
        finally:
            self.close(error=error)
