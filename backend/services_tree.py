"""
Node tree operations: list roots, insert under a parent.

Parent lookup is a pre-order depth-first search over the materialized forest.
Ids are assigned as `count + 1`; this is not safe under concurrent writers or
after rows are deleted outside the API, and a collision surfaces as a
primary-key failure from the store.
"""
import logging
from typing import List, Optional

from config import ROOT_PARENT_ID
from models import Node, NodeCreateRequest
from node_store import NodeRepository

logger = logging.getLogger("jigsaw")

PARENT_NOT_FOUND_MESSAGE = "Parent node not found."


class TreeError(Exception):
    """Base class for node tree errors."""


class ParentNodeNotFoundError(TreeError):
    """Raised when a requested parentId matches no node and is not the root sentinel."""

    def __init__(self, parent_id: str):
        super().__init__(PARENT_NOT_FOUND_MESSAGE)
        self.parent_id = parent_id


def find_parent_node(nodes: List[Node], parent_id: str) -> Optional[Node]:
    """
    Return the first node (pre-order, left to right) whose id equals parent_id.

    Each node is checked before its children. Uses an explicit stack so deep
    trees don't hit the recursion limit.
    """
    stack = list(reversed(nodes))
    seen = set()
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        if node.id == parent_id:
            return node
        stack.extend(reversed(node.children))
    return None


def list_roots(repo: NodeRepository) -> List[Node]:
    """Nodes whose parentId is the root sentinel, with their subtrees."""
    return [node for node in repo.list_all() if node.parent_id == ROOT_PARENT_ID]


def insert_node(repo: NodeRepository, request: NodeCreateRequest) -> Node:
    """
    Create a node under request.parent_id, or as a new root for the sentinel.

    Raises:
        ParentNodeNotFoundError: parent_id resolves to no node and is not the
            root sentinel. Nothing is written.
    """
    new_node = Node(
        id=str(repo.count() + 1),
        parent_id=request.parent_id,
        children=request.children,
    )

    parent = find_parent_node(repo.list_all(), new_node.parent_id)

    if parent is not None:
        parent.children.append(new_node)
        repo.insert(new_node, parent=parent)
        repo.save()
        logger.info(f"Inserted node {new_node.id} under {parent.id}")
        return new_node

    if new_node.parent_id == ROOT_PARENT_ID:
        repo.insert(new_node)
        repo.save()
        logger.info(f"Inserted root node {new_node.id}")
        return new_node

    raise ParentNodeNotFoundError(new_node.parent_id)
