"""Node store implementations."""
from .base import NodeRepository, build_forest
from .factory import create_node_repository, get_node_repository, init_node_store

__all__ = [
    "NodeRepository",
    "build_forest",
    "create_node_repository",
    "get_node_repository",
    "init_node_store",
]
