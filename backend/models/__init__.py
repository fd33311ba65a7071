# Request/response models for the node tree API.
from .node import Node, NodeCreateRequest

__all__ = ["Node", "NodeCreateRequest"]
