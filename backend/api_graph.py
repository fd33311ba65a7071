from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
import logging

from models import Node, NodeCreateRequest
from node_store import NodeRepository, get_node_repository
from services_tree import ParentNodeNotFoundError, insert_node, list_roots

logger = logging.getLogger("jigsaw")

router = APIRouter(prefix="/api/graph", tags=["graph"])


@router.get("", response_model=List[Node])
def get_graph_data(repo: NodeRepository = Depends(get_node_repository)):
    """Root nodes (parentId "0") with their subtrees."""
    return list_roots(repo)


@router.post(
    "",
    response_model=Node,
    responses={400: {"description": "Parent node not found.", "content": {"text/plain": {}}}},
)
def add_node(payload: NodeCreateRequest, repo: NodeRepository = Depends(get_node_repository)):
    """
    Insert a node under `parentId`, or as a new root when `parentId` is "0".

    Returns 400 with a plain-text message when the parent can't be found.
    """
    try:
        return insert_node(repo, payload)
    except ParentNodeNotFoundError as e:
        logger.warning(f"Rejected node insert: parent {e.parent_id!r} not found")
        return PlainTextResponse(str(e), status_code=400)
