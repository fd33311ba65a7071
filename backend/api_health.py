"""
Health check endpoints for monitoring system status.
"""

from fastapi import APIRouter
import logging

from config import DATABASE_BACKEND
from node_store import create_node_repository

logger = logging.getLogger("jigsaw")

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/")
def health_check():
    """Basic health check endpoint."""
    return {"status": "ok", "service": "jigsaw-backend"}


@router.get("/db")
def db_health_check():
    """
    Check node store connectivity.

    The connection is opened here rather than through a dependency so that
    connect failures are reported as unhealthy too.
    """
    try:
        with create_node_repository() as repo:
            repo.ping()
            node_count = repo.count()
        return {
            "status": "healthy",
            "database": DATABASE_BACKEND,
            "node_count": node_count,
            "query_test": "passed",
        }
    except Exception as e:
        logger.error(f"Node store health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": DATABASE_BACKEND,
            "error": str(e),
            "query_test": "failed",
        }
