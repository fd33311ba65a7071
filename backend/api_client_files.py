"""
Serves the built graph client (index.html + assets) from CLIENT_DIST_DIR.

Existing files are returned as-is; any other non-API GET falls back to
index.html so client-side routes resolve.
"""
from pathlib import Path

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse


def create_client_router(dist_dir: str) -> APIRouter:
    root = Path(dist_dir).resolve()
    index_file = root / "index.html"
    router = APIRouter(tags=["client"])

    @router.get("/{full_path:path}", include_in_schema=False)
    def serve_client(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            raise HTTPException(status_code=404, detail="Not Found")

        if full_path:
            candidate = (root / full_path).resolve()
            # Stay inside the dist directory
            if candidate.is_file() and root in candidate.parents:
                return FileResponse(candidate)

        if not index_file.is_file():
            raise HTTPException(status_code=404, detail="Not Found")
        return FileResponse(index_file)

    return router
