from fastapi import FastAPI, Request, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from pathlib import Path
import logging
import time
import uuid

from config import CLIENT_DIST_DIR, CORS_ALLOW_ORIGINS, ENABLE_HTTPS_REDIRECT, LOG_LEVEL
from api_graph import router as graph_router
from api_health import router as health_router
from api_client_files import create_client_router
from node_store import init_node_store
from services_logging import structured_log_line

# Configure logging
logging.basicConfig(level=LOG_LEVEL, format="%(message)s")
logger = logging.getLogger("jigsaw")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Creates the nodes schema before the first request is served.
    """
    # Startup
    init_node_store()
    logger.info("Jigsaw backend ready.")

    yield  # App runs here


app = FastAPI(
    title="Jigsaw Backend",
    description="Tree-structured node API backing the graph client.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

if ENABLE_HTTPS_REDIRECT:
    app.add_middleware(HTTPSRedirectMiddleware)

app.include_router(graph_router)
app.include_router(health_router)


@app.middleware("http")
async def request_observability(request: Request, call_next):
    start = time.perf_counter()
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    request.state.request_id = request_id

    response = None
    try:
        response = await call_next(request)
    finally:
        latency_ms = int((time.perf_counter() - start) * 1000)
        status_code = getattr(response, "status_code", 500)

        logger.info(
            structured_log_line(
                {
                    "event": "request",
                    "request_id": request_id,
                    "route": request.url.path,
                    "method": request.method,
                    "status": status_code,
                    "latency_ms": latency_ms,
                }
            )
        )

    if isinstance(response, Response):
        response.headers["x-request-id"] = request_id
    return response


# Centralized error handling
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Handle HTTP exceptions (4xx, 5xx).
    Logs the error with appropriate level and returns JSON response.
    """
    # Log 4xx errors at WARNING level, 5xx at ERROR level
    if exc.status_code >= 500:
        logger.error(
            f"HTTP {exc.status_code} error on {request.method} {request.url.path}",
            extra={
                "status_code": exc.status_code,
                "method": request.method,
                "path": request.url.path,
                "detail": exc.detail,
            },
        )
    else:
        logger.warning(
            f"HTTP {exc.status_code} error on {request.method} {request.url.path}: {exc.detail}",
            extra={
                "status_code": exc.status_code,
                "method": request.method,
                "path": request.url.path,
                "detail": exc.detail,
            },
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle request validation errors (422).
    These are client errors, so log at WARNING level.
    """
    logger.warning(
        f"Validation error on {request.method} {request.url.path}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "errors": exc.errors(),
        },
    )
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors()},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions (storage failures included).
    Logs full stack trace but returns sanitized error message to client.
    """
    logger.exception(
        f"Unhandled exception on {request.method} {request.url.path}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        },
    )

    # Return sanitized error message (don't leak internal details)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Serve the built graph client when configured; otherwise "/" is a status probe.
if CLIENT_DIST_DIR and Path(CLIENT_DIST_DIR).is_dir():
    app.include_router(create_client_router(CLIENT_DIST_DIR))
else:
    @app.get("/")
    def read_root():
        return {"status": "ok", "message": "Jigsaw backend is running"}
