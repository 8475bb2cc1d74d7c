"""
ADHDone - AI-powered ADHD task coach exposed as an MCP server.

This module provides the main FastAPI application with all routes and middleware configured.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adhdone.api.endpoints import mcp, tools
from adhdone.core.config import settings
from adhdone.core.constants import SERVER_DESCRIPTION, SERVER_DISPLAY_NAME, SERVICE_NAME, SESSION_NOT_FOUND, VERSION
from adhdone.core.middleware import RequestLoggingMiddleware
from adhdone.exceptions import ADHDoneError, SessionNotFoundError
from adhdone.mcp.server import MCPServer, jsonrpc_error
from adhdone.mcp.sessions import SessionManager


def _initialize_logging():
    """Initialize logging with fallback to basic config."""
    try:
        from adhdone.core.logging_config import setup_logging

        setup_logging()
    except Exception:
        logging.basicConfig(level=logging.INFO)


_initialize_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    logger.info(f"Application startup: {SERVER_DISPLAY_NAME} v{VERSION}")
    yield
    closed = app.state.session_manager.close_all()
    logger.info(f"Application shutdown complete ({closed} sessions closed)")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=SERVER_DESCRIPTION,
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.state.mcp_server = MCPServer()
app.state.session_manager = SessionManager()

# Request Logging Middleware (if enabled)
if settings.LOG_REQUESTS:
    app.add_middleware(RequestLoggingMiddleware)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SessionNotFoundError)
async def session_not_found_handler(request: Request, exc: SessionNotFoundError):
    """Reject messages that name no open streaming session."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonrpc_error(exc.request_id, SESSION_NOT_FOUND, str(exc)),
    )


@app.exception_handler(ADHDoneError)
async def adhdone_exception_handler(request: Request, exc: ADHDoneError):
    """Handle custom ADHDone exceptions."""
    logger.error(f"ADHDone error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal error occurred. Please try again later."},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors with detailed messages."""
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation error",
            "errors": errors,
        },
    )


# Register Routers
app.include_router(mcp.router, tags=["MCP"])
app.include_router(tools.router, prefix="/tools", tags=["Tools"])


@app.get("/", tags=["Info"])
def server_info():
    """Service metadata and the names of the available tools."""
    return {
        "name": SERVER_DISPLAY_NAME,
        "version": VERSION,
        "description": SERVER_DESCRIPTION,
        "status": "running",
        "tools": app.state.mcp_server.dispatcher.registry.names(),
    }


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint for monitoring.

    Returns service status. Use this endpoint for load balancer health checks
    and monitoring systems.
    """
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "sessions": len(app.state.session_manager),
    }
