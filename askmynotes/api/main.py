"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers, middleware and error bodies,
and configures the uvicorn server.

Dependencies: fastapi, askmynotes.api.routers, askmynotes.observability, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from askmynotes.api.deps.dependencies import get_service_cache
from askmynotes.api.routers.router_utils import error_response
from askmynotes.boundary.db.connection import dispose_async_engine
from askmynotes.configs import get_settings
from askmynotes.core.background import drain_detached
from askmynotes.observability import configure_logging
from askmynotes.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

from .routers import (
    chat_router,
    documents_router,
    health_router,
    study_router,
    subjects_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup configures logging, creates tables when asked to and pre-warms
    the service cache. Shutdown waits for pending chat-log writes before
    the engine is disposed.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured")

    if settings.database.create_tables_on_startup:
        from askmynotes.boundary.db.create_tables import create_all_tables

        await create_all_tables()
        logger.info("Database tables ensured")

    logger.info("Pre-warming service cache...")
    cache = get_service_cache()
    # Trigger property access to load instances
    _ = cache.document_processor
    _ = cache.answer_engine
    _ = cache.study_generator
    _ = cache.context_assembler
    logger.info("Service cache pre-warmed")

    yield

    # Shutdown
    await drain_detached()
    cache.clear()
    await dispose_async_engine()
    logger.info("Application shutdown complete")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors with the `{"error": ...}` body."""
    return error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render request validation failures as 400 with the first problem."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "")
    else:
        message = "Invalid request"
    logger.warning("Request validation failed", extra={"path": request.url.path, "error": message})
    return error_response(400, message)


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Study assistant that answers only from the notes you upload",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(subjects_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")
    app.include_router(chat_router, prefix="/api/v1")
    app.include_router(study_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "askmynotes.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
