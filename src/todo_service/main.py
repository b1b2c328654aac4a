from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import (
    InvalidIdentifier,
    NotFound,
    PersistenceFailure,
    QuoteNotConfigured,
    QuoteUnavailable,
    TodoError,
    ValidationFailure,
)
from .logging_config import configure_logging
from .quotes import QuoteFetcher
from .repositories import Repository, get_repository
from .routers import quotes as quotes_router
from .routers import todos as todos_router
from .services import TodoService
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "todos", "description": "Create, read, update and delete Todo items."},
    {"name": "quotes", "description": "Random quotes from a third-party API."},
]

_STATUS_BY_ERROR = (
    (InvalidIdentifier, 400),
    (ValidationFailure, 400),
    (NotFound, 404),
    (PersistenceFailure, 500),
    (QuoteUnavailable, 502),
    (QuoteNotConfigured, 503),
)


def _status_for(exc: TodoError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[Repository] = None,
    quote_fetcher: Optional[QuoteFetcher] = None,
) -> FastAPI:
    """
    Compose the FastAPI application.

    The repository and quote fetcher are built from settings unless given
    explicitly, which is how tests swap in the in-memory store or a fake
    quote transport.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    repo = repository if repository is not None else get_repository(settings)
    fetcher = quote_fetcher if quote_fetcher is not None else QuoteFetcher.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Todo service started with %s backend", repo.name)
        yield
        repo.close()
        logger.info("Todo service stopped")

    app = FastAPI(
        title="Todo Service",
        description="Transactional CRUD service for todo items, with an optional random quote endpoint.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.todo_service = TodoService(repo, fetcher)

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": exc.errors(),
            },
        )

    @app.exception_handler(TodoError)
    async def todo_error_handler(request: Request, exc: TodoError) -> JSONResponse:
        """
        Map core errors to HTTP responses.

        Response format:
            {"error": "<error class name>", "message": "<description>"}
        """
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.__class__.__name__, "message": str(exc)},
        )

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": repo.name}

    app.include_router(todos_router.router)
    app.include_router(quotes_router.router)
    return app


app = create_app()
