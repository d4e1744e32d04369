"""
FastAPI application setup for the Jira dashboard backend.

Creates the FastAPI app, registers routes and installs the exception
handlers that give every error response the same shape.
"""

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from jira_dashboard import __version__
from jira_dashboard.core.config.loader import load_config
from jira_dashboard.core.config.models import DashboardConfig
from jira_dashboard.core.dashboard.api.deps import Services
from jira_dashboard.core.dashboard.api.routes import avatar, dashboards, readme

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Machine-readable `error_code` values in error bodies."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"

    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    """Body of every non-2xx JSON response."""

    error: str
    error_code: ErrorCode
    message: str
    request_id: Optional[str] = None


def _error_code_for(status_code: int) -> ErrorCode:
    if status_code == status.HTTP_404_NOT_FOUND:
        return ErrorCode.NOT_FOUND
    if status_code in (status.HTTP_502_BAD_GATEWAY, status.HTTP_504_GATEWAY_TIMEOUT):
        return ErrorCode.UPSTREAM_ERROR
    if status_code >= 500:
        return ErrorCode.INTERNAL_ERROR
    return ErrorCode.INVALID_REQUEST


def _error_response(
    request: Request, status_code: int, error_code: ErrorCode, message: str
) -> JSONResponse:
    body = ErrorResponse(
        error=message,
        error_code=error_code,
        message=message,
        request_id=str(id(request)),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTP errors (route exceptions and unmatched paths); 5xx are logged as errors."""
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    if exc.status_code >= 500:
        logger.error(
            "HTTP %d on %s %s: %s",
            exc.status_code,
            request.method,
            request.url.path,
            detail,
            extra={"request_id": id(request)},
        )
    else:
        logger.info(
            "HTTP %d on %s %s: %s",
            exc.status_code,
            request.method,
            request.url.path,
            detail,
            extra={"request_id": id(request)},
        )

    return _error_response(request, exc.status_code, _error_code_for(exc.status_code), detail)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors with a short, user-facing message."""
    logger.warning(
        "Validation error on %s %s: %s",
        request.method,
        request.url.path,
        exc.errors(),
        extra={"request_id": id(request)},
    )

    first_error = exc.errors()[0] if exc.errors() else {}
    field = " -> ".join(str(loc) for loc in first_error.get("loc", []))
    error_msg = first_error.get("msg", "Invalid input")

    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorCode.VALIDATION_ERROR,
        f"{field}: {error_msg}" if field else error_msg,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler: log the traceback and answer 500.

    The exception text is never sent to the client.
    """
    logger.error(
        "Unhandled exception on %s %s: %s\n%s",
        request.method,
        request.url.path,
        str(exc),
        traceback.format_exc(),
        extra={"request_id": id(request)},
    )

    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.INTERNAL_ERROR,
        "An internal server error occurred",
    )


def create_app(
    config: Optional[DashboardConfig] = None,
    services: Optional[Services] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Configuration; loaded from the usual files if None
        services: Pre-built collaborators. If None, they are created at
            startup around a shared httpx client that is closed on shutdown.

    Returns:
        Configured FastAPI app
    """
    if config is None:
        config = services.config if services is not None else load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if services is not None:
            app.state.services = services
            yield
            return

        built = Services.from_config(config)
        app.state.services = built
        logger.info("Initializing Jira dashboard backend for %s", config.jira.base_url)
        try:
            yield
        finally:
            await built.http.aclose()

    app = FastAPI(
        title="Jira Dashboard API",
        description="Jira issues and project data for software catalog entities",
        version=__version__,
        lifespan=lifespan,
    )

    # Tests pass services directly and may not run the lifespan
    if services is not None:
        app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(dashboards.router, tags=["dashboards"])
    app.include_router(avatar.router, tags=["avatar"])
    app.include_router(readme.router, tags=["readme"])

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok"}

    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)

    return app
