"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from docforge.api.v1.endpoints import health
from docforge.api.v1.router import api_router
from docforge.core.config import settings
from docforge.core.database import DatabaseClient, close_database, init_database
from docforge.core.exceptions import (
    AppError,
    InvalidRequestError,
    NotFoundError,
    PreconditionNotMetError,
    StorageError,
)
from docforge.core.gateway import LLMGateway, create_gateway_from_settings
from docforge.services.storage_service import StorageService
from docforge.utils.logging import configure_logging, get_logger
from docforge.utils.responses import create_error_detail

LOGGER = get_logger(__name__)


class RootResponse(BaseModel):
    """Root endpoint response payload."""

    message: str = Field(..., description="Service status message")
    version: str = Field(..., description="Running application version")
    docs: str = Field(..., description="Path to the interactive API docs")
    health: str = Field(..., description="Path to the health check endpoint")


def _error_response(
    request: Request, status_code: int, title: str, detail: str, field: Optional[str] = None
) -> JSONResponse:
    error_detail = create_error_detail(
        title=title, status=status_code, detail=detail, request=request, field=field
    )
    return JSONResponse(status_code=status_code, content={"detail": error_detail.model_dump(mode="json")})


async def invalid_request_handler(request: Request, exc: InvalidRequestError) -> JSONResponse:
    LOGGER.info(f"Invalid request on {request.url.path}: {exc}", extra={"field": exc.field})
    return _error_response(request, status.HTTP_400_BAD_REQUEST, "Invalid Request", str(exc), field=exc.field)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location) or None
    detail = first.get("msg", "Request validation failed")
    return _error_response(request, status.HTTP_400_BAD_REQUEST, "Invalid Request", detail, field=field)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(request, status.HTTP_404_NOT_FOUND, "Not Found", str(exc))


async def precondition_handler(request: Request, exc: PreconditionNotMetError) -> JSONResponse:
    LOGGER.warning(f"Precondition not met on {request.url.path}: {exc}")
    return _error_response(request, status.HTTP_409_CONFLICT, "Precondition Not Met", str(exc))


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    LOGGER.error(f"Storage failure on {request.url.path}: {exc}", exc_info=exc.original_error)
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage Error", str(exc))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    LOGGER.error(f"Unhandled application error on {request.url.path}: {exc}", exc_info=True)
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Error", str(exc))


def create_app(
    database: Optional[DatabaseClient] = None,
    gateway: Optional[LLMGateway] = None,
    storage: Optional[StorageService] = None,
) -> FastAPI:
    """Build the application.

    Clients not passed in are built from settings when the app starts.
    """
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        LOGGER.info(
            "Starting application",
            extra={
                "app_name": settings.app_name,
                "version": settings.app_version,
                "environment": settings.environment,
            },
        )

        app.state.database = database or DatabaseClient.from_settings(settings.db)
        app.state.gateway = gateway or create_gateway_from_settings(settings.llm)
        app.state.storage = storage or StorageService.from_settings(settings.storage)

        LOGGER.info("Starting database initialization...")
        try:
            await asyncio.wait_for(
                init_database(app.state.database, create_tables=settings.db.create_tables_on_startup),
                timeout=settings.db_init_timeout,
            )
            LOGGER.info("Database initialized successfully")
        except asyncio.TimeoutError:
            LOGGER.error(f"Database initialization timed out after {settings.db_init_timeout}s")
        except Exception as e:
            LOGGER.error(f"Database initialization failed: {e}", exc_info=True)

        yield

        LOGGER.info("Shutting down application")
        try:
            await close_database(app.state.database)
        except Exception as e:
            LOGGER.error("Error closing database", exc_info=True, extra={"error": str(e)})

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="LLM-backed generation of project documents, code, reviews, estimates and proposals",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Correlation ID middleware
    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid4()))
        request.state.correlation_id = correlation_id
        request.state.request_id = correlation_id
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID"],
    )

    app.add_exception_handler(InvalidRequestError, invalid_request_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(PreconditionNotMetError, precondition_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(AppError, app_error_handler)

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    app.include_router(health.router, prefix="/health", tags=["Health"])

    @app.get(
        "/",
        response_model=RootResponse,
        tags=["Root"],
        summary="Root endpoint",
        description="Get basic information about the API",
        operation_id="get_public_root_metadata",
    )
    async def root() -> RootResponse:
        return RootResponse(
            message="Server is running",
            version=settings.app_version,
            docs="/docs",
            health="/health",
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "docforge.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
