"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from illustration_ai.api.main import api_router
from illustration_ai.config import settings
from illustration_ai.core.exceptions import (
    AppError,
    ConfigurationError,
    InvalidInputError,
    ServiceError,
)
from illustration_ai.models.response.illustration import ErrorResponse
from illustration_ai.utils.logging import configure_logging, get_logger

configure_logging(settings.log_level)
LOGGER = get_logger(__name__)

ERROR_STATUS_CODES = {
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    ServiceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Sent on every response, preflight included.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, x-api-key, anthropic-version",
    "Access-Control-Max-Age": "86400",
}


class RootResponse(BaseModel):
    """Root endpoint response payload."""

    message: str = Field(..., description="Service status message")
    version: str = Field(..., description="Running application version")
    docs: str = Field(..., description="Path to the interactive API docs")
    health: str = Field(..., description="Path to the health check endpoint")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    LOGGER.info(
        "Starting application",
        extra={
            "app_name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        },
    )
    if not settings.anthropic.configured:
        LOGGER.error("ANTHROPIC_API_KEY not set - illustration parsing requests will be rejected")

    yield

    LOGGER.info("Shutting down application")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in ERROR_STATUS_CODES.items() if isinstance(exc, error_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if status_code >= 500:
        LOGGER.error(
            "Processing error",
            exc_info=exc,
            extra={"path": request.url.path, "error": str(exc)},
        )
    else:
        LOGGER.warning("Rejected request", extra={"path": request.url.path, "error": str(exc)})
    return _error_response(status_code, str(exc) or type(exc).__name__)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    LOGGER.warning("Invalid request body", extra={"path": request.url.path, "errors": exc.errors()})
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request: images must be a list of base64 strings")


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Method not allowed" if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.error(
        "Unhandled error",
        exc_info=exc,
        extra={"path": request.url.path, "error": str(exc)},
    )
    response = _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or type(exc).__name__)
    # Rendered outside the CORS middleware, so the headers are added here.
    response.headers.update(CORS_HEADERS)
    return response


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Structured data extraction from life-insurance illustrations",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


@app.middleware("http")
async def cors_middleware(request: Request, call_next) -> Response:
    """Answer every OPTIONS request with an empty 204 and stamp fixed CORS headers."""
    if request.method == "OPTIONS":
        response = Response(status_code=status.HTTP_204_NO_CONTENT)
    else:
        response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

app.include_router(api_router)


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


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "illustration_ai.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
