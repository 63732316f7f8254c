"""FastAPI application entry point for the Survey API.

This module initializes the FastAPI application, sets up logging,
registers routers, and handles global exception handling.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from survey_api.config import get_settings
from survey_api.errors import SurveyAPIError
from survey_api.logging_config import get_logger, request_id_var, setup_logging
from survey_api.routes import auth, company_admin, health, responses, super_admin, surveys

# Initialize logger (will be configured during startup)
logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Startup:
    - Configure logging
    - Log application startup information

    Shutdown:
    - Log shutdown event

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    # Startup
    settings = get_settings()
    setup_logging()

    logger.info(
        f"Survey API starting - "
        f"Environment: {settings.environment}, "
        f"Log Level: {settings.log_level}, "
        f"Database: {settings.database_url.split('@')[-1] if '@' in settings.database_url else 'configured'}, "
        f"Version: {settings.git_commit_sha}"
    )

    yield

    # Shutdown
    logger.info("Survey API shutting down")


# Initialize FastAPI application
app = FastAPI(
    title="Survey API",
    description="Multi-tenant survey authoring, response collection and reporting",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Tag the request with an id, echo it back, and log the outcome."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    token = request_id_var.set(request_id)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f}ms)",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 1),
            }
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
    finally:
        request_id_var.reset(token)


# Root endpoint
@app.get("/")
def root() -> dict:
    """Root endpoint with basic API information.

    Returns:
        dict: API information and status
    """
    settings = get_settings()
    return {
        "service": "Survey API",
        "version": "1.0.0",
        "environment": settings.environment,
        "status": "operational"
    }


# Register routers
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, tags=["Auth"])
app.include_router(super_admin.router, tags=["Super Admin"])
app.include_router(company_admin.router, tags=["Company Admin"])
app.include_router(surveys.router, tags=["Surveys"])
app.include_router(responses.router, tags=["Responses"])


@app.exception_handler(SurveyAPIError)
async def survey_api_error_handler(request: Request, exc: SurveyAPIError) -> JSONResponse:
    """Map domain errors to their HTTP status with an ``{error, message}`` body."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error} for {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(
            f"{exc.error} for {request.method} {request.url.path}: {exc.message}",
            extra={"status_code": exc.status_code}
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies and parameters as 400 validation errors."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body') or 'body'}: {error['msg']}"
        for error in exc.errors()
    )
    logger.info(f"Request validation failed for {request.method} {request.url.path}: {details}")

    return JSONResponse(
        status_code=400,
        content={"error": "Validation error", "message": details}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled exceptions.

    Logs all unhandled exceptions and returns a generic error response
    to prevent leaking sensitive information.

    Args:
        request: FastAPI request object
        exc: Exception that was raised

    Returns:
        JSONResponse: Generic error response
    """
    logger.error(
        f"Unhandled exception for {request.method} {request.url}: {exc}",
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later."
        }
    )
