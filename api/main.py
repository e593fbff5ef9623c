"""
FastAPI main application for the Library API.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.books import router as books_router, validation_error_response
from api.config import APIConfig, config as default_api_config
from api.models import ErrorResponse, HealthResponse, ValidationFailure
from api.services import BookServices
from utilities.config import LibraryConfig, config as default_library_config

# Setup logging
logger = structlog.get_logger(__name__)


def _property_name(loc) -> str:
    """Turn a request error location such as ('body', 'pageCount') into 'PageCount'."""
    names = [part for part in loc if isinstance(part, str) and part not in ("body", "query", "path")]
    if not names:
        return ""
    name = names[-1]
    return name[:1].upper() + name[1:]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Library API")

    services: BookServices = app.state.services
    await services.initializer.initialize()

    if not app.state.api_config.get_api_keys():
        logger.warning("No API keys configured, every write request will be rejected")

    yield

    # Shutdown
    logger.info("Shutting down Library API")


def create_app(
    api_config: Optional[APIConfig] = None,
    library_config: Optional[LibraryConfig] = None,
    services: Optional[BookServices] = None
) -> FastAPI:
    """
    Build the FastAPI application with its collaborators.

    Args:
        api_config: API settings, defaults to the environment-derived config
        library_config: Database and logging settings
        services: Prebuilt services, built from library_config when omitted

    Returns:
        Configured FastAPI application
    """
    api_config = api_config or default_api_config
    library_config = library_config or default_library_config

    app = FastAPI(
        title=api_config.api_title,
        description=api_config.api_description,
        version=api_config.api_version,
        lifespan=lifespan
    )

    app.state.api_config = api_config
    app.state.services = services or BookServices.build(library_config.get_database_path())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_credentials=api_config.cors_allow_credentials,
        allow_methods=api_config.cors_allow_methods,
        allow_headers=api_config.cors_allow_headers,
    )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=exc.detail,
                status_code=exc.status_code
            ).model_dump(),
            headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report unparseable requests the same way as failed validation rules."""
        failures = [
            ValidationFailure(property_name=_property_name(error.get("loc", ())), error_message=error.get("msg", ""))
            for error in exc.errors()
        ]
        logger.info("Rejected malformed request", path=request.url.path, errors=len(failures))
        return validation_error_response(failures)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="Internal server error",
                detail=str(exc) if api_config.debug else None,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            ).model_dump()
        )

    # Health check endpoint (no authentication required)
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        health_info = await request.app.state.services.connection_factory.health_check()
        db_status = health_info.get("status", "unknown")

        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.utcnow(),
            version=api_config.api_version,
            database_status=db_status
        )

    app.include_router(books_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
