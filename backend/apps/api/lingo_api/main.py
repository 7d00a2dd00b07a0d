"""
Lingo API - FastAPI application entry point.

This module initializes the FastAPI application and configures
middleware, routers, error handling and lifecycle events.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lingo_core import get_logger, init_logging
from lingo_core.exceptions import LingoError
from lingo_database import close_database, init_database

from .config import settings
from .routers import exports, imports, languages, projects, translations, users

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifecycle manager.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    init_logging(debug=settings.debug, json_logs=settings.environment != "development")
    logger.info("Starting Lingo API", extra={"version": settings.version})
    init_database(settings.database_url, echo=settings.debug)

    yield

    await close_database()
    logger.info("Shutting down Lingo API")


async def lingo_error_handler(request: Request, exc: LingoError) -> JSONResponse:
    """Render service errors as ``{error_code, message, details}``."""
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            extra={"path": request.url.path, "error_code": exc.error_code, "error": exc.message},
        )
    else:
        logger.warning(
            "Request rejected",
            extra={"path": request.url.path, "error_code": exc.error_code, "error": exc.message},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    """
    Build a configured FastAPI application.

    Returns:
        A new application instance with routers and handlers registered.
    """
    app = FastAPI(
        title=settings.app_name,
        description="Lingo - Localization and translation management API",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LingoError, lingo_error_handler)  # type: ignore[arg-type]

    app.include_router(languages.router, prefix="/languages", tags=["Languages"])
    app.include_router(translations.router, prefix="/translations", tags=["Translations"])
    app.include_router(projects.router, prefix="/projects", tags=["Projects"])
    app.include_router(users.router, prefix="/users", tags=["Users"])
    app.include_router(exports.router, prefix="/exports", tags=["Import/Export"])
    app.include_router(imports.router, prefix="/imports", tags=["Import/Export"])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """
        Health check endpoint.

        Returns:
            Dictionary containing service status and version.
        """
        return {"status": "healthy", "version": settings.version}

    return app


app = create_app()
