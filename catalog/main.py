"""
Catalog Application

This module creates and configures the catalog application.

Key Concepts:
=============

1. Application Factory
   - create_app() returns a configured app
   - Tests pass their own Settings (e.g. a temporary SQLite database)

2. Lifespan Events
   - startup: create missing tables (development convenience)
   - shutdown: dispose the connection pool

3. Exception Handlers
   - NotFound -> error page with status 404
   - StoreFailure -> generic error page with status 500, cause logged
   - anything else -> 500, details shown only in debug mode
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog import __version__
from catalog.config import Settings, get_settings
from catalog.database import StoreConfig, create_tables
from catalog.exceptions import NotFound, StoreFailure
from catalog.rendering import render_error
from catalog.routers import (
    authors_router,
    book_instances_router,
    books_router,
    genres_router,
    home_router,
)
from catalog.services.store import EntityStore

# =============================================================================
# Logging Configuration
# =============================================================================
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """
    Apply settings.log_level to the root logger.

    basicConfig() only installs a handler the first time; the level is set
    explicitly so every app built by create_app() uses its own settings.
    """
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(settings.log_level)


# =============================================================================
# Application Factory
# =============================================================================
def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the catalog app around its own EntityStore.

    Args:
        settings: Configuration to use; defaults to the cached get_settings()

    Returns:
        FastAPI app with routers, handlers and app.state.store set
    """
    settings = settings or get_settings()
    configure_logging(settings)
    store = EntityStore.from_config(StoreConfig.from_settings(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ----- STARTUP -----
        database = store.engine.url.render_as_string(hide_password=True)
        logger.info(f"{settings.app_name} starting ({settings.environment}), store: {database}")
        if settings.create_tables_on_startup:
            create_tables(store.engine)

        yield

        # ----- SHUTDOWN -----
        logger.info(f"{settings.app_name} stopping, disposing connection pool")
        store.close()

    app = FastAPI(
        title=settings.app_name,
        description="Server-rendered catalog of authors, books, genres and book copies.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound) -> Response:
        logger.info(f"{exc.message}: {exc.entity_id}")
        return render_error(request, exc.status_code, exc.message)

    @app.exception_handler(StoreFailure)
    async def store_failure_handler(request: Request, exc: StoreFailure) -> Response:
        """
        Handle entity store errors.

        The cause is logged; the page only shows it in debug mode.
        """
        logger.error(f"Store error: {exc}")
        return render_error(
            request,
            500,
            "A database error occurred. Please try again later.",
            str(exc) if settings.debug else None,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        return render_error(request, exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> Response:
        """Catch-all: hide internal errors unless in debug mode."""
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        return render_error(
            request,
            500,
            "An internal error occurred.",
            str(exc) if settings.debug else None,
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(home_router)
    app.include_router(authors_router)
    app.include_router(books_router)
    app.include_router(genres_router)
    app.include_router(book_instances_router)

    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the application is running.",
    )
    async def health_check() -> dict:
        return {
            "status": "healthy",
            "app": settings.app_name,
            "environment": settings.environment,
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn catalog.main:app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "catalog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
