"""FastAPI application factory and lifespan management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from forms_api.config import Settings
from forms_api.errors import register_error_handlers
from forms_api.forms.repository import FormRepository, SqliteFormRepository
from forms_api.middleware.cors import configure_cors
from forms_api.middleware.logging import RequestLoggingMiddleware
from forms_api.routes import health, insurance_forms
from forms_api.search.index import FormSearchIndex, SearchIndex

logger = structlog.get_logger()

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Opens the record store and builds the search index from it, unless the
    caller injected its own collaborators into create_app. Only the
    collaborators created here are closed on shutdown.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    logger.info("api_startup", host=settings.host, port=settings.port)

    owned_repository: SqliteFormRepository | None = None
    owned_index: SearchIndex | None = None

    if app.state.repository is None:
        owned_repository = SqliteFormRepository(settings.database_path)
        owned_repository.initialize()
        app.state.repository = owned_repository

    if app.state.search_index is None:
        owned_index = SearchIndex()
        owned_index.initialize()
        doc_count = owned_index.rebuild(app.state.repository.find_all())
        logger.info("search_index_ready", document_count=doc_count)
        app.state.search_index = owned_index

    try:
        yield
    finally:
        if owned_index is not None:
            owned_index.close()
            app.state.search_index = None
        if owned_repository is not None:
            owned_repository.close()
            app.state.repository = None
        logger.info("api_shutdown")


def create_app(
    settings: Settings | None = None,
    repository: FormRepository | None = None,
    search_index: FormSearchIndex | None = None,
) -> FastAPI:
    """Factory function to create configured FastAPI application.

    Args:
        settings: Configuration instance. Creates default if None.
        repository: Record store to use. A SQLite store at
            ``settings.database_path`` is opened on startup if None.
        search_index: Search index to use. An in-memory FTS5 index built
            from the record store is created on startup if None.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Insurance Forms API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=f"{API_PREFIX}/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url=f"{API_PREFIX}/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.repository = repository
    app.state.search_index = search_index

    configure_cors(app, settings.cors_origins, settings.application_name)
    app.add_middleware(RequestLoggingMiddleware)
    register_error_handlers(app)

    app.include_router(health.router, prefix=API_PREFIX)
    app.include_router(insurance_forms.router, prefix=API_PREFIX)

    return app
