"""
FastAPI application factory.

Run with ``uvicorn promptdesk.main:create_app --factory`` or ``promptdesk serve``.
"""
import logging
import random
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from promptdesk.api.endpoints import executions, health, images, prompts, search, tags, versions
from promptdesk.api.endpoints import settings as settings_routes
from promptdesk.core.config import Settings, get_settings
from promptdesk.core.logging import setup_logging
from promptdesk.database.session import build_engine, build_session_factory, create_schema
from promptdesk.middleware.error_handling import ErrorHandlingMiddleware, register_exception_handlers
from promptdesk.middleware.logging import RequestLoggingMiddleware
from promptdesk.services.file_storage import FileStorage

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, rng: Optional[random.Random] = None) -> FastAPI:
    """
    Build the API application.

    The database engine and session factory are created when the app starts
    and disposed when it stops; both live on ``app.state``. ``rng`` drives tag
    color picks and may be seeded for reproducible colors.
    """
    settings = settings or get_settings()
    setup_logging(log_level=settings.log_level, log_dir=settings.log_dir, console=settings.log_to_console)

    storage = FileStorage(settings.uploads_dir)
    storage.initialize()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(settings)
        if settings.auto_create_schema:
            await create_schema(engine)
        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)
        logger.info(f"{settings.app_name} {settings.app_version} started")
        try:
            yield
        finally:
            await engine.dispose()
            logger.info("Database engine disposed")

    app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    app.state.file_storage = storage
    app.state.rng = rng or random.Random()

    # Add middleware (order matters - last added runs first)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router, prefix="/api")
    app.include_router(prompts.router, prefix="/api")
    app.include_router(tags.router, prefix="/api")
    app.include_router(versions.router, prefix="/api")
    app.include_router(executions.router, prefix="/api")
    app.include_router(search.router, prefix="/api")
    app.include_router(settings_routes.router, prefix="/api")
    app.include_router(images.router, prefix="/api")

    # Stored image paths are "uploads/..." relative to the server root
    app.mount(f"/{storage.url_prefix}", StaticFiles(directory=str(storage.root)), name="uploads")

    return app
