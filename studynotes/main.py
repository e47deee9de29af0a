"""
FastAPI Application Entry Point.

This is the main entry point for the Study Notes backend application.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studynotes.api import health
from studynotes.api.v1 import router as api_v1_router
from studynotes.core.concurrency import shutdown_pools
from studynotes.core.config import get_app_config, get_upload_dir
from studynotes.core.database import create_tables, dispose_engine
from studynotes.core.exception_handlers import register_exception_handlers
from studynotes.core.logging import get_logger, log_with_source, setup_logging
from studynotes.core.middleware import RequestContextMiddleware

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging()

    upload_dir = get_upload_dir()
    upload_dir.mkdir(parents=True, exist_ok=True)

    if app_config.database.create_tables:
        await create_tables()

    log_with_source(
        logger,
        "internal",
        "info",
        "Application starting",
        app_name=app_config.application.name,
        env=app_config.application.environment,
        upload_dir=str(upload_dir),
    )
    yield
    log_with_source(logger, "internal", "info", "Application shutting down")
    await dispose_engine()
    await shutdown_pools()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = get_app_config()
    app_settings = app_config.application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_v1_router, prefix=app_settings.api_prefix)

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn studynotes.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
