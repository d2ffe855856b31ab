"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.domain.entities import CONTACT_SCHEMA, USER_SCHEMA
from app.infrastructure.database import async_session_factory, engine
from app.infrastructure.database.session import ensure_sqlite_directory
from app.infrastructure.dependencies import build_record_store
from app.infrastructure.logging.log_config import setup_logging
from app.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: prepare storage, build and initialize record stores."""
    settings = get_settings()
    setup_logging()

    # 1. Make sure a file-backed SQLite database has a directory to live in
    ensure_sqlite_directory(settings.database_url)

    # 2. One store per record kind; stores create their tables on initialize()
    app.state.contact_store = build_record_store(CONTACT_SCHEMA, async_session_factory)
    app.state.user_store = build_record_store(USER_SCHEMA, async_session_factory)

    for store in (app.state.contact_store, app.state.user_store):
        try:
            await store.initialize()
        except Exception:
            # Store stays uninitialized; its endpoints answer 503
            logger.exception("Failed to initialize record store '%s'", store.schema.name)

    yield

    # Shutdown
    await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=3000,
        reload=True,
    )
