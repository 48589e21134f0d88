"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from product_console.config import get_settings
from product_console.infrastructure.dependencies import get_session_registry
from product_console.infrastructure.logging.log_config import setup_logging
from product_console.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging, drop live sessions on shutdown."""
    settings = get_settings()
    setup_logging()
    logger.info(
        "%s %s starting (env=%s, remote API=%s)",
        settings.app_title,
        settings.app_version,
        settings.app_env,
        settings.api_base_url,
    )

    yield

    # Shutdown
    closed = get_session_registry().close_all()
    if closed:
        logger.info("Abandoned %d open edit session(s) on shutdown", closed)


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
        "product_console.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
