"""FastAPI application entry point."""

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mjleague import __version__
from mjleague.api.router import api_router
from mjleague.db.session import Database
from mjleague.settings import Settings, get_settings


def setup_logging() -> None:
    """Configure logging for the application."""
    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Set specific loggers
    logging.getLogger("mjleague").setLevel(logging.DEBUG)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)


logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use (defaults to the cached settings)

    Returns:
        Configured FastAPI app; its Database opens in the lifespan
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown."""
        # Startup
        logger.info(
            f"Starting league server (dev_mode={settings.dev_mode}, "
            f"production={settings.production})"
        )
        database = Database(settings.database_url, echo=settings.database_echo)
        await database.open()
        app.state.database = database

        yield

        # Shutdown
        logger.info("Shutting down league server")
        await database.close()

    app = FastAPI(
        title="Mahjong League",
        description="Four-player mahjong league scorekeeping API",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    cors_origins = (
        ["http://localhost:3000", "http://127.0.0.1:3000"]
        if settings.dev_mode
        else [settings.frontend_url]
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": "Mahjong League API", "version": __version__}

    # Include API routers
    app.include_router(api_router, prefix="/api")

    # Routes resolve settings through get_settings; pin them to this app
    app.dependency_overrides[get_settings] = lambda: settings

    return app


def main() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    setup_logging()
    uvicorn.run("mjleague.main:create_app", factory=True, host="0.0.0.0", port=8000)
