"""FastAPI application factory for the local stock video backend."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from brollkit import __version__
from brollkit.api.middleware import broll_error_handler
from brollkit.api.routes import stock, tasks
from brollkit.config import Settings, get_settings
from brollkit.logging_config import configure_logging
from brollkit.models.errors import BrollError
from brollkit.pipeline.registry import TaskRegistry
from brollkit.storage.downloader import VideoDownloader


def create_app(
    settings: Settings | None = None,
    downloader: VideoDownloader | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="brollkit",
        description="Stock video storage and B-roll generation task tracking",
        version=__version__,
    )
    app.state.settings = settings
    app.state.registry = TaskRegistry()
    app.state.downloader = downloader or VideoDownloader(
        target_dir=settings.broll_dir, timeout=settings.download_timeout_seconds
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Error handlers
    app.add_exception_handler(BrollError, broll_error_handler)

    # Routes
    app.include_router(stock.router)
    app.include_router(tasks.router)

    # Saved videos are served under the public prefix; mount AFTER API routes
    settings.broll_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.public_url_prefix,
        StaticFiles(directory=settings.broll_dir),
        name="broll",
    )

    return app
