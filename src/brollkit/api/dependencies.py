"""Dependency injection providers for FastAPI.

Per-application objects live on ``app.state`` so that separate apps (and
test clients) never share a registry.
"""

from fastapi import Request

from brollkit.config import Settings
from brollkit.pipeline.registry import TaskRegistry
from brollkit.storage.downloader import VideoDownloader


def get_registry(request: Request) -> TaskRegistry:
    return request.app.state.registry


def get_downloader(request: Request) -> VideoDownloader:
    return request.app.state.downloader


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
