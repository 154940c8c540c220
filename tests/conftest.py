"""Shared test fixtures and a fake persistence backend."""

import json

import httpx
import pytest

from brollkit.config import Settings
from brollkit.models.stock import StockAssetReference, StockSource
from brollkit.pipeline.registry import TaskRegistry
from brollkit.storage.client import StorageClient

STORAGE_BASE = "http://storage.test"


class FakeBackend:
    """In-process stand-in for the persistence backend, served via MockTransport."""

    def __init__(self):
        self.healthy = True
        self.health_error: Exception | None = None
        self.post_error: Exception | None = None
        self.download_status = 200
        self.download_body: object = {"success": True, "localUrl": "/broll/stock_pexels_123_1.mp4"}
        self.batch_status = 200
        self.batch_body: object | None = None
        self.undecodable_paths: set[str] = set()
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.undecodable_paths:
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip")
        if path == "/api/health":
            if self.health_error:
                raise self.health_error
            return httpx.Response(200 if self.healthy else 503, json={"status": "ok"})

        if self.post_error:
            raise self.post_error
        payload = json.loads(request.content)
        if path == "/api/download-stock-video":
            return httpx.Response(self.download_status, json=self.download_body)
        if path == "/api/download-batch":
            body = self.batch_body
            if body is None:
                body = {
                    "success": True,
                    "urlMap": {v["url"]: f"/broll/{v['videoId']}.mp4" for v in payload["videos"]},
                }
            return httpx.Response(self.batch_status, json=body)
        return httpx.Response(404, json={"error": "not found"})

    def posted(self, path: str) -> list[dict]:
        return [
            json.loads(r.content) for r in self.requests if r.url.path == path and r.method == "POST"
        ]


@pytest.fixture
def settings(tmp_path):
    return Settings(broll_dir=tmp_path / "broll", storage_api_base=STORAGE_BASE)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def storage_client(backend, settings):
    client = StorageClient(settings=settings, transport=httpx.MockTransport(backend.handler))
    yield client
    client.close()


@pytest.fixture
def registry():
    return TaskRegistry()


@pytest.fixture
def pexels_ref():
    return StockAssetReference(
        id="abc-123!",
        download_url="https://videos.pexels.com/video-files/123/abc.mp4",
        preview_url="https://images.pexels.com/videos/123/preview.jpg",
        duration=12.5,
        source=StockSource.PEXELS,
        author="Jane Doe",
    )
