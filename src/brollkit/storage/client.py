"""HTTP client for the local stock video persistence backend."""

import logging
from typing import Any, NamedTuple

import httpx

from brollkit.config import Settings, get_settings
from brollkit.models.errors import (
    MalformedResponseError,
    StorageConnectionError,
    StorageError,
    StorageHTTPError,
    StorageTimeoutError,
)
from brollkit.models.stock import FailureKind

logger = logging.getLogger(__name__)

HEALTH_PATH = "/api/health"
DOWNLOAD_PATH = "/api/download-stock-video"
BATCH_PATH = "/api/download-batch"


class HealthCheck(NamedTuple):
    available: bool
    failure_kind: FailureKind | None = None
    detail: str = ""


class StorageClient:
    """Synchronous client for the persistence backend.

    Usage::

        with StorageClient() as client:
            if client.is_available():
                local_url = client.download_stock_video(url, "pexels", "123", "proj")
    """

    def __init__(
        self,
        base_url: str | None = None,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = (base_url or self.settings.storage_api_base).rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(
                self.settings.request_timeout_seconds,
                connect=self.settings.connect_timeout_seconds,
            ),
            transport=transport,
        )

    def __enter__(self) -> "StorageClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # Availability

    def check_health(self) -> HealthCheck:
        """Probe the health endpoint once, bounded by the health timeout."""
        try:
            response = self._client.get(
                HEALTH_PATH, timeout=self.settings.health_timeout_seconds
            )
        except httpx.TimeoutException as e:
            return HealthCheck(False, FailureKind.TIMEOUT, str(e))
        except httpx.DecodingError as e:
            return HealthCheck(False, FailureKind.MALFORMED_RESPONSE, str(e))
        except httpx.HTTPError as e:
            return HealthCheck(False, FailureKind.CONNECTION, str(e))

        if response.is_success:
            return HealthCheck(True)
        return HealthCheck(False, FailureKind.HTTP_STATUS, f"HTTP {response.status_code}")

    def is_available(self) -> bool:
        """True only when the backend answers the health check with 2xx."""
        health = self.check_health()
        if not health.available:
            logger.debug(f"Storage backend unavailable ({health.failure_kind}): {health.detail}")
        return health.available

    # Downloads

    def download_stock_video(self, url: str, source: str, video_id: str, project_id: str) -> str:
        """Ask the backend to save ``url`` locally and return the local URL."""
        data = self._post(
            DOWNLOAD_PATH,
            {"url": url, "source": source, "videoId": video_id, "projectId": project_id},
            default_error="Download failed",
        )
        local_url = data.get("localUrl")
        if not isinstance(local_url, str) or not local_url:
            raise MalformedResponseError(f"No localUrl in response: {data}", details={"body": data})
        return local_url

    def download_batch(self, videos: list[dict[str, str]], project_id: str) -> dict[str, str]:
        """Save several remote videos in one call; returns the old -> new URL map."""
        data = self._post(
            BATCH_PATH,
            {"videos": videos, "projectId": project_id},
            default_error="Batch download failed",
            timeout=self.settings.batch_timeout_seconds,
        )
        url_map = data.get("urlMap")
        if not isinstance(url_map, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in url_map.items()
        ):
            raise MalformedResponseError(f"Invalid urlMap in response: {data}", details={"body": data})
        return url_map

    def _post(
        self,
        path: str,
        payload: dict[str, Any],
        default_error: str,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"json": payload}
        if timeout is not None:
            kwargs["timeout"] = httpx.Timeout(timeout, connect=self.settings.connect_timeout_seconds)
        try:
            response = self._client.post(path, **kwargs)
        except httpx.TimeoutException as e:
            raise StorageTimeoutError(f"Request timeout: {e}") from e
        except httpx.DecodingError as e:
            raise MalformedResponseError(f"Undecodable response from {path}: {e}") from e
        except httpx.HTTPError as e:
            raise StorageConnectionError(f"Connection failed: {e}") from e

        body = _json_body(response)
        if not response.is_success:
            message = default_error
            if isinstance(body, dict) and body.get("error"):
                message = str(body["error"])
            raise StorageHTTPError(message, status_code=response.status_code)
        if not isinstance(body, dict):
            raise MalformedResponseError(
                f"Expected a JSON object from {path}", details={"body": response.text[:500]}
            )
        return body


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def failure_kind_of(exc: StorageError) -> FailureKind | None:
    """Map a storage exception to its FailureKind, if it has a specific one."""
    try:
        return FailureKind(exc.kind)
    except ValueError:
        return None
