"""Retrieve remote assets into local storage, falling back to the remote URL."""

import logging
import re
import time
from collections.abc import Callable

from brollkit.models.errors import StorageError
from brollkit.models.stock import DownloadProgress, RetrievalOutcome, StockAssetReference
from brollkit.storage.client import StorageClient, failure_kind_of

logger = logging.getLogger(__name__)

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9]")

ProgressCallback = Callable[[DownloadProgress], None]


def sanitize_id(asset_id: str) -> str:
    """Strip every character outside ``[A-Za-z0-9]``."""
    return _UNSAFE_ID_CHARS.sub("", str(asset_id))


def generate_filename(
    ref: StockAssetReference | None = None,
    timestamp_ms: int | None = None,
    *,
    source: str | None = None,
    asset_id: str | None = None,
) -> str:
    """Build ``stock_{source}_{sanitizedId}_{timestamp}.mp4`` for a stock asset.

    The backend calls this with bare ``source``/``asset_id`` values from the
    request body; missing values fall back to ``unknown``.
    """
    if ref is not None:
        source = ref.source.value
        asset_id = ref.id
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    sanitized = sanitize_id(asset_id or "unknown") or "unknown"
    return f"stock_{source or 'unknown'}_{sanitized}_{timestamp_ms}.mp4"


class AssetRetriever:
    """Saves remote assets through the persistence backend.

    Holds no state about the assets it saves and never touches tasks.
    """

    def __init__(self, client: StorageClient):
        self.client = client

    def retrieve_and_save(
        self,
        ref: StockAssetReference,
        owner_id: str,
        on_progress: ProgressCallback | None = None,
    ) -> RetrievalOutcome:
        """Save a stock asset locally.

        When the backend is unreachable the remote ``download_url`` is
        returned as a degraded success.
        """
        return self.save_remote_asset(
            ref.download_url, ref.source.value, ref.id, owner_id, on_progress
        )

    def save_remote_asset(
        self,
        url: str,
        source: str,
        asset_id: str,
        owner_id: str,
        on_progress: ProgressCallback | None = None,
    ) -> RetrievalOutcome:
        if not self.client.is_available():
            logger.warning(f"Storage backend not available, using external URL directly: {url}")
            return RetrievalOutcome.ok(url, degraded=True)

        try:
            local_url = self.client.download_stock_video(url, source, asset_id, owner_id)
        except StorageError as e:
            logger.warning(f"Failed to save asset {asset_id}: {e.message}")
            return RetrievalOutcome.failed(e.message, failure_kind_of(e))

        logger.info(f"Saved asset {asset_id} to {local_url}")
        if on_progress:
            on_progress(DownloadProgress(loaded=1, total=1, percent=100.0))
        return RetrievalOutcome.ok(local_url)
