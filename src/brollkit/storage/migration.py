"""Migrate externally-hosted stock URLs into local storage."""

import logging
import time
from collections.abc import Callable, Sequence

from brollkit.models.errors import StorageError
from brollkit.models.stock import MigrationResult, StockSource
from brollkit.storage.client import StorageClient, failure_kind_of

logger = logging.getLogger(__name__)

STOCK_URL_MARKERS = ("pexels.com", "pixabay.com", "videos.pexels.com", "cdn.pixabay.com")

# (current, total, url-or-status message)
MigrationProgressCallback = Callable[[int, int, str], None]


def is_external_stock_url(url: str) -> bool:
    """Check if a URL points at a stock footage provider."""
    return any(marker in url for marker in STOCK_URL_MARKERS)


def infer_stock_source(url: str) -> StockSource:
    """Guess the provider of a stock URL; anything not Pexels is Pixabay."""
    return StockSource.PEXELS if "pexels" in url else StockSource.PIXABAY


def identity_map(urls: Sequence[str]) -> dict[str, str]:
    return {url: url for url in urls}


class UrlMigrator:
    """Replaces stock provider URLs with locally persisted copies.

    Migration is all-or-nothing: the returned mapping always covers every
    input URL, and on any failure every URL maps to itself.
    """

    def __init__(self, client: StorageClient):
        self.client = client

    def migrate(
        self,
        urls: Sequence[str],
        owner_id: str,
        on_progress: MigrationProgressCallback | None = None,
    ) -> dict[str, str]:
        """Return an old -> new URL mapping for ``urls``."""
        return self.migrate_with_report(urls, owner_id, on_progress).url_map

    def migrate_with_report(
        self,
        urls: Sequence[str],
        owner_id: str,
        on_progress: MigrationProgressCallback | None = None,
    ) -> MigrationResult:
        """Like :meth:`migrate` but also reports how the mapping was produced."""
        urls = list(urls)

        if not self.client.is_available():
            logger.warning("Storage backend not available - cannot migrate")
            return MigrationResult(url_map=identity_map(urls), degraded=True)

        external = [url for url in urls if is_external_stock_url(url)]
        if not external:
            return MigrationResult()

        stamp = int(time.time() * 1000)
        videos = [
            {"url": url, "source": infer_stock_source(url).value, "videoId": f"migrated_{i}_{stamp}"}
            for i, url in enumerate(external)
        ]

        try:
            server_map = self.client.download_batch(videos, owner_id)
        except StorageError as e:
            logger.error(f"Migration failed, keeping original URLs: {e.message}")
            return MigrationResult(
                url_map=identity_map(urls),
                external_count=len(external),
                error=e.message,
                failure_kind=failure_kind_of(e),
            )

        url_map = dict(server_map)
        for url in urls:
            url_map.setdefault(url, url)

        if on_progress:
            on_progress(len(external), len(external), "Complete")

        migrated = sum(1 for url in external if url_map[url] != url)
        logger.info(f"Migrated {migrated}/{len(external)} stock URLs for {owner_id}")
        return MigrationResult(url_map=url_map, migrated=True, external_count=len(external))
