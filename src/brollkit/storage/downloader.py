"""Stream remote stock videos into the local B-roll directory."""

import logging
from pathlib import Path

import httpx

from brollkit.config import get_settings
from brollkit.models.errors import DownloadError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192


class VideoDownloader:
    """Downloads remote files into ``target_dir``, removing partial files on failure."""

    def __init__(
        self,
        target_dir: Path | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.target_dir = target_dir or settings.broll_dir
        self.timeout = timeout if timeout is not None else settings.download_timeout_seconds
        self.transport = transport

    async def download(self, url: str, filename: str) -> Path:
        """Download ``url`` to ``target_dir/filename`` and return the path."""
        self.target_dir.mkdir(parents=True, exist_ok=True)
        output = self.target_dir / filename

        logger.info(f"Downloading {url} -> {output}")
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True, transport=self.transport
            ) as client:
                async with client.stream("GET", url) as response:
                    if response.status_code != 200:
                        raise DownloadError(
                            f"HTTP {response.status_code}",
                            details={"url": url, "status_code": response.status_code},
                        )
                    with open(output, "wb") as f:
                        async for chunk in response.aiter_bytes(chunk_size=_CHUNK_SIZE):
                            f.write(chunk)
        except httpx.HTTPError as e:
            output.unlink(missing_ok=True)
            raise DownloadError(f"Download failed for {url}: {e}", details={"url": url}) from e
        except (DownloadError, OSError):
            output.unlink(missing_ok=True)
            raise

        logger.info(f"Downloaded {output} ({output.stat().st_size / 1024:.1f} KB)")
        return output
