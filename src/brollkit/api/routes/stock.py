"""Stock video storage endpoints.

These answer in the plain ``{success, error}`` shape the storage client
expects rather than ErrorResponse.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from brollkit.api.dependencies import get_app_settings, get_downloader
from brollkit.config import Settings
from brollkit.models.errors import DownloadError
from brollkit.storage.downloader import VideoDownloader
from brollkit.storage.retrieval import generate_filename

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["stock"])


class DownloadRequest(BaseModel):
    model_config = {"populate_by_name": True}

    url: str | None = None
    source: str | None = None
    video_id: str | None = Field(default=None, alias="videoId")
    project_id: str | None = Field(default=None, alias="projectId")


class BatchVideo(BaseModel):
    model_config = {"populate_by_name": True}

    url: str
    source: str | None = None
    video_id: str | None = Field(default=None, alias="videoId")


class BatchRequest(BaseModel):
    model_config = {"populate_by_name": True}

    videos: list[BatchVideo] | None = None
    project_id: str | None = Field(default=None, alias="projectId")


@router.get("/health")
async def health(settings: Settings = Depends(get_app_settings)):
    """Liveness check used by the storage client."""
    return {"status": "ok", "stockVideoDir": str(settings.broll_dir)}


@router.post("/download-stock-video")
async def download_stock_video(
    request: DownloadRequest,
    downloader: VideoDownloader = Depends(get_downloader),
    settings: Settings = Depends(get_app_settings),
):
    """Download a stock video from an external URL and save it locally."""
    if not request.url:
        return JSONResponse(status_code=400, content={"error": "URL is required"})

    filename = generate_filename(source=request.source, asset_id=request.video_id)
    try:
        await downloader.download(request.url, filename)
    except (DownloadError, OSError) as e:
        logger.error(f"Download failed for {request.url}: {e}")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    local_url = f"{settings.public_url_prefix}/{filename}"
    logger.info(f"Downloaded successfully: {local_url}")
    return {"success": True, "localUrl": local_url, "filename": filename}


@router.post("/download-batch")
async def download_batch(
    request: BatchRequest,
    downloader: VideoDownloader = Depends(get_downloader),
    settings: Settings = Depends(get_app_settings),
):
    """Download several stock videos; failed items keep their original URL."""
    if request.videos is None:
        return JSONResponse(status_code=400, content={"error": "Videos array is required"})

    total = len(request.videos)
    url_map: dict[str, str] = {}
    for i, video in enumerate(request.videos):
        filename = generate_filename(source=video.source, asset_id=video.video_id or f"batch_{i}")
        try:
            await downloader.download(video.url, filename)
        except (DownloadError, OSError) as e:
            logger.warning(f"[{i + 1}/{total}] Failed: {video.url} ({e})")
            url_map[video.url] = video.url
            continue
        url_map[video.url] = f"{settings.public_url_prefix}/{filename}"
        logger.info(f"[{i + 1}/{total}] Saved {video.url} -> {url_map[video.url]}")

    return {"success": True, "urlMap": url_map}
