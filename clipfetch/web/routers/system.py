"""
routers/system — Health check and listing of downloaded files.
"""
from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends

from ...binaries import ffmpeg_location, yt_dlp_cmd
from ...config import Config
from ...runner import public_url
from ..deps import get_config
from ..schemas import DownloadedFile, HealthResponse

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health", response_model=HealthResponse)
def health(cfg: Config = Depends(get_config)):
    return HealthResponse(
        status="ok",
        ytdlp_available=yt_dlp_cmd(cfg) is not None,
        ffmpeg_available=ffmpeg_location(cfg) is not None,
    )


@router.get("/downloads", response_model=list[DownloadedFile])
def list_downloads(cfg: Config = Depends(get_config)):
    """Files in the download directory, newest first."""
    download_dir = Path(cfg.download_dir)
    if not download_dir.is_dir():
        return []
    files = []
    for p in download_dir.iterdir():
        if not p.is_file() or p.name.startswith("."):
            continue
        st = p.stat()
        files.append(DownloadedFile(
            filename=p.name,
            url=public_url(cfg, p.name),
            size_bytes=st.st_size,
            modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        ))
    files.sort(key=lambda f: f.modified_at, reverse=True)
    return files
