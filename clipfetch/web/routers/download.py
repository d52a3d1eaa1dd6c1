"""
routers/download — Starts a download and streams its progress as SSE.
"""
from __future__ import annotations
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse
import structlog

from ...config import Config
from ...runner import stream_download
from ..deps import get_config
from ..schemas import DownloadRequest

log = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["download"])


@router.post("/download-stream")
async def download_stream(body: DownloadRequest, cfg: Config = Depends(get_config)):
    if not (body.url or "").strip():
        return JSONResponse(status_code=400, content={"error": "URL is required"})

    options = body.to_options()
    log.info("download_requested", url=options.url, quality=options.quality.value,
             format=options.output_ext, subtitles=options.subtitles)

    async def _generate():
        # sse-starlette cancels this generator when the client disconnects,
        # which in turn terminates the yt-dlp process
        async for event in stream_download(options, cfg):
            yield {"data": event.to_sse()}

    return EventSourceResponse(
        _generate(),
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        sep="\n",
    )
