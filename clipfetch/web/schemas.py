"""
schemas — Pydantic request/response models for the API.
"""
from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field

from ..presets import DownloadOptions, OutputFormat, Quality


# --- Downloads ---

class DownloadRequest(BaseModel):
    url: str | None = None
    quality: Quality = Quality.BEST
    custom_filename: str | None = Field(None, alias="customFilename")
    subtitles: bool = False
    output_format: OutputFormat = Field(OutputFormat.MP4, alias="outputFormat")

    class Config:
        populate_by_name = True

    def to_options(self) -> DownloadOptions:
        return DownloadOptions(
            url=(self.url or "").strip(),
            quality=self.quality,
            custom_filename=self.custom_filename or None,
            subtitles=self.subtitles,
            output_format=self.output_format,
        )


class DownloadedFile(BaseModel):
    filename: str
    url: str
    size_bytes: int
    modified_at: datetime


# --- System ---

class HealthResponse(BaseModel):
    status: str
    ytdlp_available: bool
    ffmpeg_available: bool
