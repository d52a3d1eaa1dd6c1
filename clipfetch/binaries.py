"""
binaries — Locate the external downloader and transcoder.
"""
from __future__ import annotations
import shlex
import shutil
import sys

from .config import Config


def _which(cmd: str) -> str | None:
    return shutil.which(cmd)


def yt_dlp_cmd(cfg: Config) -> list[str] | None:
    if cfg.ytdlp_cmd:
        return shlex.split(cfg.ytdlp_cmd)
    exe = _which("yt-dlp") or _which("yt_dlp")
    if exe:
        return [exe]
    # fallback to python -m if module is available
    try:
        import yt_dlp  # noqa
        return [sys.executable, "-m", "yt_dlp"]
    except ImportError:
        return None


def ffmpeg_location(cfg: Config) -> str | None:
    return cfg.ffmpeg_location or _which("ffmpeg")
