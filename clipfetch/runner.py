"""
runner — Runs one yt-dlp process and turns its output into events.

``stream_download`` is an async generator: the caller iterates it and relays
each event. Closing or cancelling the iteration (e.g. the HTTP client went
away) terminates the subprocess.
"""
from __future__ import annotations
import asyncio
from pathlib import Path
from typing import AsyncIterator
from urllib.parse import quote

import structlog

from . import events
from .binaries import ffmpeg_location, yt_dlp_cmd
from .command import build_ytdlp_args
from .config import Config
from .events import Event
from .presets import DownloadOptions
from .progress import ProgressParser, is_error, is_warning

log = structlog.get_logger()

FAILED_MESSAGE = "Download failed. Check if the URL is valid."
SPAWN_FAILED_MESSAGE = "Failed to start download process."

# StreamReader line limit; yt-dlp JSON dumps can exceed the 64 KiB default
_LINE_LIMIT = 1024 * 1024


def public_url(cfg: Config, filename: str) -> str:
    return f"{cfg.public_prefix.rstrip('/')}/{quote(filename)}"


async def _pump(stream: asyncio.StreamReader, source: str, queue: asyncio.Queue):
    try:
        while True:
            try:
                raw = await stream.readline()
            except ValueError as e:
                # line over the reader limit is dropped; later lines still matter
                log.warning("yt-dlp_output_overflow", source=source, error=str(e))
                continue
            if not raw:
                break
            await queue.put((source, raw.decode("utf-8", errors="replace")))
    finally:
        await queue.put((source, None))


async def _terminate(proc: asyncio.subprocess.Process, grace: float):
    log.info("downloader_terminate", pid=proc.pid)
    try:
        proc.terminate()
    except ProcessLookupError:
        return
    try:
        await asyncio.wait_for(proc.wait(), timeout=grace)
    except asyncio.TimeoutError:
        log.warning("downloader_kill", pid=proc.pid)
        proc.kill()
        await proc.wait()


async def stream_download(options: DownloadOptions, cfg: Config) -> AsyncIterator[Event]:
    download_dir = Path(cfg.download_dir)
    download_dir.mkdir(parents=True, exist_ok=True)

    yield events.progress("Starting", 0, "Initializing download...")

    cmd = yt_dlp_cmd(cfg)
    if not cmd:
        log.error("spawn_failed", url=options.url, error="yt-dlp is not installed or importable")
        yield events.error(SPAWN_FAILED_MESSAGE)
        return

    argv = cmd + build_ytdlp_args(options, cfg, download_dir, ffmpeg_location(cfg))
    log.info("yt-dlp_command", command=" ".join(argv))

    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=_LINE_LIMIT,
        )
    except OSError as e:
        log.error("spawn_failed", url=options.url, error=str(e))
        yield events.error(SPAWN_FAILED_MESSAGE)
        return

    parser = ProgressParser()
    queue: asyncio.Queue = asyncio.Queue()
    readers = [
        asyncio.create_task(_pump(proc.stdout, "stdout", queue)),
        asyncio.create_task(_pump(proc.stderr, "stderr", queue)),
    ]
    last_error: str | None = None

    try:
        open_streams = len(readers)
        while open_streams:
            source, line = await queue.get()
            if line is None:
                open_streams -= 1
                continue
            if source == "stdout":
                for event in parser.feed(line):
                    yield event
                continue

            text = line.strip()
            if not text:
                continue
            log.warning("yt-dlp_stderr", pid=proc.pid, line=text)
            if is_error(text):
                last_error = text
            if is_warning(text):
                yield events.warning(text)
        code = await proc.wait()
    finally:
        for t in readers:
            t.cancel()
        if proc.returncode is None:
            await _terminate(proc, cfg.terminate_grace)

    if code == 0 and parser.filename:
        filename = Path(parser.filename).name
        log.info("download_complete", url=options.url, file=filename)
        yield events.progress("Complete", 100, "Download complete!")
        yield events.complete(filename, public_url(cfg, filename))
    else:
        log.error("download_failed", url=options.url, returncode=code, error=last_error)
        yield events.error(FAILED_MESSAGE, last_error)
