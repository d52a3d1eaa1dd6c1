"""
command — Builds the yt-dlp command line for a download request.
"""
from __future__ import annotations
import re
import shlex
from pathlib import Path

from .config import Config
from .presets import DownloadOptions

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*]')

# Sent with every request, on top of the user agent
EXTRA_HEADERS = (
    "Accept-Language:en-US,en;q=0.9",
    "Accept:text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
)


def sanitize_filename(name: str) -> str:
    """Replace path-unsafe characters with underscores."""
    return _UNSAFE_CHARS.sub("_", name).strip()


def output_template(options: DownloadOptions, download_dir: Path) -> str:
    suffix = options.preset.suffix
    custom = sanitize_filename(options.custom_filename or "")
    base = f"{custom}{suffix}" if custom else f"%(title)s{suffix}"
    ext = "mp3" if options.is_audio else "%(ext)s"
    return str(Path(download_dir) / f"{base}.{ext}")


def _network_args(cfg: Config) -> list[str]:
    args = [
        "--retries", str(cfg.retries),
        "--fragment-retries", str(cfg.fragment_retries),
        "--extractor-retries", str(cfg.extractor_retries),
        "--sleep-requests", str(cfg.sleep_requests),
        "--sleep-interval", str(cfg.sleep_interval),
        "--max-sleep-interval", str(cfg.max_sleep_interval),
    ]
    if cfg.js_runtime:
        args += ["--js-runtimes", cfg.js_runtime]
    if cfg.extractor_args:
        args += ["--extractor-args", cfg.extractor_args]
    if cfg.user_agent:
        args += ["--user-agent", cfg.user_agent]
    for header in EXTRA_HEADERS:
        args += ["--add-header", header]
    return args


def build_ytdlp_args(
    options: DownloadOptions,
    cfg: Config,
    download_dir: Path,
    ffmpeg: str | None = None,
) -> list[str]:
    """
    Arguments for one yt-dlp run, without the executable prefix.

    The URL is always last. ``--print filename`` makes yt-dlp echo the final
    path on stdout, which is how the output file is found afterwards.
    """
    args = ["--newline", "--progress", "--no-warnings"]

    if options.is_audio:
        args += ["-x", "--audio-format", "mp3", "--audio-quality", "0"]
    else:
        args += [
            "-f", options.preset.format,
            "--merge-output-format", options.output_format.value,
        ]

    if ffmpeg:
        args += ["--ffmpeg-location", ffmpeg]

    args += ["-o", output_template(options, download_dir), "--no-playlist"]

    if not options.is_audio:
        args += ["--postprocessor-args", options.preset.postprocessor_args]

    args += [
        "--restrict-filenames",
        "--print", "filename",
        "--no-simulate",
        "--force-overwrites",
        "--no-cache-dir",
    ]
    args += _network_args(cfg)

    if options.subtitles:
        args += ["--write-subs", "--sub-lang", cfg.subtitle_lang, "--embed-subs"]

    if cfg.extra_args:
        args += shlex.split(cfg.extra_args)

    args.append(options.url)
    return args
