"""
config — Loads config.yaml with env var overrides.

Precedence: env vars > config.yaml > defaults
"""
from __future__ import annotations
import os
from pathlib import Path
from dataclasses import dataclass
import yaml


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 13; SM-G991B) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Mobile Safari/537.36"
)


@dataclass
class Config:
    # Web server
    web_host: str = "0.0.0.0"
    web_port: int = 3000

    # Output
    download_dir: str = "public/downloads"
    public_prefix: str = "/downloads"  # URL path the download dir is served under

    # External tools
    ytdlp_cmd: str = ""        # empty = yt-dlp on PATH, else python -m yt_dlp
    ffmpeg_location: str = ""  # empty = ffmpeg on PATH, else let yt-dlp look

    # yt-dlp behaviour
    subtitle_lang: str = "en"
    retries: int = 10
    fragment_retries: int = 10
    extractor_retries: int = 10
    sleep_requests: float = 1.5
    sleep_interval: float = 3.0
    max_sleep_interval: float = 6.0
    js_runtime: str = "node"
    extractor_args: str = "youtube:player_client=android,web;formats=missing_pot"
    user_agent: str = DEFAULT_USER_AGENT
    extra_args: str = ""  # appended verbatim (shell-split) before the URL

    # Seconds to wait after SIGTERM before killing the downloader
    terminate_grace: float = 5.0

    log_level: str = "INFO"


def load_config(config_path: str | Path | None = None) -> Config:
    """Load config from YAML file, then override with env vars."""
    cfg = Config()

    # 1. Load from YAML if available
    if config_path is None:
        config_path = os.environ.get("CLIPFETCH_CONFIG", "config.yaml")
    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        for key, value in data.items():
            key_norm = key.replace("-", "_")
            if hasattr(cfg, key_norm) and value is not None:
                setattr(cfg, key_norm, value)

    # 2. Override with env vars (CLIPFETCH_ prefix)
    env_map = {
        "CLIPFETCH_WEB_HOST": "web_host",
        "CLIPFETCH_WEB_PORT": "web_port",
        "CLIPFETCH_DOWNLOAD_DIR": "download_dir",
        "CLIPFETCH_PUBLIC_PREFIX": "public_prefix",
        "CLIPFETCH_YTDLP_CMD": "ytdlp_cmd",
        "CLIPFETCH_FFMPEG_LOCATION": "ffmpeg_location",
        "CLIPFETCH_SUBTITLE_LANG": "subtitle_lang",
        "CLIPFETCH_RETRIES": "retries",
        "CLIPFETCH_FRAGMENT_RETRIES": "fragment_retries",
        "CLIPFETCH_EXTRACTOR_RETRIES": "extractor_retries",
        "CLIPFETCH_SLEEP_REQUESTS": "sleep_requests",
        "CLIPFETCH_SLEEP_INTERVAL": "sleep_interval",
        "CLIPFETCH_MAX_SLEEP_INTERVAL": "max_sleep_interval",
        "CLIPFETCH_JS_RUNTIME": "js_runtime",
        "CLIPFETCH_EXTRACTOR_ARGS": "extractor_args",
        "CLIPFETCH_USER_AGENT": "user_agent",
        "CLIPFETCH_EXTRA_ARGS": "extra_args",
        "CLIPFETCH_TERMINATE_GRACE": "terminate_grace",
        "CLIPFETCH_LOG_LEVEL": "log_level",
    }
    for env_key, attr in env_map.items():
        val = os.environ.get(env_key)
        if val is not None:
            field_type = type(getattr(cfg, attr))
            if field_type == int:
                setattr(cfg, attr, int(val))
            elif field_type == float:
                setattr(cfg, attr, float(val))
            else:
                setattr(cfg, attr, val)

    return cfg
