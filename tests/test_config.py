from __future__ import annotations

import pytest

from clipfetch.config import Config, load_config


def test_defaults_when_no_file(tmp_path, monkeypatch):
    monkeypatch.delenv("CLIPFETCH_WEB_PORT", raising=False)
    cfg = load_config(tmp_path / "absent.yaml")
    assert cfg == Config()
    assert cfg.download_dir == "public/downloads"
    assert cfg.public_prefix == "/downloads"


def test_yaml_values_with_dashed_keys(tmp_path, monkeypatch):
    monkeypatch.delenv("CLIPFETCH_DOWNLOAD_DIR", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(
        "download-dir: /srv/media\n"
        "web_port: 8088\n"
        "subtitle_lang: fr\n"
        "unknown_key: ignored\n"
        "user_agent:\n"
    )
    cfg = load_config(path)
    assert cfg.download_dir == "/srv/media"
    assert cfg.web_port == 8088
    assert cfg.subtitle_lang == "fr"
    assert cfg.user_agent == Config().user_agent
    assert not hasattr(cfg, "unknown_key")


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("web_port: 8088\nsleep_requests: 0.5\n")
    monkeypatch.setenv("CLIPFETCH_WEB_PORT", "9000")
    monkeypatch.setenv("CLIPFETCH_SLEEP_REQUESTS", "2.5")
    monkeypatch.setenv("CLIPFETCH_YTDLP_CMD", "python -m yt_dlp")
    cfg = load_config(path)
    assert cfg.web_port == 9000
    assert cfg.sleep_requests == 2.5
    assert cfg.ytdlp_cmd == "python -m yt_dlp"


def test_config_path_from_env(tmp_path, monkeypatch):
    path = tmp_path / "alt.yaml"
    path.write_text("public_prefix: /files\n")
    monkeypatch.setenv("CLIPFETCH_CONFIG", str(path))
    monkeypatch.delenv("CLIPFETCH_PUBLIC_PREFIX", raising=False)
    assert load_config().public_prefix == "/files"


@pytest.mark.parametrize("env_key,attr,raw,expected", [
    ("CLIPFETCH_FRAGMENT_RETRIES", "fragment_retries", "3", 3),
    ("CLIPFETCH_EXTRACTOR_RETRIES", "extractor_retries", "4", 4),
    ("CLIPFETCH_EXTRACTOR_ARGS", "extractor_args", "youtube:player_client=web", "youtube:player_client=web"),
    ("CLIPFETCH_TERMINATE_GRACE", "terminate_grace", "1.0", 1.0),
    ("CLIPFETCH_SLEEP_INTERVAL", "sleep_interval", "2.5", 2.5),
    ("CLIPFETCH_MAX_SLEEP_INTERVAL", "max_sleep_interval", "7.5", 7.5),
])
def test_env_override_per_field(tmp_path, monkeypatch, env_key, attr, raw, expected):
    monkeypatch.setenv(env_key, raw)
    cfg = load_config(tmp_path / "absent.yaml")
    assert getattr(cfg, attr) == expected
