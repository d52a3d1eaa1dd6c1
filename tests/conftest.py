from __future__ import annotations
import shlex
import sys
import textwrap

import pytest

from clipfetch.config import Config

FAKE_YTDLP = '''
import os, signal, sys, time

STDOUT = {stdout!r}
STDERR = {stderr!r}
FAIL_ON = {fail_on!r}
PID_FILE = {pid_file!r}
HANG = {hang!r}
IGNORE_TERM = {ignore_term!r}

if IGNORE_TERM:
    signal.signal(signal.SIGTERM, signal.SIG_IGN)

if PID_FILE:
    with open(PID_FILE, "w") as f:
        f.write(str(os.getpid()))

url = sys.argv[-1]
if FAIL_ON and FAIL_ON in url:
    print("ERROR: Unsupported URL: " + url, file=sys.stderr, flush=True)
    sys.exit(1)

for line in STDERR:
    print(line, file=sys.stderr, flush=True)
for line in STDOUT:
    print(line.replace("{{url}}", url.rsplit("/", 1)[-1]), flush=True)
if HANG:
    time.sleep(60)
sys.exit({exit_code!r})
'''


@pytest.fixture
def fake_ytdlp(tmp_path):
    """Writes a stand-in for yt-dlp and returns the command line that runs it."""
    def _make(stdout=(), stderr=(), exit_code=0, fail_on=None, pid_file=None, hang=False,
              ignore_term=False):
        script = tmp_path / "fake_ytdlp.py"
        script.write_text(textwrap.dedent(FAKE_YTDLP.format(
            stdout=list(stdout),
            stderr=list(stderr),
            exit_code=exit_code,
            fail_on=fail_on,
            pid_file=str(pid_file) if pid_file else None,
            hang=hang,
            ignore_term=ignore_term,
        )))
        return f"{shlex.quote(sys.executable)} {shlex.quote(str(script))}"
    return _make


@pytest.fixture
def cfg(tmp_path):
    return Config(
        download_dir=str(tmp_path / "downloads"),
        ffmpeg_location="/opt/ffmpeg/bin/ffmpeg",
        terminate_grace=2.0,
    )


SUCCESS_OUTPUT = [
    "[youtube] abc123: Downloading webpage",
    "[download]  10.0% of 20.00MiB at 2.00MiB/s ETA 00:09",
    "[download]  50.0% of 20.00MiB at 4.00MiB/s ETA 00:03",
    "[download] 100.0% of 20.00MiB at 4.00MiB/s ETA 00:00",
    '[Merger] Merging formats into "/tmp/downloads/clip_best.mp4"',
    "/tmp/downloads/{url}_best.mp4",
]


@pytest.fixture(autouse=True)
def _reset_sse_app_status():
    # sse-starlette keeps a module-level exit event bound to the first loop
    from sse_starlette.sse import AppStatus
    if hasattr(AppStatus, "should_exit_event"):
        AppStatus.should_exit_event = None
    yield


@pytest.fixture
def isolated_dirs(tmp_path, monkeypatch):
    """Keep platformdirs (log files) and config lookup inside tmp_path."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in ("XDG_CONFIG_HOME", "XDG_CACHE_HOME", "XDG_STATE_HOME", "XDG_DATA_HOME"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("CLIPFETCH_CONFIG", str(tmp_path / "missing.yaml"))
    return tmp_path


@pytest.fixture
def success_output():
    return list(SUCCESS_OUTPUT)
