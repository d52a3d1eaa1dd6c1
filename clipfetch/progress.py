"""
progress — Maps yt-dlp output lines to progress events.

yt-dlp is run with ``--newline`` so every progress update arrives as its own
line, e.g.::

    [download]  45.2% of 100.00MiB at 5.00MiB/s ETA 00:12

The download itself is reported as 0-70%; the remaining range is reserved
for merging and re-encoding, which yt-dlp does not report incrementally.
"""
from __future__ import annotations
import re

from . import events
from .events import Event

DOWNLOAD_RE = re.compile(
    r"\[download\]\s+([\d.]+)%\s+of\s+~?\s*([\d.]+\w+)\s+at\s+([\d.]+\w+/s)"
)

DOWNLOAD_SHARE = 0.7
MERGING_PERCENT = 75
EXTRACTING_PERCENT = 80
ENCODING_PERCENT = 85

MEDIA_EXTENSIONS = (".mp4", ".mp3", ".mkv", ".webm")


class ProgressParser:
    """Scans one download's stdout, line by line."""

    def __init__(self):
        self.filename: str | None = None

    def feed(self, line: str) -> list[Event]:
        line = line.rstrip("\r\n")
        if not line.strip():
            return []

        out: list[Event] = []

        m = DOWNLOAD_RE.search(line)
        if m:
            percent = float(m.group(1))
            size, speed = m.group(2), m.group(3)
            out.append(events.progress(
                "Downloading",
                min(percent * DOWNLOAD_SHARE, DOWNLOAD_SHARE * 100),
                f"{percent:.1f}% of {size} at {speed}",
            ))

        if "[Merger]" in line or "[ffmpeg]" in line or "Merging" in line:
            out.append(events.progress("Merging", MERGING_PERCENT, "Merging video and audio..."))

        if "[ExtractAudio]" in line:
            out.append(events.progress("Extracting", EXTRACTING_PERCENT, "Extracting audio..."))

        if "Encoding" in line or "libx264" in line or "Converting" in line:
            out.append(events.progress("Encoding", ENCODING_PERCENT, "Re-encoding for compatibility..."))

        # --print filename emits the bare path; log lines are bracketed
        if any(ext in line for ext in MEDIA_EXTENSIONS):
            if "[" not in line and "%" not in line:
                self.filename = line.strip()

        return out


def is_warning(line: str) -> bool:
    return "WARNING" in line


def is_error(line: str) -> bool:
    return line.lstrip().startswith("ERROR")
