"""
batch — Sequential multi-URL downloads.

Each URL goes through the same single-download flow, one after another.
A failed item is recorded and the batch moves on to the next URL.
"""
from __future__ import annotations
import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator

import structlog

from . import events
from .config import Config
from .events import Event
from .presets import DownloadOptions
from .runner import stream_download

log = structlog.get_logger()


class EmptyBatchError(ValueError):
    def __init__(self):
        super().__init__("Please enter at least one URL")


class ItemStatus(str, Enum):
    PENDING = "pending"
    DOWNLOADING = "downloading"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class BatchItem:
    url: str
    status: ItemStatus = ItemStatus.PENDING
    percent: float = 0.0
    filename: str | None = None
    download_url: str | None = None
    error: str | None = None

    def apply(self, event: Event):
        if event.type == events.PROGRESS:
            self.status = ItemStatus.DOWNLOADING
            self.percent = event.data["percent"]
        elif event.type == events.COMPLETE:
            self.status = ItemStatus.COMPLETE
            self.percent = 100.0
            self.filename = event.data["filename"]
            self.download_url = event.data["url"]
        elif event.type == events.ERROR:
            self.status = ItemStatus.ERROR
            self.error = event.data["message"]


def parse_url_list(text: str) -> list[str]:
    """One URL per line; blank lines are skipped."""
    return [u.strip() for u in text.splitlines() if u.strip()]


def build_batch(urls: list[str]) -> list[BatchItem]:
    urls = [u.strip() for u in urls if u and u.strip()]
    if not urls:
        raise EmptyBatchError()
    return [BatchItem(url=u) for u in urls]


def _options_for(template: DownloadOptions, url: str, index: int, total: int) -> DownloadOptions:
    custom = template.custom_filename
    # one shared custom name would make every item overwrite the previous one
    if custom and total > 1:
        custom = f"{custom}_{index + 1}"
    return dataclasses.replace(template, url=url, custom_filename=custom)


async def run_batch(
    items: list[BatchItem],
    template: DownloadOptions,
    cfg: Config,
) -> AsyncIterator[tuple[int, Event]]:
    """Download ``items`` in order, yielding ``(index, event)`` pairs."""
    total = len(items)
    for index, item in enumerate(items):
        log.info("batch_item_start", index=index, total=total, url=item.url)
        item.status = ItemStatus.DOWNLOADING
        options = _options_for(template, item.url, index, total)
        async for event in stream_download(options, cfg):
            item.apply(event)
            yield index, event
        if item.status != ItemStatus.COMPLETE:
            # stream ended without a terminal event
            item.status = ItemStatus.ERROR
            item.error = item.error or "Download did not complete"
        log.info("batch_item_done", index=index, status=item.status.value)
