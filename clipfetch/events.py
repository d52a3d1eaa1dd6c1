"""
events — Tagged progress messages relayed to the client.

Every event serialises to a flat JSON object whose ``type`` is one of
``progress``, ``warning``, ``complete`` or ``error``.
"""
from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Any

PROGRESS = "progress"
WARNING = "warning"
COMPLETE = "complete"
ERROR = "error"


@dataclass
class Event:
    type: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, **self.data}

    def to_sse(self) -> str:
        return json.dumps(self.to_dict())


def clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


def progress(stage: str, percent: float, message: str) -> Event:
    return Event(PROGRESS, {"stage": stage, "percent": clamp_percent(percent), "message": message})


def warning(message: str) -> Event:
    return Event(WARNING, {"message": message})


def complete(filename: str, url: str) -> Event:
    return Event(COMPLETE, {"filename": filename, "url": url})


def error(message: str, detail: str | None = None) -> Event:
    data: dict[str, Any] = {"message": message}
    if detail:
        data["detail"] = detail
    return Event(ERROR, data)
