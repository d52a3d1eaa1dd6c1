"""
presets — Quality presets and the options of a single download.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Quality(str, Enum):
    BEST = "best"
    P1080 = "1080"
    P720 = "720"
    P480 = "480"
    AUDIO = "audio"


class OutputFormat(str, Enum):
    MP4 = "mp4"
    MKV = "mkv"
    WEBM = "webm"
    MP3 = "mp3"


@dataclass(frozen=True)
class Preset:
    format: str
    suffix: str
    postprocessor_args: str


def _height_limited(height: int, crf: int, audio_bitrate: str) -> Preset:
    h = f"[height<={height}]"
    return Preset(
        format=(
            f"bestvideo{h}[vcodec^=avc1]+bestaudio[ext=m4a]"
            f"/bestvideo{h}+bestaudio/best{h}"
        ),
        suffix=f"_{height}p",
        postprocessor_args=(
            f"ffmpeg:-c:v libx264 -preset ultrafast -crf {crf} "
            f"-vf scale=-2:{height} -c:a aac -b:a {audio_bitrate}"
        ),
    )


_BEST = Preset(
    format="bestvideo[vcodec^=avc1]+bestaudio[ext=m4a]/bestvideo+bestaudio/best",
    suffix="_best",
    postprocessor_args="ffmpeg:-c:v libx264 -preset ultrafast -crf 23 -c:a aac -b:a 192k",
)

PRESETS: dict[Quality, Preset] = {
    Quality.BEST: _BEST,
    Quality.P1080: _height_limited(1080, 23, "192k"),
    Quality.P720: _height_limited(720, 23, "128k"),
    Quality.P480: _height_limited(480, 25, "96k"),
    # audio extraction ignores the video format selector and re-encode args
    Quality.AUDIO: Preset(format=_BEST.format, suffix="_audio", postprocessor_args=_BEST.postprocessor_args),
}


@dataclass
class DownloadOptions:
    url: str
    quality: Quality = Quality.BEST
    custom_filename: str | None = None
    subtitles: bool = False
    output_format: OutputFormat = OutputFormat.MP4

    @property
    def is_audio(self) -> bool:
        # mp3 is not a video container, so asking for it means audio only
        return self.quality == Quality.AUDIO or self.output_format == OutputFormat.MP3

    @property
    def preset(self) -> Preset:
        return PRESETS[Quality.AUDIO if self.is_audio else self.quality]

    @property
    def output_ext(self) -> str:
        """Final container; audio is always mp3."""
        return OutputFormat.MP3.value if self.is_audio else self.output_format.value
