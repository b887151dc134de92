from __future__ import annotations

import array
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import miniaudio
from mutagen import MutagenError
from mutagen.mp3 import MP3

from .config import OutputSettings
from .errors import DecodeError, OpenError

logger = logging.getLogger(__name__)

SAMPLE_FORMAT = miniaudio.SampleFormat.SIGNED16


@dataclass(slots=True)
class DecodedTrack:
    path: Path
    samples: array.array
    nchannels: int
    sample_rate: int
    title: Optional[str] = None
    artist: Optional[str] = None

    @property
    def num_frames(self) -> int:
        return len(self.samples) // self.nchannels

    @property
    def duration_seconds(self) -> float:
        return self.num_frames / self.sample_rate

    def describe(self) -> str:
        minutes, seconds = divmod(int(round(self.duration_seconds)), 60)
        label = " - ".join(part for part in (self.artist, self.title) if part) or self.path.name
        return f"{label} ({minutes}:{seconds:02d})"


def read_track(path: Path) -> bytes:
    try:
        with path.open("rb") as fh:
            return fh.read()
    except OSError as exc:
        raise OpenError(f"Failed to open file ({exc.strerror or exc})", path) from exc


def decode_track(path: Path, data: bytes, output: OutputSettings) -> DecodedTrack:
    """Decode MP3 ``data`` into PCM frames in the output device's format.

    The stream must be MPEG audio; other containers that miniaudio could
    decode are rejected so that a mislabelled file fails the same way as a
    corrupt one.
    """
    try:
        info = miniaudio.mp3_get_info(data)
        decoded = miniaudio.decode(
            data,
            output_format=SAMPLE_FORMAT,
            nchannels=output.nchannels,
            sample_rate=output.sample_rate,
        )
    except miniaudio.MiniaudioError as exc:
        raise DecodeError(f"Failed to decode MP3 file ({exc})", path) from exc
    if decoded.num_frames <= 0:
        raise DecodeError("Failed to decode MP3 file (no audio frames)", path)
    logger.debug(
        "Decoded %s: %d Hz/%d ch source, %d frames at %d Hz",
        path,
        info.sample_rate,
        info.nchannels,
        decoded.num_frames,
        decoded.sample_rate,
    )
    title, artist = probe_tags(path)
    return DecodedTrack(
        path=path,
        samples=decoded.samples,
        nchannels=decoded.nchannels,
        sample_rate=decoded.sample_rate,
        title=title,
        artist=artist,
    )


def load_track(path: Path, output: OutputSettings) -> DecodedTrack:
    return decode_track(path, read_track(path), output)


def probe_tags(path: Path) -> tuple[Optional[str], Optional[str]]:
    try:
        audio = MP3(path)
    except (MutagenError, OSError):
        return None, None
    tags = audio.tags
    if not tags:
        return None, None
    return _first_text(tags.get("TIT2")), _first_text(tags.get("TPE1"))


def _first_text(frame) -> Optional[str]:
    if frame is None:
        return None
    values = getattr(frame, "text", None) or []
    for value in values:
        text = str(value).strip()
        if text:
            return text
    return None
