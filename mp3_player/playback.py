from __future__ import annotations

import enum
import logging
import sys
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TextIO

from .decoder import load_track
from .errors import DecodeError, DeviceError, OpenError
from .output import OutputSession

logger = logging.getLogger(__name__)

TRACK_GAP_SECONDS = 0.1
NO_FILES_MESSAGE = "No MP3 files found in the specified path."


class PlaybackState(enum.Enum):
    IDLE = "idle"
    READY = "ready"
    PLAYING = "playing"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class PlaybackOutcome:
    path: Path
    ok: bool
    kind: Optional[str] = None
    reason: Optional[str] = None


@dataclass(slots=True)
class BatchReport:
    outcomes: list[PlaybackOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def played(self) -> list[Path]:
        return [o.path for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[PlaybackOutcome]:
        return [o for o in self.outcomes if not o.ok]


class PlaybackDriver:
    """Plays a batch of files one at a time on a shared output session.

    A file that cannot be opened, decoded or handed to the device is reported
    and skipped; the rest of the batch still plays.
    """

    def __init__(self, session: Optional[OutputSession], *, out: Optional[TextIO] = None) -> None:
        self.session = session
        self.out = out if out is not None else sys.stdout
        self.state = PlaybackState.IDLE

    def run(self, files: Sequence[Path]) -> BatchReport:
        report = BatchReport()
        if not files:
            self._print(NO_FILES_MESSAGE)
            self.state = PlaybackState.DONE
            return report
        if self.session is None:
            raise DeviceError("No output session available")
        self._print(f"Found {len(files)} MP3 file(s)")
        self.state = PlaybackState.READY
        total = len(files)
        for index, path in enumerate(files, start=1):
            self._print(f"Playing [{index}/{total}]: {path}")
            report.outcomes.append(self.play_one(path))
        self.state = PlaybackState.DONE
        return report

    def play_one(self, path: Path) -> PlaybackOutcome:
        self.state = PlaybackState.PLAYING
        try:
            track = load_track(path, self.session.settings)
            logger.info("Now playing %s", track.describe())
            self.session.play(track)
        except (OpenError, DecodeError, DeviceError) as exc:
            logger.error("Error playing %s: %s", path, exc.reason)
            return PlaybackOutcome(path=path, ok=False, kind=exc.kind, reason=exc.reason)
        finally:
            self.state = PlaybackState.READY
        time.sleep(TRACK_GAP_SECONDS)
        return PlaybackOutcome(path=path, ok=True)

    def _print(self, line: str) -> None:
        print(line, file=self.out, flush=True)

