from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager

import miniaudio

from .config import OutputSettings
from .decoder import SAMPLE_FORMAT, DecodedTrack
from .errors import DeviceError

logger = logging.getLogger(__name__)

APP_NAME = "mp3-player"


class OutputSession:
    """The process's single connection to the default playback device.

    Tracks are played strictly one after another; ``play`` returns only once
    the device has consumed every frame of the track and its buffer has
    drained.
    """

    def __init__(self, device: miniaudio.PlaybackDevice, settings: OutputSettings) -> None:
        self.device = device
        self.settings = settings
        self._closed = False

    def play(self, track: DecodedTrack) -> None:
        if self._closed:
            raise DeviceError("Output session is closed", track.path)
        if (track.nchannels, track.sample_rate) != (
            self.settings.nchannels,
            self.settings.sample_rate,
        ):
            raise DeviceError(
                f"Track format {track.sample_rate} Hz/{track.nchannels} ch does not match "
                f"output {self.settings.sample_rate} Hz/{self.settings.nchannels} ch",
                track.path,
            )
        finished = threading.Event()
        queue = self._queue(track, finished)
        next(queue)
        try:
            try:
                self.device.start(queue)
            except miniaudio.MiniaudioError as exc:
                queue.close()
                raise DeviceError(f"Failed to start playback ({exc})", track.path) from exc
            finished.wait()
            # the device has the tail of the track buffered but not yet audible
            time.sleep(self.settings.buffersize_msec / 1000)
        finally:
            self.device.stop()

    def _queue(
        self, track: DecodedTrack, finished: threading.Event
    ) -> miniaudio.PlaybackCallbackGeneratorType:
        samples = memoryview(track.samples)
        current = 0
        try:
            required_frames = yield b""
            while current < len(samples):
                count = required_frames * track.nchannels
                chunk = samples[current : current + count]
                current += count
                required_frames = yield chunk
        finally:
            finished.set()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.device.close()
        logger.debug("Closed output device")


@contextmanager
def open_output_session(settings: OutputSettings) -> Iterator[OutputSession]:
    try:
        device = miniaudio.PlaybackDevice(
            output_format=SAMPLE_FORMAT,
            nchannels=settings.nchannels,
            sample_rate=settings.sample_rate,
            buffersize_msec=settings.buffersize_msec,
            app_name=APP_NAME,
        )
    except miniaudio.MiniaudioError as exc:
        raise DeviceError(f"Failed to create audio output stream ({exc})") from exc
    logger.debug(
        "Opened output device %s (%d Hz, %d ch)",
        getattr(device, "backend", "default"),
        settings.sample_rate,
        settings.nchannels,
    )
    session = OutputSession(device, settings)
    try:
        yield session
    finally:
        session.close()
