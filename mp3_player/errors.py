from __future__ import annotations

from pathlib import Path
from typing import Optional


class PlayerError(Exception):
    """Base class for failures the player reports to the user."""

    kind = "error"

    def __init__(self, reason: str, path: Optional[Path] = None) -> None:
        self.reason = reason
        self.path = path
        super().__init__(self._render())

    def _render(self) -> str:
        if self.path is None:
            return self.reason
        return f"{self.reason}: {self.path}"


class NotFoundError(PlayerError):
    """The root path is neither an existing file nor an existing directory."""

    kind = "not found"

    def __init__(self, path: Path, reason: str = "Path does not exist") -> None:
        super().__init__(reason, path)


class DirectoryReadError(PlayerError):
    kind = "directory unreadable"


class OpenError(PlayerError):
    kind = "open failed"


class DecodeError(PlayerError):
    kind = "decode failed"


class DeviceError(PlayerError):
    """Raised when the output device cannot be opened or refuses a track."""

    kind = "device error"
