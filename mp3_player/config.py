from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, field_validator

DEFAULT_SAMPLE_RATE = 44100
DEFAULT_CHANNELS = 2
DEFAULT_BUFFERSIZE_MSEC = 200


class DirectFilePolicy(str, Enum):
    """How a root path that is itself a regular file is treated."""

    FILTER = "filter"
    ACCEPT = "accept"


class OutputSettings(BaseModel):
    sample_rate: int = DEFAULT_SAMPLE_RATE
    nchannels: int = DEFAULT_CHANNELS
    buffersize_msec: int = DEFAULT_BUFFERSIZE_MSEC

    @field_validator("sample_rate", "buffersize_msec")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("nchannels")
    @classmethod
    def _channels(cls, value: int) -> int:
        if value not in (1, 2):
            raise ValueError("only mono or stereo output is supported")
        return value


class PlayerSettings(BaseModel):
    root: Path
    recursive: bool = False
    direct_file_policy: DirectFilePolicy = DirectFilePolicy.FILTER
    output: OutputSettings = OutputSettings()

    @field_validator("root", mode="before")
    @classmethod
    def _expand_root(cls, value: str | Path) -> Path:
        return Path(value).expanduser()

    @classmethod
    def from_args(cls, args) -> "PlayerSettings":
        return cls(
            root=args.path,
            recursive=args.recursive,
            direct_file_policy=(
                DirectFilePolicy.ACCEPT
                if getattr(args, "accept_any_file", False)
                else DirectFilePolicy.FILTER
            ),
        )
