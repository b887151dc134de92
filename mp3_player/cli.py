from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .config import PlayerSettings
from .errors import DeviceError, DirectoryReadError, NotFoundError
from .output import open_output_session
from .playback import PlaybackDriver
from .scanner import Mp3Scanner

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INTERRUPTED = 130

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mp3-player", description="A simple MP3 CLI player"
    )
    parser.add_argument(
        "path", type=Path, help="Path to MP3 file or directory containing MP3 files"
    )
    parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="Play files recursively from subdirectories",
    )
    parser.add_argument(
        "--accept-any-file",
        action="store_true",
        help="Play a file given directly as PATH even if it lacks an .mp3 extension",
    )
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(level_name: str) -> None:
    log_level = getattr(logging, level_name.upper(), logging.WARNING)
    # per-file failures and fatal errors are logged at ERROR and must stay visible
    log_level = min(log_level, logging.ERROR)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)
    handler = logging.StreamHandler()
    stream = getattr(handler, "stream", None)
    if stream is not None and stream.isatty():
        handler.setFormatter(ColorFormatter(LOG_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)


def play_path(settings: PlayerSettings) -> int:
    try:
        files = Mp3Scanner(settings).resolve()
    except (NotFoundError, DirectoryReadError) as exc:
        logger.error("%s", exc)
        return EXIT_FATAL

    if not files:
        PlaybackDriver(None).run(files)
        return EXIT_OK

    try:
        with open_output_session(settings.output) as session:
            report = PlaybackDriver(session).run(files)
    except DeviceError as exc:
        logger.error("%s", exc)
        return EXIT_FATAL

    if report.failed:
        logger.info(
            "Finished: %d played, %d failed", len(report.played), len(report.failed)
        )
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    settings = PlayerSettings.from_args(args)
    try:
        return play_path(settings)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
