from __future__ import annotations

import logging
import os
from pathlib import Path

from .config import DirectFilePolicy, PlayerSettings
from .errors import DirectoryReadError, NotFoundError
from .fs_utils import has_mp3_extension, is_mp3_entry, path_kind

logger = logging.getLogger(__name__)


class Mp3Scanner:
    """Turns the root path into the ordered list of MP3 files to play."""

    def __init__(self, settings: PlayerSettings) -> None:
        self.settings = settings

    def resolve(self) -> list[Path]:
        root = self.settings.root
        try:
            kind = path_kind(root)
        except OSError as exc:
            raise DirectoryReadError(f"Cannot access path ({exc.strerror})", root) from exc
        if kind is None:
            raise NotFoundError(root)
        if kind == "file":
            return self._resolve_file(root)
        if kind != "dir":
            raise NotFoundError(root, "Not a regular file or directory")
        files = self._collect(root)
        files.sort(key=str)
        logger.debug("Discovered %d MP3 file(s) under %s", len(files), root)
        return files

    def _resolve_file(self, path: Path) -> list[Path]:
        if self.settings.direct_file_policy is DirectFilePolicy.ACCEPT:
            return [path]
        if has_mp3_extension(path):
            return [path]
        logger.debug("Ignoring %s: not an .mp3 file", path)
        return []

    def _collect(self, root: Path) -> list[Path]:
        try:
            files, pending = self._scan_directory(root)
        except OSError as exc:
            raise DirectoryReadError(f"Failed to read directory ({exc.strerror})", root) from exc
        if not self.settings.recursive:
            return files
        while pending:
            directory = pending.pop()
            try:
                found, subdirs = self._scan_directory(directory)
            except OSError as exc:
                logger.warning("Skipping unreadable directory %s: %s", directory, exc.strerror)
                continue
            files.extend(found)
            pending.extend(subdirs)
        return files

    def _scan_directory(self, directory: Path) -> tuple[list[Path], list[Path]]:
        files: list[Path] = []
        subdirs: list[Path] = []
        with os.scandir(directory) as it:
            for entry in it:
                if self.settings.recursive and _is_real_directory(entry):
                    subdirs.append(Path(entry.path))
                elif is_mp3_entry(entry):
                    files.append(Path(entry.path))
        return files, subdirs


def _is_real_directory(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def resolve(
    root: Path | str,
    recursive: bool = False,
    policy: DirectFilePolicy = DirectFilePolicy.FILTER,
) -> list[Path]:
    settings = PlayerSettings(root=root, recursive=recursive, direct_file_policy=policy)
    return Mp3Scanner(settings).resolve()
