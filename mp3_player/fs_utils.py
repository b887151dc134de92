from __future__ import annotations

import errno
import os
import stat
from pathlib import Path
from typing import Optional

MP3_EXTENSION = "mp3"


def has_mp3_extension(path: Path) -> bool:
    stem, dot, ext = path.name.rpartition(".")
    # ".mp3" on its own is a hidden file without an extension
    if not dot or not stem:
        return False
    return ext.lower() == MP3_EXTENSION


def path_kind(path: Path) -> Optional[str]:
    """Return "file", "dir", "other" or None when nothing exists at ``path``."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return None
    except OSError as exc:
        if exc.errno in (errno.ENOTDIR, errno.ENAMETOOLONG, errno.ELOOP):
            return None
        raise
    if stat.S_ISREG(st.st_mode):
        return "file"
    if stat.S_ISDIR(st.st_mode):
        return "dir"
    return "other"


def is_regular_file(entry: os.DirEntry) -> bool:
    try:
        return entry.is_file()
    except OSError:
        return False


def is_mp3_entry(entry: os.DirEntry) -> bool:
    return has_mp3_extension(Path(entry.name)) and is_regular_file(entry)
