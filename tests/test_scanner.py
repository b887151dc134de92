import os
import tempfile
import unittest
from pathlib import Path

from mp3_player.config import DirectFilePolicy, PlayerSettings
from mp3_player.errors import DirectoryReadError, NotFoundError
from mp3_player.scanner import Mp3Scanner, resolve


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\x00")
    return path


class _LockedDirScanner(Mp3Scanner):
    """Behaves as if directories named ``locked`` cannot be listed."""

    def _scan_directory(self, directory: Path):
        if directory.name == "locked":
            raise PermissionError(13, "Permission denied", str(directory))
        return super()._scan_directory(directory)


class TestMp3Scanner(unittest.TestCase):
    def test_non_recursive_counts_only_mp3_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            for name in ("a.mp3", "b.MP3", "c.Mp3"):
                _touch(root / name)
            for name in ("cover.jpg", "notes.txt", "d.mp3x", "README"):
                _touch(root / name)
            (root / "album.mp3").mkdir()

            files = resolve(root)

            self.assertEqual(len(files), 3)
            self.assertEqual([p.name for p in files], ["a.mp3", "b.MP3", "c.Mp3"])

    def test_nested_files_need_recursive_flag(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            top = _touch(root / "top.mp3")
            deep = _touch(root / "one" / "two" / "three" / "deep.mp3")
            mid = _touch(root / "one" / "mid.mp3")

            self.assertEqual(resolve(root, recursive=False), [top])
            self.assertEqual(resolve(root, recursive=True), sorted([top, deep, mid], key=str))

    def test_discovery_is_deterministic_and_sorted(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            for name in ("z.mp3", "b/y.mp3", "a.mp3", "b/a.mp3", "c/d/e.mp3"):
                _touch(root / name)

            first = resolve(root, recursive=True)
            second = resolve(root, recursive=True)

            self.assertEqual(first, second)
            self.assertEqual(first, sorted(first, key=str))
            self.assertEqual(len(first), 5)

    def test_missing_root_raises_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            missing = Path(tmpdir) / "nope"
            with self.assertRaises(NotFoundError) as ctx:
                resolve(missing)
            self.assertEqual(ctx.exception.path, missing)
            self.assertIn(str(missing), str(ctx.exception))

    def test_direct_file_filtered_by_default(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            song = _touch(root / "Song.MP3")
            notes = _touch(root / "notes.txt")

            self.assertEqual(resolve(song), [song])
            self.assertEqual(resolve(notes), [])

    def test_direct_file_accepted_regardless_of_extension(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            notes = _touch(Path(tmpdir) / "notes.txt")

            files = resolve(notes, policy=DirectFilePolicy.ACCEPT)

            self.assertEqual(files, [notes])

    def test_unreadable_nested_directory_is_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            keep = _touch(root / "open" / "keep.mp3")
            _touch(root / "locked" / "hidden.mp3")
            top = _touch(root / "top.mp3")
            scanner = _LockedDirScanner(PlayerSettings(root=root, recursive=True))

            with self.assertLogs("mp3_player.scanner", level="WARNING") as logs:
                files = scanner.resolve()

            self.assertEqual(files, sorted([keep, top], key=str))
            self.assertIn("locked", "\n".join(logs.output))

    def test_unreadable_root_directory_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir) / "locked"
            _touch(root / "a.mp3")
            scanner = _LockedDirScanner(PlayerSettings(root=root, recursive=True))

            with self.assertRaises(DirectoryReadError) as ctx:
                scanner.resolve()
            self.assertEqual(ctx.exception.path, root)
            self.assertIn("Permission denied", ctx.exception.reason)

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_directory_symlinks_are_not_followed(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            song = _touch(root / "music" / "a.mp3")
            os.symlink(root / "music", root / "music" / "loop")

            files = resolve(root, recursive=True)

            self.assertEqual(files, [song])

    def test_accepts_string_root_and_keeps_paths_unresolved(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            _touch(Path(tmpdir) / "a.mp3")

            files = resolve(tmpdir)

            self.assertEqual(files, [Path(tmpdir) / "a.mp3"])


if __name__ == "__main__":
    unittest.main()
