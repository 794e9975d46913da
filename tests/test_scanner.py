"""
Unit tests for FileScannerImpl.
Verifies the minimum-size filter, skipping of non-regular files and fatal walk errors.
"""
import errno
import os
import sys
from unittest import mock

import pytest

from spacesaver.core.errors import WalkError
from spacesaver.core.models import DEFAULT_MIN_SIZE_BYTES
from spacesaver.core.scanner import FileScannerImpl


def scanned_names(records):
    return sorted(os.path.basename(r.path) for r in records)


class TestFileScannerImpl:
    def test_scans_recursively(self, dup_tree, temp_dir):
        records = FileScannerImpl(str(temp_dir), min_size=0).scan()
        assert scanned_names(records) == sorted(
            ["orig.bin", "copy1.bin", "copy2.bin", "pair1.bin", "pair2.bin", "unique.bin", "tiny.txt"]
        )

    def test_records_carry_metadata(self, dup_tree, temp_dir):
        records = FileScannerImpl(str(temp_dir), min_size=0).scan()
        by_path = {r.path: r for r in records}
        orig = by_path[str(dup_tree["a_oldest"])]

        st = os.stat(dup_tree["a_oldest"])
        assert orig.size == 4096
        assert orig.mtime_ns == 1_000 * 1_000_000_000
        assert orig.identity == (st.st_dev, st.st_ino)

    def test_min_size_is_inclusive(self, make_file, temp_dir):
        make_file("exact.bin", b"x" * 1000)
        make_file("smaller.bin", b"x" * 999)

        records = FileScannerImpl(str(temp_dir), min_size=1000).scan()
        assert scanned_names(records) == ["exact.bin"]

    def test_default_min_size(self, temp_dir):
        scanner = FileScannerImpl(str(temp_dir))
        assert scanner.min_size == DEFAULT_MIN_SIZE_BYTES == 5 * 1024 * 1024

    def test_skips_symlinks(self, make_file, temp_dir):
        target = make_file("real.bin", b"x" * 100)
        (temp_dir / "link.bin").symlink_to(target)
        (temp_dir / "dirlink").symlink_to(temp_dir, target_is_directory=True)

        records = FileScannerImpl(str(temp_dir), min_size=0).scan()
        assert scanned_names(records) == ["real.bin"]

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs not supported on this platform")
    def test_skips_fifos(self, make_file, temp_dir):
        make_file("real.bin", b"x" * 100)
        os.mkfifo(temp_dir / "pipe")

        records = FileScannerImpl(str(temp_dir), min_size=0).scan()
        assert scanned_names(records) == ["real.bin"]

    def test_empty_directory(self, temp_dir):
        assert FileScannerImpl(str(temp_dir), min_size=0).scan() == []

    def test_missing_root_raises(self, temp_dir):
        with pytest.raises(WalkError, match="does not exist"):
            FileScannerImpl(str(temp_dir / "nope"), min_size=0).scan()

    def test_root_is_a_file_raises(self, make_file):
        path = make_file("file.bin", b"x")
        with pytest.raises(WalkError, match="Not a directory"):
            FileScannerImpl(str(path), min_size=0).scan()

    @pytest.mark.skipif(sys.platform == "win32" or os.geteuid() == 0,
                        reason="needs POSIX permissions and a non-root user")
    def test_unreadable_subtree_aborts_scan(self, make_file, temp_dir):
        """A partial scan would report misleading savings, so it must fail as a whole."""
        make_file("ok/a.bin", b"x" * 10)
        locked = temp_dir / "locked"
        make_file("locked/b.bin", b"x" * 10)
        locked.chmod(0)
        try:
            with pytest.raises(WalkError):
                FileScannerImpl(str(temp_dir), min_size=0).scan()
        finally:
            locked.chmod(0o755)

    def test_unreadable_directory_aborts_scan(self, make_file, temp_dir):
        """Directory read errors reported by os.walk must stop the scan, not be skipped."""
        make_file("ok/a.bin", b"x" * 10)
        locked = os.path.join(str(temp_dir), "locked")

        def failing_walk(top, onerror=None, **kwargs):
            yield top, ["locked"], []
            onerror(PermissionError(errno.EACCES, "Permission denied", locked))

        with mock.patch.object(os, "walk", side_effect=failing_walk):
            with pytest.raises(WalkError) as exc_info:
                FileScannerImpl(str(temp_dir), min_size=0).scan()

        assert exc_info.value.path == locked
        assert "Permission denied" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_entry_that_cannot_be_stat_ed_aborts_scan(self, make_file, temp_dir):
        make_file("a.bin", b"x" * 10)
        broken = make_file("b.bin", b"x" * 10)
        real_lstat = os.lstat

        def failing_lstat(path, *args, **kwargs):
            if os.fspath(path) == str(broken):
                raise PermissionError(errno.EACCES, "Permission denied", os.fspath(path))
            return real_lstat(path, *args, **kwargs)

        with mock.patch.object(os, "lstat", side_effect=failing_lstat):
            with pytest.raises(WalkError) as exc_info:
                FileScannerImpl(str(temp_dir), min_size=0).scan()

        assert exc_info.value.path == str(broken)
        assert "Cannot stat" in str(exc_info.value)

    def test_progress_callback_reports_final_count(self, dup_tree, temp_dir):
        events = []
        FileScannerImpl(str(temp_dir), min_size=0).scan(
            progress_callback=lambda stage, current, total: events.append((stage, current, total))
        )
        assert events[-1] == ("scanning", 7, None)
