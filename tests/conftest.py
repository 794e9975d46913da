"""
Shared fixtures for space-saver tests.
Creates isolated temporary directories with controlled file contents and
modification times.
"""
import os
import tempfile
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest

SECOND_NS = 1_000_000_000


def write_file(path: Path, content: bytes, mtime: Optional[int] = None) -> Path:
    """Writes `content` to `path` (creating parents) and sets its mtime in whole seconds."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    if mtime is not None:
        os.utime(path, ns=(mtime * SECOND_NS, mtime * SECOND_NS))
    return path


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_file(temp_dir) -> Callable[..., Path]:
    def _make(relative: str, content: bytes, mtime: Optional[int] = None) -> Path:
        return write_file(temp_dir / relative, content, mtime)
    return _make


@pytest.fixture
def dup_tree(make_file) -> Dict[str, Path]:
    """
    Controlled tree for duplicate scenarios:
    - 3 copies of content A (4KB), oldest in a/, newest two levels deep
    - 2 copies of content B (2KB) where the *second* written file is older
    - 1 unique file with the same size as A but different content
    - 1 tiny file (10 bytes) below every min_size used in tests
    """
    content_a = b"A" * 4096
    content_b = b"B" * 2048
    return {
        "a_oldest": make_file("a/orig.bin", content_a, mtime=1_000),
        "a_middle": make_file("b/copy1.bin", content_a, mtime=2_000),
        "a_newest": make_file("b/c/copy2.bin", content_a, mtime=3_000),
        "b_newer": make_file("pair1.bin", content_b, mtime=1_500),
        "b_older": make_file("pair2.bin", content_b, mtime=1_200),
        "unique": make_file("unique.bin", b"C" * 4096, mtime=1_000),
        "tiny": make_file("tiny.txt", b"x" * 10, mtime=1_000),
    }
