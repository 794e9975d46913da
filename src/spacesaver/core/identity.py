"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/identity.py
Whether two paths refer to the same on-disk object (device + inode), regardless
of path spelling or content.
"""
import os
from enum import Enum

from spacesaver.core.errors import IdentityMismatchError
from spacesaver.core.models import Identity


class IdentityCheck(Enum):
    SOURCE_MISSING = "source-missing"
    TARGET_MISSING = "target-missing"
    SAME = "same"
    DIFFERENT = "different"


def file_identity(path: str) -> Identity:
    """Follows symlinks. Raises FileNotFoundError (or another OSError) if `path` cannot be stat-ed."""
    st = os.stat(path)
    return st.st_dev, st.st_ino


def same_identity(path_a: str, path_b: str) -> bool:
    return file_identity(path_a) == file_identity(path_b)


def check_same_file(source: str, target: str) -> IdentityCheck:
    try:
        source_identity = file_identity(source)
    except OSError:
        return IdentityCheck.SOURCE_MISSING
    try:
        target_identity = file_identity(target)
    except OSError:
        return IdentityCheck.TARGET_MISSING

    if source_identity == target_identity:
        return IdentityCheck.SAME
    return IdentityCheck.DIFFERENT


def assert_same_file(source: str, target: str) -> IdentityCheck:
    """Like check_same_file, but DIFFERENT raises IdentityMismatchError."""
    outcome = check_same_file(source, target)
    if outcome is IdentityCheck.DIFFERENT:
        raise IdentityMismatchError("Files are not the same!")
    return outcome
