"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/clone_service.py
Copy-on-write cloning of one file onto another.

The clone is always written to a temporary sibling of the target and then moved
over it with os.replace, so the target is either the old file or the complete
clone and is never left missing. Backends that cannot clone a pair make the
service report SKIPPED (or use the fallback backend when one is configured).
"""
import ctypes
import ctypes.util
import errno
import logging
import os
import shutil
import sys
import uuid
from pathlib import Path

from spacesaver.core.errors import CloneCrossDeviceError, CloneError, CloneUnsupportedError
from spacesaver.core.interfaces import CloneBackend
from spacesaver.core.models import CloneResult

logger = logging.getLogger(__name__)

# linux/fs.h: _IOW(0x94, 9, int)
FICLONE = 0x40049409
# sys/clonefile.h
CLONE_NOFOLLOW = 0x0001

_UNSUPPORTED_ERRNOS = {
    errno.EOPNOTSUPP,
    getattr(errno, "ENOTSUP", errno.EOPNOTSUPP),
    errno.ENOTTY,
    errno.EINVAL,
    errno.ENOSYS,
}

TEMP_SUFFIX = ".spacesaver-tmp"


def _raise_for_errno(err: int, source: str, dest: str) -> None:
    message = f"{os.strerror(err)}: {source} -> {dest}"
    if err == errno.EXDEV:
        raise CloneCrossDeviceError(message)
    if err in _UNSUPPORTED_ERRNOS:
        raise CloneUnsupportedError(message)
    raise CloneError(f"clone-file failed: {message}")


class ReflinkCloneBackend(CloneBackend):
    """
    Native copy-on-write clone: FICLONE ioctl on Linux (btrfs, xfs, bcachefs, ...),
    clonefile(2) on macOS (APFS). Other platforms are unsupported.
    """
    name = "reflink"

    def clone(self, source: str, dest: str) -> None:
        if sys.platform.startswith("linux"):
            self._clone_linux(source, dest)
        elif sys.platform == "darwin":
            self._clone_darwin(source, dest)
        else:
            raise CloneUnsupportedError(f"Copy-on-write cloning is not available on {sys.platform}")

    @staticmethod
    def _clone_linux(source: str, dest: str) -> None:
        import fcntl

        with open(source, "rb") as src:
            dest_fd = os.open(dest, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            try:
                fcntl.ioctl(dest_fd, FICLONE, src.fileno())
            except OSError as e:
                _raise_for_errno(e.errno, source, dest)
            finally:
                os.close(dest_fd)

    @staticmethod
    def _clone_darwin(source: str, dest: str) -> None:
        libc = ctypes.CDLL(ctypes.util.find_library("c"), use_errno=True)
        clonefile = getattr(libc, "clonefile", None)
        if clonefile is None:
            raise CloneUnsupportedError("clonefile(2) is not available on this system")
        clonefile.argtypes = [ctypes.c_char_p, ctypes.c_char_p, ctypes.c_uint32]
        clonefile.restype = ctypes.c_int
        if clonefile(os.fsencode(source), os.fsencode(dest), CLONE_NOFOLLOW) != 0:
            _raise_for_errno(ctypes.get_errno(), source, dest)


class CopyCloneBackend(CloneBackend):
    """Plain byte-for-byte copy. Never saves space; used as an explicit fallback."""
    name = "copy"

    def clone(self, source: str, dest: str) -> None:
        try:
            shutil.copyfile(source, dest)
        except OSError as e:
            raise CloneError(f"clone-file failed: copy {source} -> {dest}: {e}") from e


class CloneService:
    """
    Replaces a target file with a clone of a source file.

    Args:
        backend: primary clone primitive (defaults to ReflinkCloneBackend)
        fallback: backend used when the primary one reports the pair as unsupported;
                  without it such pairs are SKIPPED and left untouched
    """

    def __init__(self, backend: CloneBackend = None, fallback: CloneBackend = None):
        self.backend = backend or ReflinkCloneBackend()
        self.fallback = fallback

    def clone_file(self, source: str, target: str) -> CloneResult:
        """
        Raises:
            CloneError: source missing, or any failure other than unsupported/cross-device
        """
        source_abs = os.path.abspath(source)
        target_abs = os.path.abspath(target)

        if not os.path.isfile(source_abs):
            raise CloneError(f"clone-file failed: source not found; {source_abs}")

        temp_path = self._temp_path_for(target_abs)
        try:
            result = self._clone_to(source_abs, temp_path)
            if result is CloneResult.SKIPPED:
                return result
            shutil.copystat(source_abs, temp_path)
            os.replace(temp_path, target_abs)
        except CloneError:
            self._discard(temp_path)
            raise
        except OSError as e:
            self._discard(temp_path)
            raise CloneError(f"clone-file failed: {e}") from e

        logger.debug(f"{result.value}: {source_abs} -> {target_abs}")
        return result

    def _clone_to(self, source: str, dest: str) -> CloneResult:
        try:
            self.backend.clone(source, dest)
            return CloneResult.CLONED
        except CloneUnsupportedError as e:
            self._discard(dest)
            if self.fallback is None:
                logger.debug(f"{self.backend.name} backend cannot clone {source}: {e}")
                return CloneResult.SKIPPED
            logger.debug(f"{self.backend.name} backend cannot clone {source}, using {self.fallback.name}")

        self.fallback.clone(source, dest)
        return CloneResult.COPIED

    @staticmethod
    def _temp_path_for(target: str) -> str:
        path = Path(target)
        return str(path.with_name(f".{path.name}.{uuid.uuid4().hex[:8]}{TEMP_SUFFIX}"))

    @staticmethod
    def _discard(path: str) -> None:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
