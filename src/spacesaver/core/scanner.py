"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Recursive directory traversal with a minimum-size filter.
Features:
- Uses os.walk (directory symlinks are not followed)
- Skips symlinks and special files (fifos, sockets, devices) silently
- Any unreadable subtree aborts the whole scan with WalkError, so savings are
  never reported against an incomplete file set
"""

import os
import stat
import time
import logging
from pathlib import Path
from typing import Callable, List, Optional

from spacesaver.core.errors import WalkError
from spacesaver.core.interfaces import FileScanner
from spacesaver.core.models import DEFAULT_MIN_SIZE_BYTES, FileRecord

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 5000


class FileScannerImpl(FileScanner):
    """
    Scans a directory tree and collects regular files of at least `min_size` bytes.

    Attributes:
        root_dir: Root directory to scan
        min_size: Minimum file size in bytes; a file of exactly this size is included
    """

    def __init__(self, root_dir: str, min_size: int = DEFAULT_MIN_SIZE_BYTES):
        self.root_dir = root_dir
        self.min_size = min_size

    def scan(self,
             progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None) -> List[FileRecord]:
        logger.debug(f"Root directory: {self.root_dir}")
        logger.debug(f"Filters: min_size={self.min_size}")

        root_path = Path(self.root_dir)
        if not root_path.exists():
            raise WalkError(f"Directory does not exist: {self.root_dir}", self.root_dir)
        if not root_path.is_dir():
            raise WalkError(f"Not a directory: {self.root_dir}", self.root_dir)

        found_files = []
        processed_files = 0
        start_time = time.time()

        for root, _dirs, files in os.walk(self.root_dir, onerror=self._on_walk_error):
            for filename in files:
                record = self._process_file(os.path.join(root, filename))
                if record is not None:
                    found_files.append(record)
                processed_files += 1

                if progress_callback and processed_files % PROGRESS_INTERVAL == 0:
                    progress_callback("scanning", processed_files, None)

        if progress_callback:
            progress_callback("scanning", processed_files, None)

        logger.debug(f"Total scan time: {time.time() - start_time:.2f} seconds")
        logger.debug(f"Scan completed. {processed_files} entries seen, {len(found_files)} candidate files.")
        return found_files

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        path = getattr(error, "filename", None)
        logger.error(f"Cannot read directory {path}: {error}")
        raise WalkError(f"Cannot read directory {path}: {error.strerror or error}", path) from error

    def _process_file(self, path: str) -> Optional[FileRecord]:
        """
        Returns a FileRecord if `path` is a regular file that passes the size filter.
        """
        try:
            stat_result = os.lstat(path)
        except OSError as e:
            raise WalkError(f"Cannot stat {path}: {e.strerror or e}", path) from e

        if not stat.S_ISREG(stat_result.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None

        if stat_result.st_size < self.min_size:
            logger.debug(f"Skipping {path} (size {stat_result.st_size} bytes below minimum)")
            return None

        return FileRecord.from_stat(path, stat_result)
