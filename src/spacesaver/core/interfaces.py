"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the package.
These protocols enforce structural typing using Python's `typing.Protocol` so that
hash functions, scanners and clone primitives can be swapped without touching
the pipeline or the planner.

Key Components:
---------------
- HashAlgorithm: Factory for incremental hash objects (SHA-256, xxHash64, ...).
- Hasher: Computes the quick pre-filter hash and the full content fingerprint.
- FileScanner: Walks a directory tree and returns FileRecords.
- CloneBackend: The copy-on-write clone primitive (or a substitute for it).
"""

from typing import Protocol, List, Optional, Callable
from spacesaver.core.models import FileRecord


class HashObject(Protocol):
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions without affecting the rest of
    the deduplication logic.
    """
    name: str

    def new(self) -> HashObject:
        """Returns a fresh incremental hash object."""
        ...


class Hasher(Protocol):
    """Interface for hashing files by path."""
    def quick_hash(self, path: str) -> bytes: ...
    def fingerprint(self, path: str) -> bytes: ...


class FileScanner(Protocol):
    def scan(
        self,
        progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> List[FileRecord]:
        """
        Scan files from the configured directory.

        Args:
            progress_callback: Optional callback for reporting progress (stage, current, total).

        Returns:
            FileRecords for every regular file matching the filters.
        """
        ...


class CloneBackend(Protocol):
    """
    The clone primitive.

    `dest` never exists when clone() is called. Implementations raise
    CloneUnsupportedError / CloneCrossDeviceError when they cannot clone this pair
    and CloneError for anything else.
    """
    name: str

    def clone(self, source: str, dest: str) -> None: ...
