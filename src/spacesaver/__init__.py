"""
space-saver — find duplicate files and reclaim disk space with copy-on-write clones.

Core features:
- Duplicate detection by SHA-256 content fingerprint (size and xxHash64 pre-filters)
- Identity-aware grouping: hard links to one file are never counted twice
- Dry-run reporting of possible savings
- Replacement of duplicates with reflink clones (Linux FICLONE, macOS clonefile)
- CLI interface: find, clone-duplicates, clone-file, same-file
"""

from importlib.metadata import PackageNotFoundError, version as _version

try:
    __version__ = _version("space-saver")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: names users are expected to import directly
from spacesaver.commands import DeduplicationCommand
from spacesaver.core import DedupParams, DedupSummary, DuplicateGroup, FileRecord, CloneResult
from spacesaver.utils.size_spec import SizeSpec
from spacesaver.services import CloneService

__all__ = [
    "DeduplicationCommand",
    "DedupParams",
    "DedupSummary",
    "DuplicateGroup",
    "FileRecord",
    "CloneResult",
    "SizeSpec",
    "CloneService",
    "__version__",
]
