"""
Core engine: scanner, hasher, grouper, pipeline stages, planner and identity checks.

This package contains:
- FileScannerImpl: recursive traversal with a minimum-size filter
- HasherImpl: SHA-256 content fingerprints plus an xxHash64 quick pre-filter
- DuplicateGrouper: fingerprint -> group mapping, sorted by modification time
- DuplicateFinderImpl: size -> quick hash -> fingerprint pipeline
- DedupPlanner: canonical source selection, dry-run reporting and cloning
- Models: FileRecord, DuplicateGroup, DedupParams, DedupStats, ...

No CLI dependencies; usable as a library.
"""

from .scanner import FileScannerImpl
from .hasher import HasherImpl, Sha256Algorithm, XXHash64Algorithm
from .grouper import DuplicateGrouper
from .deduplicator import DuplicateFinderImpl
from .planner import DedupPlanner
from .identity import IdentityCheck, assert_same_file, check_same_file, same_identity
from .models import (
    FileRecord, DuplicateGroup, CloneAction, CloneResult, DedupPlan, DedupSummary,
    DedupParams, DedupStats, DEFAULT_MIN_SIZE, DEFAULT_MIN_SIZE_BYTES)

__all__ = [
    "FileScannerImpl",
    "HasherImpl",
    "Sha256Algorithm",
    "XXHash64Algorithm",
    "DuplicateGrouper",
    "DuplicateFinderImpl",
    "DedupPlanner",
    "IdentityCheck",
    "assert_same_file",
    "check_same_file",
    "same_identity",
    "FileRecord",
    "DuplicateGroup",
    "CloneAction",
    "CloneResult",
    "DedupPlan",
    "DedupSummary",
    "DedupParams",
    "DedupStats",
    "DEFAULT_MIN_SIZE",
    "DEFAULT_MIN_SIZE_BYTES",
]
