"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and domain logic for duplicate detection and cloning.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from spacesaver.utils.size_spec import SizeSpec

DEFAULT_MIN_SIZE = "5MiB"
DEFAULT_MIN_SIZE_BYTES = 5 * 1024 * 1024

# (st_dev, st_ino)
Identity = Tuple[int, int]


# =============================
# Enums
# =============================

class CloneResult(Enum):
    """Outcome of a single clone operation."""
    CLONED = "cloned"
    SKIPPED = "skipped"  # platform cannot clone this pair; target untouched
    COPIED = "copied"    # plain-copy fallback backend was used

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    SIZE = "size"
    QUICK = "quick"
    FULL = "full"

    @property
    def display_name(self) -> str:
        mapping = {
            Stage.SIZE: "📁 Size Groups",
            Stage.QUICK: "📄 Quick Hash Groups",
            Stage.FULL: "🔍 Full Content Hash Groups",
        }
        return mapping.get(self, self.value)


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileRecord:
    """
    A regular file found during traversal.
    Immutable: a record describes the file as it was when it was scanned.
    """
    path: str
    size: int  # in bytes
    mtime_ns: int
    identity: Identity

    @classmethod
    def from_stat(cls, path: str, stat_result: os.stat_result) -> "FileRecord":
        return cls(
            path=path,
            size=stat_result.st_size,
            mtime_ns=stat_result.st_mtime_ns,
            identity=(stat_result.st_dev, stat_result.st_ino),
        )

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


@dataclass
class DuplicateGroup:
    """
    Files sharing one content fingerprint.
    Kept sorted by modification time (earliest first) by the grouper; the first
    file is the canonical source, the rest are clone targets.
    """
    fingerprint: bytes
    files: List[FileRecord] = field(default_factory=list)

    @property
    def hexdigest(self) -> str:
        return self.fingerprint.hex()

    @property
    def source(self) -> FileRecord:
        return self.files[0]

    @property
    def targets(self) -> List[FileRecord]:
        return self.files[1:]

    @property
    def reclaimable_bytes(self) -> int:
        return sum(f.size for f in self.targets)

    def contains_identity(self, identity: Identity) -> bool:
        return any(f.identity == identity for f in self.files)

    def is_actionable(self) -> bool:
        """True if this group contains at least two files."""
        return len(self.files) >= 2

    def __repr__(self):
        return f"<DuplicateGroup fingerprint={self.hexdigest[:12]}, count={len(self.files)}>"


@dataclass(frozen=True)
class CloneAction:
    """Replace `target` with a clone of `source`."""
    source: FileRecord
    target: FileRecord


@dataclass
class DedupPlan:
    actions: List[CloneAction] = field(default_factory=list)

    @property
    def total_bytes(self) -> int:
        return sum(a.target.size for a in self.actions)

    def __len__(self) -> int:
        return len(self.actions)


@dataclass
class DedupSummary:
    """
    Result of running a plan.
    possible_bytes counts every target in both modes; reclaimed_bytes counts only
    targets that were actually cloned.
    """
    real: bool = False
    targets: int = 0
    possible_bytes: int = 0
    reclaimed_bytes: int = 0
    cloned: int = 0
    skipped: int = 0
    copied: int = 0

    def record(self, action: CloneAction, result: Optional[CloneResult]) -> None:
        self.targets += 1
        self.possible_bytes += action.target.size
        if result is CloneResult.CLONED:
            self.cloned += 1
            self.reclaimed_bytes += action.target.size
        elif result is CloneResult.SKIPPED:
            self.skipped += 1
        elif result is CloneResult.COPIED:
            self.copied += 1


class DedupStats:
    """
    Statistics collected while finding duplicates.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.files_scanned: int = 0
        self.files_fingerprinted: int = 0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration
    def print_summary(self) -> str:
        lines = [
            "📊 Deduplication Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"Files scanned: {self.files_scanned} / fingerprinted: {self.files_fingerprinted}\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            try:
                label = Stage(stage).display_name
            except ValueError:
                label = stage.title()
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


@dataclass
class DedupParams:
    """Parameters for a find/clone run with validation. Interface-agnostic."""
    root_dir: str
    min_size_bytes: int = DEFAULT_MIN_SIZE_BYTES
    quick_check: bool = True
    workers: int = 1

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.workers < 1:
            raise ValueError("Number of workers must be at least 1")

    @staticmethod
    def from_human_readable(
            root_dir: str,
            min_size_str: str = DEFAULT_MIN_SIZE,
            quick_check: bool = True,
            workers: int = 1,
    ) -> "DedupParams":
        """
        Factory method to create params from human-readable inputs.
        Raises SizeSpecError for an unparseable size.
        """
        return DedupParams(
            root_dir=root_dir,
            min_size_bytes=SizeSpec.parse(min_size_str),
            quick_check=quick_check,
            workers=workers,
        )
