"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

deduplicator.py
Runs scanned files through the stage pipeline:
    - quick check on:  size -> quick hash -> full fingerprint
    - quick check off: size -> full fingerprint
and collects statistics for every stage.
"""
import time
from typing import Callable, List, Optional, Tuple

from spacesaver.core.grouper import DuplicateGrouper
from spacesaver.core.hasher import HasherImpl
from spacesaver.core.interfaces import Hasher
from spacesaver.core.models import DedupParams, DedupStats, FileRecord
from spacesaver.core.stages import FingerprintStage, QuickHashStage, SizeStage


class DuplicateFinderImpl:
    """
    Builds a fresh DuplicateGrouper for every call. Nothing is shared between runs.
    """
    def __init__(self, hasher: Hasher = None):
        self.hasher = hasher or HasherImpl()

    def find_duplicates(
        self,
        records: List[FileRecord],
        params: DedupParams,
        progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[DuplicateGrouper, DedupStats]:
        """
        Args:
            records: files returned by the scanner, in walk order
            params: run configuration (quick_check, workers)
            progress_callback: reports progress per stage
        Returns:
            Tuple[DuplicateGrouper, DedupStats]
        Raises:
            FingerprintError: a candidate could not be read; the run must be aborted
        """
        stats = DedupStats()
        stats.files_scanned = len(records)
        grouper = DuplicateGrouper()
        total_start_time = time.time()

        size_stage = SizeStage()
        start_time = time.time()
        candidates, groups = size_stage.process(records)
        stats.update_stage(size_stage.name, groups, len(candidates), time.time() - start_time)

        if params.quick_check and candidates:
            quick_stage = QuickHashStage(self.hasher, workers=params.workers)
            start_time = time.time()
            candidates, groups = quick_stage.process(candidates, progress_callback=progress_callback)
            stats.update_stage(quick_stage.name, groups, len(candidates), time.time() - start_time)

        full_stage = FingerprintStage(self.hasher, workers=params.workers)
        start_time = time.time()
        full_stage.process(candidates, grouper, progress_callback=progress_callback)
        actionable = grouper.actionable_groups()
        stats.files_fingerprinted = len(candidates)
        stats.update_stage(
            full_stage.name,
            len(actionable),
            sum(len(g.files) for g in actionable),
            time.time() - start_time
        )

        stats.total_time = time.time() - total_start_time
        return grouper, stats
