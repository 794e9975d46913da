"""
Unified command orchestrator for finding and cloning duplicates.
This is the single place the CLI (or any other caller) goes through:
scan -> find duplicates -> plan/clone.
"""
from typing import Callable, List, Optional, Tuple

from spacesaver.core.deduplicator import DuplicateFinderImpl
from spacesaver.core.grouper import DuplicateGrouper
from spacesaver.core.models import DedupParams, DedupStats, DedupSummary, DuplicateGroup
from spacesaver.core.planner import ActionCallback, DedupPlanner
from spacesaver.core.scanner import FileScannerImpl
from spacesaver.services.clone_service import CloneService

ProgressCallback = Callable[[str, int, Optional[int]], None]


class DeduplicationCommand:
    """
    Orchestrates the whole workflow for one run.

    Usage:
        params = DedupParams.from_human_readable("/data", "5MiB")
        command = DeduplicationCommand()
        groups, stats = command.find_duplicates(params)
        summary = command.clone_duplicates(params, real=True, on_action=printer)
    """

    def __init__(self, finder: DuplicateFinderImpl = None, clone_service: CloneService = None):
        self._finder = finder or DuplicateFinderImpl()
        self._planner = DedupPlanner(clone_service)
        self._grouper: Optional[DuplicateGrouper] = None
        self._stats: Optional[DedupStats] = None

    def find_duplicates(
            self,
            params: DedupParams,
            progress_callback: Optional[ProgressCallback] = None
    ) -> Tuple[List[DuplicateGroup], DedupStats]:
        """
        Scan `params.root_dir` and group its files by content.

        Returns:
            (actionable groups ordered by fingerprint, statistics)

        Raises:
            WalkError: the tree could not be traversed completely
            FingerprintError: a candidate file could not be read
        """
        scanner = FileScannerImpl(root_dir=params.root_dir, min_size=params.min_size_bytes)
        records = scanner.scan(progress_callback=progress_callback)

        self._grouper, self._stats = self._finder.find_duplicates(
            records,
            params,
            progress_callback=progress_callback
        )
        return self._grouper.actionable_groups(), self._stats

    def report(self, groups: List[DuplicateGroup], on_action: Optional[ActionCallback] = None) -> DedupSummary:
        """Dry run over already-found groups. Never touches the filesystem."""
        return self._planner.run(groups, real=False, on_action=on_action)

    def clone_duplicates(
            self,
            params: DedupParams,
            real: bool = False,
            on_action: Optional[ActionCallback] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> DedupSummary:
        """
        Find duplicates, then report (real=False) or clone (real=True) every target.

        Raises:
            CloneError: a clone failed fatally; earlier clones are kept
        """
        groups, _ = self.find_duplicates(params, progress_callback=progress_callback)
        return self._planner.run(groups, real=real, on_action=on_action)

    @property
    def stats(self) -> Optional[DedupStats]:
        """Statistics of the last find_duplicates() call."""
        return self._stats
