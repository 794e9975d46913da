"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/planner.py
Turns duplicate groups into clone actions and, in real mode, performs them.
"""
import logging
from typing import Callable, Iterable, Optional

from spacesaver.core.models import CloneAction, CloneResult, DedupPlan, DedupSummary, DuplicateGroup
from spacesaver.services.clone_service import CloneService

logger = logging.getLogger(__name__)

ActionCallback = Callable[[CloneAction, Optional[CloneResult]], None]


class DedupPlanner:
    """
    The canonical source of a group is its earliest-modified file; every other
    file is a clone target. The source itself is never cloned.
    """

    def __init__(self, clone_service: CloneService = None):
        self.clone_service = clone_service or CloneService()

    @staticmethod
    def plan(groups: Iterable[DuplicateGroup]) -> DedupPlan:
        plan = DedupPlan()
        for group in groups:
            if not group.is_actionable():
                continue
            source = group.source
            for target in group.targets:
                plan.actions.append(CloneAction(source=source, target=target))
        return plan

    def run(
        self,
        groups: Iterable[DuplicateGroup],
        real: bool = False,
        on_action: Optional[ActionCallback] = None
    ) -> DedupSummary:
        """
        Report mode (real=False) never touches the filesystem: on_action receives
        (action, None) for every target.
        Real mode clones every target onto its source and passes the CloneResult.

        Raises:
            CloneError: a clone failed for a reason other than missing platform
                        support; actions already performed are not rolled back
        """
        summary = DedupSummary(real=real)
        plan = self.plan(groups)
        logger.debug(f"Plan: {len(plan)} targets, {plan.total_bytes} bytes")

        for action in plan.actions:
            result = None
            if real:
                result = self.clone_service.clone_file(action.source.path, action.target.path)
                if result is CloneResult.SKIPPED:
                    logger.warning(f"Cloning not supported for {action.target.path}, left unchanged")
            summary.record(action, result)
            if on_action:
                on_action(action, result)

        return summary
