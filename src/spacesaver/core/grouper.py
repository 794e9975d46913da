"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Owns the fingerprint -> DuplicateGroup mapping for one run.
"""

import logging
from typing import Dict, Iterator, List, Optional

from spacesaver.core.models import DuplicateGroup, FileRecord
from spacesaver.utils.sequence_utils import insert_sorted

logger = logging.getLogger(__name__)


def _by_mtime(record: FileRecord) -> int:
    return record.mtime_ns


class DuplicateGrouper:
    """
    Groups FileRecords by content fingerprint.

    Invariants for every group:
    - files are sorted by modification time, earliest first (ties keep insertion order)
    - no two files share an identity, so the same inode reached twice is counted once
    """

    def __init__(self):
        self._groups: Dict[bytes, DuplicateGroup] = {}

    def insert(self, record: FileRecord, fingerprint: bytes) -> bool:
        """
        Adds `record` to the group for `fingerprint`.
        Returns False (and changes nothing) if the group already holds a file with
        the same identity.
        """
        group = self._groups.get(fingerprint)
        if group is None:
            self._groups[fingerprint] = DuplicateGroup(fingerprint=fingerprint, files=[record])
            return True

        if group.contains_identity(record.identity):
            logger.debug(f"Skipping {record.path}: same file already grouped")
            return False

        insert_sorted(group.files, record, key=_by_mtime)
        return True

    def get(self, fingerprint: bytes) -> Optional[DuplicateGroup]:
        return self._groups.get(fingerprint)

    def groups(self) -> List[DuplicateGroup]:
        """All groups, in discovery order. Callers must not rely on this order."""
        return list(self._groups.values())

    def actionable_groups(self) -> List[DuplicateGroup]:
        """Groups with two or more files, ordered by fingerprint for stable output."""
        return sorted(
            (g for g in self._groups.values() if g.is_actionable()),
            key=lambda g: g.fingerprint,
        )

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[DuplicateGroup]:
        return iter(self._groups.values())
