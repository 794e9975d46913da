"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Pipeline stages that narrow scanned files down to duplicate groups.

STAGE CONTRACTS
---------------
SizeStage        : keeps files whose size is shared with at least one other file
QuickHashStage   : keeps files whose (size, xxHash64 of the first chunk) is shared
FingerprintStage : computes the full SHA-256 fingerprint and fills the grouper

Filtering stages return the surviving records in their original (walk) order,
so the grouper always sees records in the same order whichever stages ran and
however many workers hashed them.

CONCURRENCY
-----------
Hashing may fan out over a thread pool. Results are consumed in submission
order by the calling thread, which is the only writer to the grouper. The first
failure cancels every pending job and is re-raised.
"""

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Hashable, Iterator, List, Optional, Tuple, TypeVar

from spacesaver.core.grouper import DuplicateGrouper
from spacesaver.core.interfaces import Hasher
from spacesaver.core.models import FileRecord, Stage

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[str, int, Optional[int]], None]


def map_in_order(func: Callable[[str], T], paths: List[str], workers: int = 1) -> Iterator[T]:
    """
    Yields func(path) for every path, in order.
    With workers > 1 the calls run on a thread pool; on the first exception all
    outstanding calls are cancelled and the exception propagates.
    """
    if workers <= 1 or len(paths) <= 1:
        for path in paths:
            yield func(path)
        return

    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="spacesaver-hash")
    try:
        yield from executor.map(func, paths)
    except BaseException:
        executor.shutdown(wait=True, cancel_futures=True)
        raise
    executor.shutdown(wait=True)


def _keep_shared(records: List[FileRecord], keys: List[Hashable]) -> Tuple[List[FileRecord], int]:
    """Keeps records whose key occurs more than once. Returns (records, number of shared keys)."""
    counts = Counter(keys)
    kept = [r for r, k in zip(records, keys) if counts[k] > 1]
    shared = sum(1 for c in counts.values() if c > 1)
    return kept, shared


class SizeStage:
    name = Stage.SIZE.value

    def process(self, records: List[FileRecord]) -> Tuple[List[FileRecord], int]:
        kept, groups = _keep_shared(records, [r.size for r in records])
        logger.debug(f"Size stage: {len(kept)} of {len(records)} files share a size ({groups} groups)")
        return kept, groups


class QuickHashStage:
    name = Stage.QUICK.value

    def __init__(self, hasher: Hasher, workers: int = 1):
        self.hasher = hasher
        self.workers = workers

    def process(
        self,
        records: List[FileRecord],
        progress_callback: Optional[ProgressCallback] = None
    ) -> Tuple[List[FileRecord], int]:
        keys = []
        paths = [r.path for r in records]
        for i, (digest, record) in enumerate(
                zip(map_in_order(self.hasher.quick_hash, paths, self.workers), records), 1):
            keys.append((record.size, digest))
            if progress_callback:
                progress_callback(self.name, i, len(records))

        kept, groups = _keep_shared(records, keys)
        logger.debug(f"Quick hash stage: {len(kept)} of {len(records)} files remain ({groups} groups)")
        return kept, groups


class FingerprintStage:
    name = Stage.FULL.value

    def __init__(self, hasher: Hasher, workers: int = 1):
        self.hasher = hasher
        self.workers = workers

    def process(
        self,
        records: List[FileRecord],
        grouper: DuplicateGrouper,
        progress_callback: Optional[ProgressCallback] = None
    ) -> int:
        """Fingerprints every record and inserts it into `grouper`. Returns the number inserted."""
        inserted = 0
        paths = [r.path for r in records]
        for i, (fingerprint, record) in enumerate(
                zip(map_in_order(self.hasher.fingerprint, paths, self.workers), records), 1):
            if grouper.insert(record, fingerprint):
                inserted += 1
            if progress_callback:
                progress_callback(self.name, i, len(records))
        return inserted
