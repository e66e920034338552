"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Implements file grouping strategies over FileRecord objects.
Every grouping keeps only groups whose members span two or more volumes.
"""

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import List, Dict, Any, Callable, Optional, Tuple

from crossdedup.core.models import FileRecord, distinct_volumes
from crossdedup.core.hasher import HasherImpl, HashError
from crossdedup.core.interfaces import Hasher
from crossdedup.core.events import EventSink, NullSink, RunEvent, EventKind

logger = logging.getLogger(__name__)


class FileGrouperImpl:
    """
    Groups files by name, size and content digests.
    Uses an injected Hasher instance for flexibility and testability.
    Key computation may be spread over a thread pool; results are always
    collected before grouping, so the outcome does not depend on worker count.
    """

    def __init__(self, hasher: Optional[Hasher] = None, sink: Optional[EventSink] = None, workers: int = 1):
        self.hasher = hasher or HasherImpl()
        self.sink = sink or NullSink()
        self.workers = max(1, workers)

    def group_by_name(self, files: List[FileRecord]) -> Dict[str, List[FileRecord]]:
        """Groups files by basename."""
        return self._group_by(files, lambda f: f.basename)

    def group_by_size(self, files: List[FileRecord]) -> Dict[int, List[FileRecord]]:
        """Groups files by size. Records come back annotated with their inode key."""
        stats = self._compute_keys(files, self.hasher.stat_key)
        annotated = []
        for file, key in stats:
            size, inode_key = key
            annotated.append((file.with_inode(inode_key), size))
        return self._collect(annotated)

    def group_by_front_hash(self, files: List[FileRecord]) -> Dict[bytes, List[FileRecord]]:
        """Groups files by the hash of their first chunk."""
        return self._group_by(files, self.hasher.compute_front_hash)

    def group_by_full_hash(self, files: List[FileRecord]) -> Dict[bytes, List[FileRecord]]:
        """Groups files by full content digest."""
        return self._group_by(files, self.hasher.compute_full_hash)

    def _group_by(self, files: List[FileRecord], key_func: Callable[[FileRecord], Any]) -> Dict[Any, List[FileRecord]]:
        """
        Helper method to group files by any computed key.
        Args:
            files: List of files to group
            key_func: Function that computes a hashable key from a FileRecord
        Returns:
            Dict[key, List[FileRecord]] holding only groups spanning 2+ volumes
        """
        return self._collect(self._compute_keys(files, key_func))

    def _compute_keys(self, files: List[FileRecord], key_func: Callable[[FileRecord], Any]) -> List[Tuple[FileRecord, Any]]:
        """Computes keys for all files; files whose key fails are reported and dropped."""

        def safe_key(file: FileRecord):
            try:
                return key_func(file)
            except HashError as e:
                self._report_failure(file, e)
            return None

        if self.workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                keys = list(pool.map(safe_key, files))
        else:
            keys = [safe_key(f) for f in files]

        skipped_files = sum(1 for k in keys if k is None)
        if skipped_files > 0:
            logger.warning(f"Skipped {skipped_files} files due to hash computation errors")
        return [(f, k) for f, k in zip(files, keys) if k is not None]

    def _report_failure(self, file: FileRecord, error: HashError) -> None:
        logger.warning(f"Error processing {file.path}: {error}")
        self.sink.emit(RunEvent(EventKind.HASH_FAILED, message=str(error), path=file.path))

    @staticmethod
    def _collect(pairs: List[Tuple[FileRecord, Any]]) -> Dict[Any, List[FileRecord]]:
        groups = defaultdict(list)
        for file, key in pairs:
            groups[key].append(file)

        result = {}
        for key, group in groups.items():
            if len(distinct_volumes(group)) >= 2:  # Only groups reaching across volumes
                result[key] = sorted(group, key=lambda f: f.path)
        return result
