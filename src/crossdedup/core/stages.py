"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Candidate-narrowing stages of the cross-volume duplicate engine.

STAGES
------
NameStage     : Phase 1. Groups every classified file by basename and keeps only
                groups spanning two or more volumes. No file is opened.
ContentStage  : Phase 2. Splits Phase 1 candidates by size, then by an xxHash64 of
                the front chunk, then by the full SHA-256 digest. Each split is
                re-filtered to groups spanning two or more volumes: two files with
                the same name on different volumes may still differ in content.

STAGE CONTRACTS
---------------
Each stage implements `process()` which:
  • Accepts the output of the previous step
  • Returns refined groups for the next step
  • Reports progress via callback (stage name, processed count, total count)
  • Respects cancellation via stopped_flag callback

Renamed duplicates are invisible to the engine: files whose basenames differ
are never compared.
"""

import logging
from typing import List, Optional, Callable, Tuple

from crossdedup.core.models import FileRecord, NameGroup, ContentGroup
from crossdedup.core.grouper import FileGrouperImpl
from crossdedup.core.events import EventSink, NullSink, RunEvent, EventKind

logger = logging.getLogger(__name__)


class NameStage:
    def __init__(self, grouper: FileGrouperImpl, sink: Optional[EventSink] = None):
        self.grouper = grouper
        self.sink = sink or NullSink()

    def process(
            self,
            files: List[FileRecord],
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[NameGroup]:
        """
        Group by basename.
        Returns NameGroups whose members live on 2+ distinct volumes, sorted by name.
        """
        if stopped_flag and stopped_flag():
            return []

        classified = []
        for file in files:
            if file.is_classified:
                classified.append(file)
            else:
                logger.warning(f"File is not on any configured volume, ignoring: {file.path}")
                self.sink.emit(RunEvent(
                    EventKind.PLANNING_INCONSISTENCY,
                    message="path does not belong to any configured volume",
                    path=file.path
                ))

        name_groups = self.grouper.group_by_name(classified)
        groups = [
            NameGroup(basename=name, files=files_list)
            for name, files_list in sorted(name_groups.items())
        ]

        if progress_callback:
            total_files = len(files)
            progress_callback("Name grouping", total_files, total_files)

        logger.debug(f"Phase 1: {len(groups)} basename groups span multiple volumes")
        return groups


class ContentStage:
    def __init__(self, grouper: FileGrouperImpl, sink: Optional[EventSink] = None):
        self.grouper = grouper
        self.sink = sink or NullSink()

    def candidates(self, groups: List[NameGroup]) -> List[FileRecord]:
        """Flattens Phase 1 groups into the list of files worth hashing."""
        files = []
        for group in groups:
            files.extend(group.files)
        return files

    def split_by_size(self, files: List[FileRecord]) -> List[Tuple[int, List[FileRecord]]]:
        """Largest sizes first."""
        size_groups = self.grouper.group_by_size(files)
        return [(size, size_groups[size]) for size in sorted(size_groups, reverse=True)]

    def split_by_front_hash(self, buckets: List[Tuple[int, List[FileRecord]]]) -> List[Tuple[int, List[FileRecord]]]:
        result = []
        for size, bucket in buckets:
            front_groups = self.grouper.group_by_front_hash(bucket)
            result.extend((size, front_groups[key]) for key in sorted(front_groups))
        return result

    def process(
            self,
            groups: List[NameGroup],
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[ContentGroup]:
        """
        Hash only Phase 1 candidates and return content groups spanning 2+ volumes.
        """
        if stopped_flag and stopped_flag():
            return []

        files = self.candidates(groups)
        total_files = len(files)

        buckets = self.split_by_size(files)
        if progress_callback:
            progress_callback("Size grouping", total_files, total_files)
        if stopped_flag and stopped_flag():
            return []

        buckets = self.split_by_front_hash(buckets)
        if progress_callback:
            progress_callback("Front-chunk Hash", total_files, total_files)

        content_groups = []
        processed_files = 0
        for size, bucket in buckets:
            if stopped_flag and stopped_flag():
                return []

            full_groups = self.grouper.group_by_full_hash(bucket)
            for digest in sorted(full_groups):
                group = ContentGroup(digest=digest, size=size, files=full_groups[digest])
                content_groups.append(group)
                self.sink.emit(RunEvent(
                    EventKind.GROUP_DISCOVERED,
                    message=f"{group.duplicate_count} copies on {len(group.volume_ids)} volumes",
                    path=group.files[0].path,
                    group=group
                ))

            processed_files += len(bucket)
            if progress_callback:
                progress_callback("Full Hash", processed_files, total_files)

        logger.debug(f"Phase 2: {len(content_groups)} content groups span multiple volumes")
        return content_groups
