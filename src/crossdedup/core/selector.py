"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/selector.py
Chooses the canonical copy of every content group.
"""

import os
import logging
from typing import Iterable, Optional

from crossdedup.core.models import ContentGroup, ResolvedGroup, FileRecord, DEFAULT_PRIORITY_NAMES
from crossdedup.core.events import EventSink, NullSink, RunEvent, EventKind

logger = logging.getLogger(__name__)


class CanonicalSelector:
    """
    Picks the first member, in lexicographic path order, that has a path
    segment equal (case-insensitively) to one of the priority names.
    """

    def __init__(self, priority_names: Iterable[str] = DEFAULT_PRIORITY_NAMES, sink: Optional[EventSink] = None):
        self.priority_names = frozenset(n.lower() for n in priority_names)
        self.sink = sink or NullSink()

    def is_priority(self, path: str) -> bool:
        segments = os.path.normpath(path).split(os.sep)
        return any(segment.lower() in self.priority_names for segment in segments if segment)

    def select(self, group: ContentGroup) -> ResolvedGroup:
        canonical: Optional[FileRecord] = None
        for file in sorted(group.files, key=lambda f: f.path):
            if self.is_priority(file.path):
                canonical = file
                break

        if canonical is None:
            logger.debug(f"No priority copy among {[f.path for f in group.files]}")
            self.sink.emit(RunEvent(
                EventKind.NO_CANONICAL,
                message=f"no priority copy among {group.duplicate_count} files on {len(group.volume_ids)} volumes",
                path=group.files[0].path if group.files else None,
                group=group
            ))
        else:
            self.sink.emit(RunEvent(
                EventKind.CANONICAL_SELECTED,
                message="priority copy selected",
                path=canonical.path,
                group=group
            ))
        return ResolvedGroup(group=group, canonical=canonical)
