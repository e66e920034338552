"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/planner.py
Turns resolved groups into relink actions. Never touches the filesystem.

A duplicate at <its volume>/<relative path> is planned as a hardlink at
<canonical volume>/<relative path>, so its directory layout is reproduced on
the canonical's volume. Members on the canonical's own volume are left alone.
"""

import os
import logging
from typing import List, Optional

from crossdedup.core.models import ResolvedGroup, RelinkAction
from crossdedup.core.classifier import PathClassifier
from crossdedup.core.events import EventSink, NullSink, RunEvent, EventKind

logger = logging.getLogger(__name__)


class RelinkPlanner:
    def __init__(self, classifier: PathClassifier, sink: Optional[EventSink] = None):
        self.classifier = classifier
        self.sink = sink or NullSink()

    def plan(self, resolved: ResolvedGroup) -> List[RelinkAction]:
        canonical = resolved.canonical
        if canonical is None:
            return []
        if canonical.volume_id is None:
            self.sink.emit(RunEvent(
                EventKind.PLANNING_INCONSISTENCY,
                message="canonical file has no volume",
                path=canonical.path,
                group=resolved.group
            ))
            return []

        actions = []
        for member in resolved.group.files:
            if member.path == canonical.path:
                continue
            if member.volume_id is None:
                self.sink.emit(RunEvent(
                    EventKind.PLANNING_INCONSISTENCY,
                    message="duplicate has no volume",
                    path=member.path,
                    group=resolved.group
                ))
                continue
            if member.volume_id == canonical.volume_id:
                logger.debug(f"Same volume as canonical, leaving alone: {member.path}")
                continue
            if member.inode_key is not None and member.inode_key == canonical.inode_key:
                logger.debug(f"Already the same inode as canonical: {member.path}")
                continue

            relative = self.classifier.relative_path(member)
            destination_path = os.path.normpath(canonical.volume_id.rstrip(os.sep) + relative)
            action = RelinkAction(
                source_path=member.path,
                canonical_path=canonical.path,
                destination_directory=os.path.dirname(destination_path),
                destination_path=destination_path,
                size=resolved.group.size,
            )
            actions.append(action)
            self.sink.emit(RunEvent(
                EventKind.ACTION_PLANNED,
                message=f"relink to {destination_path}",
                path=member.path,
                group=resolved.group,
                action=action
            ))
        return actions

    def plan_all(self, groups: List[ResolvedGroup]) -> List[RelinkAction]:
        actions = []
        for resolved in groups:
            actions.extend(self.plan(resolved))
        return actions
