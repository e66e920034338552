"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

deduplicator.py
Runs the discovery pipeline over FileRecord objects:
    name (Phase 1) → size → front hash → full digest (Phase 2) → canonical selection → planning
Each step completes before the next one starts.
"""
import time
from typing import List, Optional, Callable, Tuple

from crossdedup.core.models import FileRecord, ContentGroup, ResolvedGroup, RelinkAction, RunStats
from crossdedup.core.classifier import PathClassifier
from crossdedup.core.grouper import FileGrouperImpl
from crossdedup.core.stages import NameStage, ContentStage
from crossdedup.core.selector import CanonicalSelector
from crossdedup.core.planner import RelinkPlanner
from crossdedup.core.events import EventSink, NullSink


# =============================
# Main Deduplicator Class
# =============================
class DeduplicatorImpl:
    """
    Finds content-identical files spread over several volumes and plans
    the relink actions for them. Collects per-stage statistics.
    """
    def __init__(
        self,
        classifier: PathClassifier,
        selector: Optional[CanonicalSelector] = None,
        grouper: Optional[FileGrouperImpl] = None,
        sink: Optional[EventSink] = None,
        stats: Optional[RunStats] = None
    ):
        self.sink = sink or NullSink()
        self.classifier = classifier
        self.grouper = grouper or FileGrouperImpl(sink=self.sink)
        self.selector = selector or CanonicalSelector(sink=self.sink)
        self.planner = RelinkPlanner(classifier, sink=self.sink)
        self.stats = stats or RunStats()

    def find_groups(
        self,
        files: List[FileRecord],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[ContentGroup]:
        """
        Phase 1 then Phase 2.
        Args:
            files: Classified records of every enumerated file
            stopped_flag: Function that returns True if operation should be stopped.
            progress_callback: Reports progress per stage.
        Returns:
            Content groups spanning two or more volumes
        """
        start_time = time.time()
        name_groups = NameStage(self.grouper, sink=self.sink).process(
            files, stopped_flag=stopped_flag, progress_callback=progress_callback
        )
        self.stats.update_stage(
            "name",
            groups_found=len(name_groups),
            files_processed=sum(len(g.files) for g in name_groups),
            duration=time.time() - start_time
        )

        start_time = time.time()
        content_groups = ContentStage(self.grouper, sink=self.sink).process(
            name_groups, stopped_flag=stopped_flag, progress_callback=progress_callback
        )
        self.stats.update_stage(
            "full",
            groups_found=len(content_groups),
            files_processed=sum(len(g.files) for g in content_groups),
            duration=time.time() - start_time
        )
        return content_groups

    def plan(self, groups: List[ContentGroup]) -> Tuple[List[ResolvedGroup], List[RelinkAction]]:
        """Selects a canonical file per group and plans relinks for the resolved ones."""
        start_time = time.time()
        resolved = [self.selector.select(group) for group in groups]
        actions = self.planner.plan_all(resolved)
        self.stats.update_stage(
            "plan",
            groups_found=sum(1 for r in resolved if r.has_canonical),
            files_processed=len(actions),
            duration=time.time() - start_time
        )
        return resolved, actions
