"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/executor.py
Applies relink actions: link first, verify, then remove the duplicate.

Per action:
    1. pre-check      destination free, or already the canonical file (skipped)
    2. ensure dir     create the destination directory tree
    3. link           hardlink canonical -> destination, verify same inode
    4. remove         remove the duplicate; on failure the new link is rolled back
    5. post-check     destination must still be the canonical inode

At no point is a duplicate removed before a verified link to the same data exists.
In a dry run the pre-check still runs against the real filesystem; steps 2-4 are
only logged and assumed to succeed, unless a file blocks the destination directory.
"""

import logging
import os
from typing import List, Optional, Callable, Set

from crossdedup.core.models import RelinkAction, ActionResult, ActionStatus
from crossdedup.core.events import EventSink, NullSink, RunEvent, EventKind
from crossdedup.core.interfaces import FileSystem
from crossdedup.services.file_service import FileService

logger = logging.getLogger(__name__)


class RelinkExecutor:
    """
    Executes RelinkActions one at a time. A failed action never stops the run.

    Attributes:
        dry_run: Simulate mutations instead of performing them
        fs: Filesystem service (FileService by default)
        sink: Receives ACTION_APPLIED / ACTION_SKIPPED / ACTION_FAILED events
    """

    def __init__(self, dry_run: bool = True, fs: Optional[FileSystem] = None, sink: Optional[EventSink] = None):
        self.dry_run = dry_run
        self.fs = fs or FileService()
        self.sink = sink or NullSink()
        self._simulated_dirs: Set[str] = set()
        self._simulated_links: Set[str] = set()

    def execute_all(
            self,
            actions: List[RelinkAction],
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[ActionResult]:
        results = []
        total = len(actions)
        for index, action in enumerate(actions, 1):
            if stopped_flag and stopped_flag():
                logger.info(f"Stopped after {index - 1} of {total} actions")
                break
            results.append(self.execute(action))
            if progress_callback:
                progress_callback("Relinking", index, total)
        return results

    def execute(self, action: RelinkAction) -> ActionResult:
        try:
            result = self._execute(action)
        except OSError as e:
            result = self._failed(action, f"unexpected filesystem error: {e}")

        kind = {
            ActionStatus.APPLIED: EventKind.ACTION_APPLIED,
            ActionStatus.SKIPPED: EventKind.ACTION_SKIPPED,
            ActionStatus.FAILED: EventKind.ACTION_FAILED,
        }[result.status]
        self.sink.emit(RunEvent(kind, message=result.reason, path=action.source_path, action=action, result=result))
        return result

    # =============================
    # State machine
    # =============================

    def _execute(self, action: RelinkAction) -> ActionResult:
        fs = self.fs

        # 1. Pre-check, always against real state
        if not fs.exists(action.canonical_path):
            return self._failed(action, f"canonical file is missing: {action.canonical_path}")
        if fs.same_file(action.source_path, action.canonical_path):
            return self._failed(action, "source is the canonical file, refusing to remove it")
        if fs.exists(action.destination_path):
            if fs.same_file(action.destination_path, action.canonical_path):
                return ActionResult(action, ActionStatus.SKIPPED, "destination already links to canonical file",
                                    simulated=self.dry_run)
            return self._failed(action, f"conflict: {action.destination_path} already exists and is a different file")
        if not fs.exists(action.source_path):
            return self._failed(action, f"source file is missing: {action.source_path}")

        if self.dry_run and action.destination_path in self._simulated_links:
            return ActionResult(action, ActionStatus.SKIPPED, "destination would already link to canonical file",
                                simulated=True)

        if self.dry_run:
            return self._simulate(action)

        # 2. Ensure destination directory
        if not fs.is_dir(action.destination_directory):
            try:
                fs.make_dirs(action.destination_directory)
                logger.debug(f"Created directory {action.destination_directory}")
            except OSError as e:
                return self._failed(action, f"cannot create directory {action.destination_directory}: {e}")

        # 3. Link and verify
        try:
            fs.link(action.canonical_path, action.destination_path)
        except FileExistsError:
            return self._failed(action, f"conflict: {action.destination_path} appeared before linking")
        except OSError as e:
            return self._failed(action, f"cannot create hardlink {action.destination_path}: {e}")

        if not fs.same_file(action.destination_path, action.canonical_path):
            self._rollback_link(action)
            return self._failed(action, "new hardlink does not point to the canonical file")

        # 4. Remove the duplicate
        try:
            fs.remove(action.source_path)
        except OSError as e:
            self._rollback_link(action)
            return self._failed(action, f"cannot remove {action.source_path}: {e}")

        # 5. Post-check
        if not fs.same_file(action.destination_path, action.canonical_path):
            logger.critical(f"Duplicate removed but link is gone: {action.source_path} -> {action.destination_path}")
            return ActionResult(action, ActionStatus.FAILED,
                                "duplicate removed but hardlink could not be confirmed afterwards",
                                data_loss=True)

        return ActionResult(action, ActionStatus.APPLIED, f"hardlinked at {action.destination_path}")

    def _simulate(self, action: RelinkAction) -> ActionResult:
        directory = action.destination_directory
        if not self.fs.is_dir(directory) and directory not in self._simulated_dirs:
            blocker = self._blocking_file(directory)
            if blocker:
                return self._failed(action, f"cannot create directory {directory}: a file is in the way at {blocker}")
            logger.info(f"DRY RUN: would create directory {directory}")
            self._simulated_dirs.add(directory)
        logger.info(f"DRY RUN: would link {action.canonical_path} -> {action.destination_path}")
        logger.info(f"DRY RUN: would remove {action.source_path}")
        self._simulated_links.add(action.destination_path)
        return ActionResult(action, ActionStatus.APPLIED, f"would hardlink at {action.destination_path}",
                            simulated=True)

    def _blocking_file(self, directory: str) -> Optional[str]:
        """Nearest existing ancestor of directory, if it is not a directory."""
        path = directory
        while path not in self._simulated_dirs and not self.fs.exists(path):
            parent = os.path.dirname(path)
            if parent == path:
                return None
            path = parent
        if path in self._simulated_dirs or self.fs.is_dir(path):
            return None
        return path

    def _rollback_link(self, action: RelinkAction) -> None:
        try:
            self.fs.unlink(action.destination_path)
            logger.debug(f"Rolled back hardlink {action.destination_path}")
        except OSError as e:
            logger.error(f"Could not roll back hardlink {action.destination_path}: {e}")

    def _failed(self, action: RelinkAction, reason: str) -> ActionResult:
        return ActionResult(action, ActionStatus.FAILED, reason, simulated=self.dry_run)
