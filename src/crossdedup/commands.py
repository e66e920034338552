"""
Unified command orchestrator for cross-volume relinking.
This is the SINGLE source of truth for the workflow — the CLI only parses,
confirms and prints.
"""
import logging
import time
from typing import List, Optional, Callable

from crossdedup.core.models import RelinkParams, FileRecord
from crossdedup.core.classifier import PathClassifier
from crossdedup.core.scanner import FileScannerImpl
from crossdedup.core.hasher import HasherImpl
from crossdedup.core.grouper import FileGrouperImpl
from crossdedup.core.selector import CanonicalSelector
from crossdedup.core.deduplicator import DeduplicatorImpl
from crossdedup.core.executor import RelinkExecutor
from crossdedup.core.events import RunReport
from crossdedup.core.interfaces import Hasher, FileSystem
from crossdedup.services.file_service import FileService

logger = logging.getLogger(__name__)


class RelinkCommand:
    """
    Orchestrates the entire workflow:
    1. Validate volume roots and resolve exclusions per volume
    2. Enumerate files (walk volumes or read an input list)
    3. Find cross-volume duplicate groups and plan relinks
    4. Apply (or simulate) every planned action

    Usage:
        params = RelinkParams(volume_roots=["/mnt/disk1", "/mnt/disk2"], dry_run=True)
        report = RelinkCommand().execute(params)
        for result in report.results:
            print(result.status, result.action.source_path)

    Passing an existing RunReport lets the caller attach listeners before
    anything is emitted.
    """

    def __init__(self, hasher: Optional[Hasher] = None, fs: Optional[FileSystem] = None):
        self._hasher = hasher
        self._fs = fs
        self._files: List[FileRecord] = []

    def execute(
            self,
            params: RelinkParams,
            report: Optional[RunReport] = None,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> RunReport:
        """
        Execute one run with the given parameters.

        Raises:
            ConfigurationError: If a volume root is missing or the input list cannot be read
        """
        report = report or RunReport()
        report.dry_run = params.dry_run
        total_start = time.time()

        # Step 1: Volumes and exclusions
        classifier = PathClassifier(params.volume_roots)
        classifier.validate_roots()
        exclusions = classifier.resolve_exclusions(params.exclusion_patterns)

        # Step 2: Enumerate
        scanner = FileScannerImpl(
            volume_roots=classifier.volume_roots,
            exclusions=exclusions,
            input_file=params.input_file,
            sink=report
        )
        start_time = time.time()
        self._files = [
            classifier.classify(path)
            for path in scanner.scan(stopped_flag=stopped_flag, progress_callback=progress_callback)
        ]
        report.stats.update_stage("scan", groups_found=0, files_processed=len(self._files),
                                  duration=time.time() - start_time)
        logger.info(f"Enumerated {len(self._files)} files on {len(classifier.volume_roots)} volume(s)")

        # Step 3: Discover and plan
        deduplicator = DeduplicatorImpl(
            classifier,
            selector=CanonicalSelector(params.priority_names, sink=report),
            grouper=FileGrouperImpl(self._hasher or HasherImpl(), sink=report, workers=params.workers),
            sink=report,
            stats=report.stats
        )
        report.groups = deduplicator.find_groups(
            self._files, stopped_flag=stopped_flag, progress_callback=progress_callback
        )
        report.resolved, report.actions = deduplicator.plan(report.groups)
        logger.info(f"Found {len(report.groups)} cross-volume duplicate groups, "
                    f"{len(report.actions)} relink actions planned")

        # Step 4: Apply
        executor = RelinkExecutor(
            dry_run=params.dry_run,
            fs=self._fs or FileService(use_trash=params.use_trash),
            sink=report
        )
        start_time = time.time()
        report.results = executor.execute_all(
            report.actions, stopped_flag=stopped_flag, progress_callback=progress_callback
        )
        report.stats.update_stage("relink", groups_found=len(report.applied),
                                  files_processed=len(report.results), duration=time.time() - start_time)

        report.stats.total_time = time.time() - total_start
        return report

    def get_files(self) -> List[FileRecord]:
        """Get enumerated files after execution."""
        return self._files.copy()
