"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Enumerates regular files across all volume roots.
Features:
- Walks every volume root with os.walk, pruning excluded directories before descent
- Skips symbolic links, system trash folders and unreadable directories
- Reports per-subtree errors without aborting the scan
- Alternatively reads a prepared list of paths (one per line) instead of walking
"""

import os
import sys
from typing import List, Optional, Callable, Iterator
from pathlib import Path
import time
import logging

from crossdedup.core.models import ExclusionRule, ConfigurationError
from crossdedup.core.events import EventSink, NullSink, RunEvent, EventKind

logger = logging.getLogger(__name__)


class FileScannerImpl:
    """
    Scans volume roots recursively and yields regular file paths.

    Attributes:
        volume_roots: Roots to walk, in configured order
        exclusions: Resolved exclusion rules (see PathClassifier.resolve_exclusions)
        input_file: Optional path list to read instead of walking the volumes
        sink: Receives ENUMERATION_ERROR events
    """

    def __init__(
        self,
        volume_roots: List[str],
        exclusions: Optional[List[ExclusionRule]] = None,
        input_file: Optional[str] = None,
        sink: Optional[EventSink] = None
    ):
        self.volume_roots = [os.path.normpath(r) for r in volume_roots]
        self.exclusions = [rule for rule in (exclusions or []) if rule.is_active]
        self.input_file = input_file
        self.sink = sink or NullSink()

    def scan(self,
             stopped_flag: Optional[Callable[[], bool]] = None,
             progress_callback: Optional[Callable[[str, int, object], None]] = None) -> Iterator[str]:
        """
        Lazily yields file paths. Each call starts a fresh enumeration.
        """
        if self.input_file:
            yield from self._read_input_file(stopped_flag, progress_callback)
            return

        processed_files = 0
        progress_interval = 5000
        start_time = time.time()

        for root_dir in self.volume_roots:
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                return

            if not os.path.isdir(root_dir):
                self._report_error(root_dir, "Volume root does not exist or is not a directory")
                continue

            logger.debug(f"Scanning volume: {root_dir}")
            for root, dirs, files in os.walk(root_dir, onerror=self._on_walk_error):
                if stopped_flag and stopped_flag():
                    logger.debug("Scan interrupted by user")
                    return

                # Pre-filter subdirectories BEFORE os.walk enters them
                dirs[:] = sorted(d for d in dirs if self._prefilter_dirs(Path(root) / d))

                for filename in sorted(files):
                    path = os.path.join(root, filename)
                    if self._is_regular_file(path):
                        yield path
                    processed_files += 1
                    if progress_callback and processed_files % progress_interval == 0:
                        progress_callback('scanning', processed_files, None)

        if progress_callback:
            progress_callback('scanning', processed_files, None)
        logger.debug(f"Scan of {len(self.volume_roots)} volume(s) finished in {time.time() - start_time:.2f}s, "
                     f"{processed_files} entries seen")

    def _read_input_file(self, stopped_flag, progress_callback) -> Iterator[str]:
        """Yields trimmed, non-empty lines of the input list, skipping excluded paths."""
        list_path = Path(self.input_file)
        if not list_path.is_file():
            raise ConfigurationError(f"Input file not found: {self.input_file}")

        logger.debug(f"Reading file paths from {list_path}")
        processed = 0
        with list_path.open("r", encoding="utf-8", errors="surrogateescape") as f:
            for line in f:
                if stopped_flag and stopped_flag():
                    return
                path = line.strip()
                if not path:
                    continue
                path = os.path.normpath(path)
                if self._is_excluded(path):
                    logger.debug(f"Skipping excluded path from input list: {path}")
                    continue
                processed += 1
                yield path
        if progress_callback:
            progress_callback('scanning', processed, None)

    def _on_walk_error(self, error: OSError) -> None:
        path = getattr(error, "filename", None) or "?"
        self._report_error(path, str(error))

    def _report_error(self, path: str, message: str) -> None:
        logger.warning(f"Scan error at {path}: {message}")
        self.sink.emit(RunEvent(EventKind.ENUMERATION_ERROR, message=message, path=path))

    @staticmethod
    def _is_system_trash(path: Path) -> bool:
        """
        Check if path belongs to an OS trash/recycle bin.
        Returns False on any error (fail-safe: better to scan than skip valid data).
        """
        path_str = str(path)
        if sys.platform == "win32":
            return "$Recycle.Bin" in path_str or "\\Recycler\\" in path_str
        return path.name in (".Trash", ".Trashes") or path.name.startswith(".Trash-") or \
            ".local/share/Trash" in path_str or "/.trash/" in path_str

    def _is_excluded(self, path: str) -> bool:
        return any(rule.covers(path) for rule in self.exclusions)

    def _prefilter_dirs(self, path: Path) -> bool:
        """Pre-filter directories: skip excluded trees, trash and symlinked directories."""
        if self._is_excluded(str(path)):
            logger.debug(f"Skipping excluded directory: {path}")
            return False

        if FileScannerImpl._is_system_trash(path):
            logger.debug(f"Skipping system trash directory: {path}")
            return False

        try:
            if path.is_symlink():
                logger.debug(f"Skipping symlinked directory: {path}")
                return False
        except OSError:
            return False
        return True

    @staticmethod
    def _is_regular_file(path: str) -> bool:
        try:
            if os.path.islink(path):
                logger.debug(f"Skipping symbolic link: {path}")
                return False
            return os.path.isfile(path)
        except OSError as e:
            logger.debug(f"Could not check {path}: {e}")
            return False
