"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/logging_setup.py
Console and log-file configuration, plus the listener that turns engine
events into log records.
"""
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from crossdedup.core.events import RunEvent, EventKind

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_FILE_PREFIX = "crossdedup_"
DEFAULT_KEEP_LOGS = 5

EVENT_LEVELS = {
    EventKind.GROUP_DISCOVERED: logging.DEBUG,
    EventKind.CANONICAL_SELECTED: logging.INFO,
    EventKind.NO_CANONICAL: logging.WARNING,
    EventKind.ACTION_PLANNED: logging.INFO,
    EventKind.ACTION_APPLIED: logging.INFO,
    EventKind.ACTION_SKIPPED: logging.INFO,
    EventKind.ACTION_FAILED: logging.ERROR,
    EventKind.ENUMERATION_ERROR: logging.WARNING,
    EventKind.HASH_FAILED: logging.WARNING,
    EventKind.PLANNING_INCONSISTENCY: logging.WARNING,
}


def configure_logging(
        level: str = "INFO",
        log_dir: Optional[str] = None,
        keep: int = DEFAULT_KEEP_LOGS,
        dry_run: bool = False
) -> Optional[Path]:
    """
    Configures the root logger for a run.
    With log_dir set, a timestamped log file is written there and older
    files beyond `keep` are deleted, or only reported when dry_run is set.
    Returns the log file path, if any.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(numeric_level)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console)

    if not log_dir:
        return None

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / f"{LOG_FILE_PREFIX}{time.strftime('%Y-%m-%d_%H-%M-%S')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    root.addHandler(file_handler)

    prune_old_logs(directory, keep, dry_run=dry_run)
    return log_file


def prune_old_logs(directory: Path, keep: int, dry_run: bool = False) -> List[Path]:
    """
    Deletes all but the `keep` most recent crossdedup log files.
    Returns the files deleted, or the files that would be deleted in a dry run.
    """
    log = logging.getLogger(__name__)
    logs = sorted(
        directory.glob(f"{LOG_FILE_PREFIX}*.log"),
        key=lambda p: (p.stat().st_mtime, p.name),
        reverse=True
    )
    removed = []
    for old in logs[max(keep, 0):]:
        if dry_run:
            log.info(f"DRY RUN: would delete old log file: {old}")
            removed.append(old)
            continue
        try:
            old.unlink()
            log.info(f"Deleted old log file: {old}")
            removed.append(old)
        except OSError as e:
            log.warning(f"Could not delete old log file {old}: {e}")
    return removed


class LogEventListener:
    """Writes every engine event to the `crossdedup.events` logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("crossdedup.events")

    def __call__(self, event: RunEvent) -> None:
        level = EVENT_LEVELS.get(event.kind, logging.INFO)
        if event.result is not None and event.result.data_loss:
            level = logging.CRITICAL

        prefix = "DRY RUN: " if event.result is not None and event.result.simulated else ""
        subject = f" '{event.path}'" if event.path else ""
        text = f"{prefix}{event.kind.value}{subject}"
        if event.message:
            text += f": {event.message}"
        self.logger.log(level, text)

        if event.kind == EventKind.NO_CANONICAL and event.group is not None:
            for file in event.group.files:
                self.logger.log(level, f"  {file.path}")
