"""
Core relinking engine — classifier, scanner, hasher, grouper, planner and executor.

This package contains the whole decision-making path of crossdedup:
- PathClassifier: maps paths to volumes and resolves exclusions per volume
- FileScannerImpl: recursive traversal of every volume root (or an input list)
- HasherImpl: xxHash64 front-chunk and SHA-256 full digests, cached per inode
- FileGrouperImpl / NameStage / ContentStage: two-phase narrowing to cross-volume groups
- CanonicalSelector + RelinkPlanner: choose the kept copy and plan hardlinks
- RelinkExecutor: link-then-verify-then-delete, or a dry-run simulation of it

Only RelinkExecutor mutates the filesystem, and only through the FileService it is given.
"""

from .classifier import PathClassifier, VOLUME_TOKEN
from .scanner import FileScannerImpl
from .hasher import HasherImpl, XXHashAlgorithmImpl, Sha256AlgorithmImpl, HashError, HashFailure
from .grouper import FileGrouperImpl
from .stages import NameStage, ContentStage
from .selector import CanonicalSelector
from .planner import RelinkPlanner
from .executor import RelinkExecutor
from .deduplicator import DeduplicatorImpl
from .events import RunReport, RunEvent, EventKind, NullSink
from .models import (
    FileRecord, NameGroup, ContentGroup, ResolvedGroup, ExclusionRule, RelinkAction,
    ActionResult, ActionStatus, RelinkParams, RunStats, ConfigurationError, DEFAULT_PRIORITY_NAMES)

__all__ = [
    "PathClassifier",
    "VOLUME_TOKEN",
    "FileScannerImpl",
    "HasherImpl",
    "XXHashAlgorithmImpl",
    "Sha256AlgorithmImpl",
    "HashError",
    "HashFailure",
    "FileGrouperImpl",
    "NameStage",
    "ContentStage",
    "CanonicalSelector",
    "RelinkPlanner",
    "RelinkExecutor",
    "DeduplicatorImpl",
    "RunReport",
    "RunEvent",
    "EventKind",
    "NullSink",
    "FileRecord",
    "NameGroup",
    "ContentGroup",
    "ResolvedGroup",
    "ExclusionRule",
    "RelinkAction",
    "ActionResult",
    "ActionStatus",
    "RelinkParams",
    "RunStats",
    "ConfigurationError",
    "DEFAULT_PRIORITY_NAMES",
]
