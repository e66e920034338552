"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and domain logic for cross-volume duplicate discovery and relinking.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple, Union, Set
import os
from enum import Enum

DEFAULT_PRIORITY_NAMES = ("torrent", "torrents")


class ConfigurationError(ValueError):
    """Raised when the run cannot start: no volumes, missing roots, bad parameters."""


# =============================
# Enums
# =============================

class ActionStatus(Enum):
    """Terminal state of a single relink action."""
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"

    @property
    def display_name(self) -> str:
        """Human-readable name for console output."""
        mapping = {
            ActionStatus.APPLIED: "Applied",
            ActionStatus.SKIPPED: "Skipped",
            ActionStatus.FAILED: "Failed",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileRecord:
    """
    A single enumerated file.
    volume_id is the configured volume root the path lives on, or None when
    the path could not be classified.
    """
    path: str
    volume_id: Optional[str]
    basename: str = ""
    inode_key: Optional[Tuple[int, int]] = None

    def __post_init__(self):
        if not self.basename:
            object.__setattr__(self, "basename", os.path.basename(self.path))

    @property
    def is_classified(self) -> bool:
        return self.volume_id is not None

    def with_inode(self, inode_key: Tuple[int, int]) -> "FileRecord":
        """Returns a copy annotated with its (st_dev, st_ino) pair."""
        return FileRecord(self.path, self.volume_id, self.basename, inode_key)

    def __repr__(self):
        return f"<FileRecord path={self.path}, volume={self.volume_id}>"


@dataclass
class ExclusionRule:
    """
    An exclusion pattern resolved against one volume.
    The rule is active only when resolved_directory is set.
    """
    pattern: str
    volume_root: str
    resolved_directory: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.resolved_directory is not None

    def covers(self, path: str) -> bool:
        """True if path is the resolved directory or lies beneath it."""
        if not self.is_active:
            return False
        normalized = os.path.normpath(path)
        return normalized == self.resolved_directory or \
            normalized.startswith(self.resolved_directory.rstrip(os.sep) + os.sep)


def distinct_volumes(files: List[FileRecord]) -> Set[str]:
    """Set of volume ids observed among classified files."""
    return {f.volume_id for f in files if f.volume_id is not None}


@dataclass
class NameGroup:
    """Files sharing a basename, collected across all volumes."""
    basename: str
    files: List[FileRecord] = field(default_factory=list)

    @property
    def volume_ids(self) -> Set[str]:
        return distinct_volumes(self.files)

    def spans_volumes(self) -> bool:
        """True if members live on at least two distinct volumes."""
        return len(self.volume_ids) >= 2

    def __repr__(self):
        return f"<NameGroup name={self.basename}, count={len(self.files)}, volumes={len(self.volume_ids)}>"


@dataclass
class ContentGroup:
    """
    Files sharing a content digest.
    The volume spread is recomputed from the members themselves, a NameGroup's
    spread does not carry over.
    """
    digest: bytes
    size: int
    files: List[FileRecord]

    @property
    def volume_ids(self) -> Set[str]:
        return distinct_volumes(self.files)

    @property
    def duplicate_count(self) -> int:
        return len(self.files)

    def spans_volumes(self) -> bool:
        return len(self.volume_ids) >= 2

    def __repr__(self):
        return f"<ContentGroup size={self.size}, count={len(self.files)}, volumes={len(self.volume_ids)}>"


@dataclass
class ResolvedGroup:
    """A content group together with its canonical file (None if no member qualifies)."""
    group: ContentGroup
    canonical: Optional[FileRecord] = None

    @property
    def has_canonical(self) -> bool:
        return self.canonical is not None


@dataclass(frozen=True)
class RelinkAction:
    """Replace source_path with a hardlink to canonical_path created at destination_path."""
    source_path: str
    canonical_path: str
    destination_directory: str
    destination_path: str
    size: int = 0


@dataclass
class ActionResult:
    """Outcome of executing one RelinkAction."""
    action: RelinkAction
    status: ActionStatus
    reason: str = ""
    simulated: bool = False
    data_loss: bool = False

    def __repr__(self):
        return f"<ActionResult {self.status.value} source={self.action.source_path}>"


class RunStats:
    """
    Statistics collected while discovering and relinking duplicates.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

    def print_summary(self) -> str:
        labels = {
            "scan": "🗂️ Enumerated Files",
            "name": "📁 Cross-volume Name Groups",
            "full": "🔍 Cross-volume Content Groups",
            "plan": "🔗 Resolved Groups / Planned Relinks",
            "relink": "✅ Applied Relinks",
        }

        lines = [
            "📊 Deduplication Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage.lower(), stage.title())
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


"""
DTO for relink parameters with built-in validation.
"""

@dataclass
class RelinkParams:
    """Parameters for a relink run with validation."""
    volume_roots: List[str]
    exclusion_patterns: List[str] = field(default_factory=list)
    priority_names: Tuple[str, ...] = DEFAULT_PRIORITY_NAMES
    dry_run: bool = True
    use_trash: bool = False
    workers: int = 1
    input_file: Optional[str] = None

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        roots = []
        for root in self.volume_roots:
            root = root.strip()
            if not root:
                continue
            root = os.path.normpath(os.path.abspath(root))
            if root not in roots:
                roots.append(root)
        if not roots:
            raise ConfigurationError("At least one volume root is required")

        for root in roots:
            for other in roots:
                if root != other and root.startswith(other.rstrip(os.sep) + os.sep):
                    raise ConfigurationError(f"Volume roots must not be nested: {root} is inside {other}")
        self.volume_roots = roots

        self.exclusion_patterns = [p.strip() for p in self.exclusion_patterns if p and p.strip()]

        names = tuple(n.strip().lower() for n in self.priority_names if n and n.strip())
        if not names:
            raise ConfigurationError("Priority names cannot be empty")
        self.priority_names = names

        if self.workers < 1:
            raise ConfigurationError("Worker count must be at least 1")
