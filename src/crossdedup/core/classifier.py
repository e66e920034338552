"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/classifier.py
Maps paths to the volume they live on and resolves exclusion patterns per volume.
"""

import os
import logging
from typing import List, Optional, Iterable

from crossdedup.core.models import FileRecord, ExclusionRule, ConfigurationError

logger = logging.getLogger(__name__)

VOLUME_TOKEN = "{volume}"


class PathClassifier:
    """
    Classifies paths against an ordered list of volume roots.

    Attributes:
        volume_roots: Normalised absolute volume roots, longest first for matching
    """

    def __init__(self, volume_roots: Iterable[str]):
        roots = [os.path.normpath(os.path.abspath(r)) for r in volume_roots]
        if not roots:
            raise ConfigurationError("No volume roots configured")
        self.volume_roots = roots
        self._by_length = sorted(roots, key=len, reverse=True)

    def volume_of(self, path: str) -> Optional[str]:
        """Longest configured root that is a path-segment prefix of path, else None."""
        normalized = os.path.normpath(path)
        for root in self._by_length:
            if normalized == root or normalized.startswith(root.rstrip(os.sep) + os.sep):
                return root
        return None

    def classify(self, path: str) -> FileRecord:
        normalized = os.path.normpath(path)
        return FileRecord(path=normalized, volume_id=self.volume_of(normalized))

    def relative_path(self, record: FileRecord) -> str:
        """
        Path with its own volume root stripped, keeping the leading separator.
        Raises ValueError for unclassified records.
        """
        if record.volume_id is None:
            raise ValueError(f"Cannot compute relative path of unclassified file: {record.path}")
        return record.path[len(record.volume_id.rstrip(os.sep)):]

    def validate_roots(self) -> None:
        """Every volume root must exist as a directory before anything is scanned."""
        missing = [r for r in self.volume_roots if not os.path.isdir(r)]
        if missing:
            raise ConfigurationError(f"Volume root does not exist or is not a directory: {', '.join(missing)}")

    # =============================
    # Exclusions
    # =============================

    @staticmethod
    def resolve_exclusion(pattern: str, volume_root: str) -> Optional[str]:
        """
        Resolves one exclusion pattern against one volume root.

        - "{volume}/appdata" -> "<root>/appdata"
        - "/mnt/disk1/appdata" -> itself, only when it lies on this volume
        - "appdata" -> "<root>/appdata"

        Returns the directory path, or None when it does not exist on that volume.
        """
        root = os.path.normpath(volume_root)
        pattern = pattern.strip()
        if not pattern:
            return None

        if VOLUME_TOKEN in pattern:
            candidate = pattern.replace(VOLUME_TOKEN, root)
        elif os.path.isabs(pattern):
            candidate = pattern
        else:
            candidate = os.path.join(root, pattern)
        candidate = os.path.normpath(candidate)

        if candidate != root and not candidate.startswith(root.rstrip(os.sep) + os.sep):
            logger.debug(f"Exclusion '{pattern}' does not belong to volume {root}")
            return None
        if not os.path.isdir(candidate):
            logger.debug(f"Exclusion '{pattern}' resolves to missing directory on {root}: {candidate}")
            return None
        return candidate

    def resolve_exclusions(self, patterns: Iterable[str]) -> List[ExclusionRule]:
        """Resolves every pattern against every volume. Inactive rules are dropped."""
        rules = []
        for pattern in patterns:
            for root in self.volume_roots:
                resolved = self.resolve_exclusion(pattern, root)
                if resolved is None:
                    continue
                logger.debug(f"Excluding {resolved} (pattern '{pattern}')")
                rules.append(ExclusionRule(pattern=pattern, volume_root=root, resolved_directory=resolved))
        return rules
