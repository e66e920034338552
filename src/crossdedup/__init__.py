"""
crossdedup — replaces copies of files spread over several disks with hardlinks.

Core features:
- Two-phase narrowing: same basename on 2+ volumes, then size, front-chunk xxHash64 and full SHA-256
- The copy under a 'torrent'/'torrents' directory is kept; every other volume gets a hardlink to it
- Link-then-verify-then-delete: no duplicate is removed before a verified link exists
- Dry run by default; CLI interface for headless/server usage
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("crossdedup")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Public API — only what users should import directly
from crossdedup.commands import RelinkCommand
from crossdedup.core import (
    RelinkParams, RelinkAction, ActionResult, ActionStatus, FileRecord, ContentGroup,
    ConfigurationError, RunReport, RunEvent, EventKind
)
from crossdedup.config import load_config
from crossdedup.utils.convert_utils import ConvertUtils
from crossdedup.services.file_service import FileService

__all__ = [
    "RelinkCommand",
    "RelinkParams",
    "RelinkAction",
    "ActionResult",
    "ActionStatus",
    "FileRecord",
    "ContentGroup",
    "ConfigurationError",
    "RunReport",
    "RunEvent",
    "EventKind",
    "load_config",
    "ConvertUtils",
    "FileService",
    "__version__",
]
