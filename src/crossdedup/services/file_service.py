"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Filesystem primitives used by the relink executor.
Each method either succeeds or raises OSError; nothing here exits the process.
"""
import os
import logging
from pathlib import Path
from send2trash import send2trash

logger = logging.getLogger(__name__)


class FileService:
    """
    Filesystem mutation service.
    Removal either unlinks the file or, when use_trash is set, moves it to the
    system trash via send2trash.
    """

    def __init__(self, use_trash: bool = False):
        self.use_trash = use_trash

    @staticmethod
    def exists(path: str) -> bool:
        """True for anything at path, including dangling symlinks."""
        return os.path.lexists(path)

    @staticmethod
    def is_dir(path: str) -> bool:
        return os.path.isdir(path)

    @staticmethod
    def same_file(first: str, second: str) -> bool:
        """True if both paths denote the same file (same device and inode)."""
        try:
            return os.path.realpath(first) == os.path.realpath(second) or \
                os.path.samefile(first, second)
        except OSError:
            return False

    @staticmethod
    def make_dirs(path: str) -> None:
        """Creates path and its parents; an existing directory is not an error."""
        Path(path).mkdir(parents=True, exist_ok=True)

    @staticmethod
    def link(target: str, link_path: str) -> None:
        """Creates a hardlink at link_path. Refuses to overwrite anything."""
        os.link(target, link_path)

    @staticmethod
    def unlink(path: str) -> None:
        """Removes a directory entry outright, bypassing the trash."""
        os.unlink(path)

    def remove(self, path: str) -> None:
        """Removes a regular file, to the trash when configured."""
        if not os.path.lexists(path):
            raise FileNotFoundError(f"File not found: {path}")
        if self.use_trash:
            try:
                send2trash(path)
            except OSError:
                raise
            except Exception as e:
                raise OSError(f"Failed to move to trash: {e}") from e
        else:
            os.unlink(path)
        logger.debug(f"Removed {path}")
