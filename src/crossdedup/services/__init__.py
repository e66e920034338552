"""Filesystem services used by the relink executor."""

from .file_service import FileService

__all__ = ["FileService"]
