"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the relinking engine.
These protocols enforce structural typing using Python's `typing.Protocol` so the
hasher and filesystem service can be swapped out in tests.

Key Components:
---------------
- HashAlgorithm: Standardized interface for hash functions (SHA-256, xxHash).
- Hasher: Interface for computing the front-chunk and full content digests of files.
- FileSystem: Primitive filesystem mutations used by the executor.
"""

from typing import Protocol, Tuple

from crossdedup.core.models import FileRecord


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions without affecting the
    rest of the grouping logic.
    """

    def new(self):
        """Returns a fresh incremental hash object exposing update() and digest()."""
        ...

    def hash(self, data: bytes) -> bytes:
        """Computes the hash of the provided byte data."""
        ...


class Hasher(Protocol):
    """Interface for hashing files. Failures raise HashError."""
    def stat_key(self, file: FileRecord) -> Tuple[int, Tuple[int, int]]: ...
    def compute_front_hash(self, file: FileRecord) -> bytes: ...
    def compute_full_hash(self, file: FileRecord) -> bytes: ...


class FileSystem(Protocol):
    """Filesystem mutation service consumed by the executor."""
    def exists(self, path: str) -> bool: ...
    def is_dir(self, path: str) -> bool: ...
    def same_file(self, first: str, second: str) -> bool: ...
    def make_dirs(self, path: str) -> None: ...
    def link(self, target: str, link_path: str) -> None: ...
    def unlink(self, path: str) -> None: ...
    def remove(self, path: str) -> None: ...
