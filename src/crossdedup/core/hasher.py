"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing utilities using FileRecord and pluggable hash algorithms.

Two digests are produced:
- a cheap xxHash64 of the first chunk, used only to split candidate groups early;
- a SHA-256 of the whole content, the sole definition of "same content".

Full digests are cached per inode, so paths that are already hardlinked to each
other are read only once. Failures are raised as HashError with a typed kind.
"""

import errno
import hashlib
import os
import threading
from enum import Enum
from typing import Dict, Optional, Tuple

import xxhash

from crossdedup.core.models import FileRecord
from crossdedup.core.interfaces import HashAlgorithm

READ_BLOCK_SIZE = 1024 * 1024
FRONT_CHUNK_SIZE = 64 * 1024


class HashFailure(Enum):
    NOT_FOUND = "not-found"
    PERMISSION_DENIED = "permission-denied"
    IO_ERROR = "io-error"


class HashError(OSError):
    """Typed failure of the hashing service for one file."""

    def __init__(self, path: str, kind: HashFailure, detail: str = ""):
        super().__init__(f"{kind.value}: {path}" + (f" ({detail})" if detail else ""))
        self.path = path
        self.kind = kind
        self.detail = detail

    @classmethod
    def from_os_error(cls, path: str, error: OSError) -> "HashError":
        if isinstance(error, FileNotFoundError) or error.errno == errno.ENOENT:
            kind = HashFailure.NOT_FOUND
        elif isinstance(error, PermissionError) or error.errno in (errno.EACCES, errno.EPERM):
            kind = HashFailure.PERMISSION_DENIED
        else:
            kind = HashFailure.IO_ERROR
        return cls(path, kind, error.strerror or str(error))


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl:
    def new(self):
        return xxhash.xxh64()

    def hash(self, data: bytes) -> bytes:
        return xxhash.xxh64(data).digest()


class Sha256AlgorithmImpl:
    def new(self):
        return hashlib.sha256()

    def hash(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()


class HasherImpl:
    """
    Computes front-chunk and full digests of files.
    Safe to call from several threads at once.
    """

    def __init__(
            self,
            full_algorithm: Optional[HashAlgorithm] = None,
            front_algorithm: Optional[HashAlgorithm] = None,
            front_chunk_size: int = FRONT_CHUNK_SIZE
    ):
        self.full_algorithm = full_algorithm or Sha256AlgorithmImpl()
        self.front_algorithm = front_algorithm or XXHashAlgorithmImpl()
        self.front_chunk_size = front_chunk_size
        self._full_cache: Dict[Tuple[int, int], bytes] = {}
        self._lock = threading.Lock()

    def stat_key(self, file: FileRecord) -> Tuple[int, Tuple[int, int]]:
        """Returns (size, (st_dev, st_ino)) of a regular file."""
        try:
            st = os.stat(file.path)
        except OSError as e:
            raise HashError.from_os_error(file.path, e) from e
        return st.st_size, (st.st_dev, st.st_ino)

    def compute_front_hash(self, file: FileRecord) -> bytes:
        """Hash of the first front_chunk_size bytes."""
        try:
            with open(file.path, 'rb') as f:
                data = f.read(self.front_chunk_size)
        except OSError as e:
            raise HashError.from_os_error(file.path, e) from e
        return self.front_algorithm.hash(data)

    def compute_full_hash(self, file: FileRecord) -> bytes:
        """Streams the whole file through the full algorithm."""
        if file.inode_key is not None:
            with self._lock:
                cached = self._full_cache.get(file.inode_key)
            if cached is not None:
                return cached

        digest = self.full_algorithm.new()
        try:
            with open(file.path, 'rb') as f:
                for block in iter(lambda: f.read(READ_BLOCK_SIZE), b''):
                    digest.update(block)
        except OSError as e:
            raise HashError.from_os_error(file.path, e) from e
        result = digest.digest()

        if file.inode_key is not None:
            with self._lock:
                self._full_cache[file.inode_key] = result
        return result
