"""
Shared fixtures for relinking engine tests.
Creates isolated temporary volume trees with controlled test files.
"""
import logging
import pytest
import tempfile
from pathlib import Path
from typing import Callable
import sys

# Add src/ to sys.path so the 'crossdedup' package is importable without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def volumes(temp_dir):
    """
    Three empty volume roots on the same test filesystem:
    <tmp>/mnt/disk1, <tmp>/mnt/disk2, <tmp>/mnt/disk3.
    Hardlinks between them work because they share one real filesystem.
    """
    roots = []
    for name in ("disk1", "disk2", "disk3"):
        root = temp_dir / "mnt" / name
        root.mkdir(parents=True)
        roots.append(root)
    return roots


@pytest.fixture
def write_file() -> Callable[..., Path]:
    """Writes bytes to path, creating parent directories."""
    def _write(path: Path, content: bytes = b"payload") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path
    return _write


@pytest.fixture
def movie_layout(volumes, write_file):
    """
    The canonical scenario:
    - disk1/movies/x.mkv          duplicate
    - disk2/torrents/x.mkv        canonical copy
    - disk3/other/unique.bin      lives on one volume only
    """
    content = b"movie data " * 2000
    return {
        "duplicate": write_file(volumes[0] / "movies" / "x.mkv", content),
        "canonical": write_file(volumes[1] / "torrents" / "x.mkv", content),
        "unique": write_file(volumes[2] / "other" / "unique.bin", b"only here"),
        "expected_destination": volumes[1] / "movies" / "x.mkv",
    }


@pytest.fixture
def restore_root_logger():
    """Undoes configure_logging(): restores root handlers and level after the test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
