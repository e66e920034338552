"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

config.py
Loads run settings from a TOML file and expands volume globs.

Example file:

    volumes = ["/mnt/disk*"]
    exclude = ["{volume}/appdata", "{volume}/system"]
    priority_names = ["torrent", "torrents"]
    workers = 4
    use_trash = false
    log_dir = "/var/log/crossdedup"
    keep_logs = 5
"""
import glob
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Python < 3.11: pip install tomli

from crossdedup.core.models import ConfigurationError

logger = logging.getLogger(__name__)

KNOWN_KEYS = {
    "volumes": list,
    "exclude": list,
    "priority_names": list,
    "workers": int,
    "use_trash": bool,
    "log_dir": str,
    "keep_logs": int,
}


def load_config(path: str) -> Dict[str, Any]:
    """Reads and type-checks a TOML config file. Unknown keys are ignored with a warning."""
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e

    config = {}
    for key, value in data.items():
        expected = KNOWN_KEYS.get(key)
        if expected is None:
            logger.warning(f"Ignoring unknown config key '{key}' in {path}")
            continue
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigurationError(f"Config key '{key}' must be of type {expected.__name__}")
        if expected is list and not all(isinstance(item, str) for item in value):
            raise ConfigurationError(f"Config key '{key}' must be a list of strings")
        config[key] = value
    return config


def expand_volume_roots(patterns: List[str]) -> List[str]:
    """
    Expands glob patterns such as "/mnt/disk*" into sorted directories.
    Plain paths are kept as given, so a missing root is reported later.
    """
    roots = []
    for pattern in patterns:
        pattern = os.path.expanduser(pattern.strip())
        if not pattern:
            continue
        if any(ch in pattern for ch in "*?["):
            matches = sorted(p for p in glob.glob(pattern) if os.path.isdir(p))
            if not matches:
                logger.warning(f"Volume pattern matched no directories: {pattern}")
            roots.extend(matches)
        else:
            roots.append(pattern)
    return roots
