"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Formatting helpers for the run summary.
"""
from typing import Tuple

SIZE_UNITS: Tuple[str, ...] = ("B", "KB", "MB", "GB", "TB", "PB", "EB")


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Binary units, two decimals: 1536 -> "1.50KB". Negative sizes count as zero.
        """
        value = float(max(size_bytes, 0))
        for unit in SIZE_UNITS[:-1]:
            if value < 1024:
                return f"{value:.2f}{unit}"
            value /= 1024
        return f"{value:.2f}{SIZE_UNITS[-1]}"

    @staticmethod
    def seconds_to_human(seconds: float) -> str:
        """2.5 -> "2.50s", 3725 -> "1h 02m 05s"."""
        if seconds < 60:
            return f"{max(seconds, 0.0):.2f}s"
        minutes, secs = divmod(int(seconds), 60)
        hours, minutes = divmod(minutes, 60)
        if hours:
            return f"{hours}h {minutes:02d}m {secs:02d}s"
        return f"{minutes}m {secs:02d}s"
