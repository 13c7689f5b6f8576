# ============================================================================
# Utility Functions
# ============================================================================

import re
from typing import Tuple


def format_size(size_bytes: float) -> str:
    """Render a byte count with a binary unit (1536 -> '1.50 KB')."""
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if abs(size_bytes) < 1024.0:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.2f} PB"


def format_duration(seconds: float) -> str:
    """Format seconds as '42.1s', '3m 05s' or '1h 02m 03s'."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(round(seconds)), 60)
    if minutes < 60:
        return f"{minutes}m {secs:02d}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes:02d}m {secs:02d}s"


NAMED_RESOLUTIONS = {
    "480p": (854, 480),
    "720p": (1280, 720),
    "1080p": (1920, 1080),
    "1440p": (2560, 1440),
    "2160p": (3840, 2160),
    "2k": (2048, 1080),
    "4k": (3840, 2160),
    "8k": (7680, 4320),
}


_WXH_PATTERN = re.compile(r"^(\d+)\s*x\s*(\d+)$")


def parse_resolution(value: str) -> Tuple[int, int]:
    """
    Turn a resolution string into (width, height).

    Accepts 'WIDTHxHEIGHT' (any case, e.g. '1280X720') or one of the names in
    NAMED_RESOLUTIONS ('720p', '4k', ...).

    Raises:
        ValueError: For anything else, including zero-sized dimensions
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Empty or non-string resolution: {value!r}")

    text = value.strip().lower()
    if text in NAMED_RESOLUTIONS:
        return NAMED_RESOLUTIONS[text]

    match = _WXH_PATTERN.match(text)
    if match is None:
        names = ", ".join(NAMED_RESOLUTIONS)
        raise ValueError(f"Unrecognised resolution {value!r}; use WIDTHxHEIGHT or one of: {names}")

    width, height = (int(group) for group in match.groups())
    if width == 0 or height == 0:
        raise ValueError(f"Resolution must be non-zero in both dimensions: {value!r}")
    return width, height
