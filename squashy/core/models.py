import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from squashy.core.media_types import MediaKind


# ============================================================================
# Per-file Records
# ============================================================================


@dataclass(frozen=True)
class InputFile:
    """A candidate input discovered during traversal."""

    path: Path
    relative_path: Path
    extension: str


@dataclass(frozen=True)
class OutputTarget:
    """Destination for a compressed file."""

    path: Path
    kind: MediaKind


@dataclass(frozen=True)
class EncodingRequest:
    """Everything an encoder needs for one file."""

    input_path: Path
    output_path: Path
    kind: MediaKind
    options: Any


@dataclass(frozen=True)
class ProbeResult:
    """Pixel dimensions of the first video stream."""

    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        """Width / height rounded half-up to 3 decimals (0.0 for a degenerate frame)."""
        if self.width == 0 or self.height == 0:
            return 0.0
        return math.floor(self.width / self.height * 1000.0 + 0.5) / 1000.0


@dataclass(frozen=True)
class CompressionStats:
    """Outcome of a successful video encode."""

    original_size: int
    compressed_size: int
    size_reduction_percent: float
    duration_seconds: float

    @classmethod
    def from_sizes(cls, original_size: int, compressed_size: int, duration_seconds: float) -> "CompressionStats":
        """Build stats from raw sizes. A zero-byte original counts as 0% reduction."""
        if original_size > 0:
            reduction = 100.0 * (1.0 - compressed_size / original_size)
        else:
            reduction = 0.0
        return cls(
            original_size=original_size,
            compressed_size=compressed_size,
            size_reduction_percent=reduction,
            duration_seconds=duration_seconds,
        )
