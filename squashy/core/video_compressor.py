import time
from pathlib import Path
from typing import Optional

from squashy.core.config import VideoEncodingConfig
from squashy.core.exceptions import (
    EncodeFailed,
    FileSystemError,
    InputNotFoundError,
    ProbeError,
    UnsupportedFormat,
)
from squashy.core.media_types import VIDEO_EXTENSIONS, normalize_extension
from squashy.core.models import CompressionStats, ProbeResult
from squashy.core.toolchain import MediaToolchain
from squashy.core.video_policy import build_ffmpeg_args, wants_probe
from squashy.utils.logger import get_logger


# ============================================================================
# Video Compressor
# ============================================================================


class VideoCompressor:
    """Handles video compression using FFmpeg."""

    def __init__(self, toolchain: MediaToolchain):
        """
        Initialize video compressor.

        Args:
            toolchain: Prober/encoder to run
        """
        self.toolchain = toolchain
        self.logger = get_logger()

    def compress(self, in_path: Path, out_path: Path, config: VideoEncodingConfig) -> CompressionStats:
        """
        Compress a video file.

        Args:
            in_path: Path to input video file
            out_path: Path to output video file
            config: Video encoding options

        Returns:
            Sizes, reduction and elapsed time of the encode

        Raises:
            InputNotFoundError: If in_path does not exist
            UnsupportedFormat: If in_path does not have a video extension
            EncoderUnavailable: If ffmpeg cannot be run
            FileSystemError: If the output directory or file sizes cannot be created/read
            EncodeFailed: If ffmpeg exits with a non-zero status
        """
        start = time.monotonic()

        if not in_path.exists():
            raise InputNotFoundError(in_path)
        if normalize_extension(in_path.suffix) not in VIDEO_EXTENSIONS:
            raise UnsupportedFormat(f"Unsupported video format: {in_path}")

        self.toolchain.check_available()

        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            original_size = in_path.stat().st_size
        except OSError as error:
            raise FileSystemError(f"Cannot prepare {out_path}: {error}") from error

        dimensions = self._probe_dimensions(in_path) if wants_probe(config) else None
        ffmpeg_args = build_ffmpeg_args(in_path, out_path, config, dimensions)
        self.logger.debug(f"FFmpeg args for {in_path.name}: {' '.join(ffmpeg_args)}")

        returncode = self.toolchain.encode(ffmpeg_args)
        if returncode != 0:
            raise EncodeFailed(returncode, ffmpeg_args)

        try:
            compressed_size = out_path.stat().st_size
        except OSError as error:
            raise FileSystemError(f"Cannot read compressed file {out_path}: {error}") from error

        return CompressionStats.from_sizes(original_size, compressed_size, time.monotonic() - start)

    def _probe_dimensions(self, in_path: Path) -> Optional[ProbeResult]:
        try:
            dimensions = self.toolchain.probe(in_path)
        except ProbeError as error:
            self.logger.warning(f"Could not read resolution of {in_path.name}, encoding without resize: {error}")
            return None
        self.logger.debug(f"{in_path.name}: {dimensions.width}x{dimensions.height} ({dimensions.aspect_ratio})")
        return dimensions
