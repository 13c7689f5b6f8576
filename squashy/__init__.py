"""
Squashy - Batch image and video compression into a mirrored output tree.
"""

__version__ = "0.1.0"

# Package-level exports for convenience
from squashy.cli import main
from squashy.core.config import (
    CodecProfile,
    CompressionConfig,
    ImageEncodingConfig,
    ParameterValidator,
    PlatformFamily,
    VideoEncodingConfig,
)
from squashy.core.exceptions import (
    CodecError,
    EncodeFailed,
    EncoderUnavailable,
    FileSystemError,
    PathError,
    ProbeError,
    SquashyError,
    UnsupportedFormat,
)
from squashy.core.ffmpeg_executor import FFmpegExecutor
from squashy.core.image_compressor import ImageCompressor
from squashy.core.media_compressor import MediaCompressor
from squashy.core.media_types import MediaKind, classify
from squashy.core.models import CompressionStats, ProbeResult
from squashy.core.toolchain import MediaToolchain
from squashy.core.video_compressor import VideoCompressor
from squashy.services.statistics import StatisticsTracker
from squashy.utils.file_processor import FileProcessor
from squashy.utils.format import format_duration, format_size, parse_resolution


__all__ = [
    "CompressionConfig",
    "ImageEncodingConfig",
    "VideoEncodingConfig",
    "CodecProfile",
    "PlatformFamily",
    "ParameterValidator",
    "MediaCompressor",
    "VideoCompressor",
    "ImageCompressor",
    "FFmpegExecutor",
    "MediaToolchain",
    "MediaKind",
    "classify",
    "CompressionStats",
    "ProbeResult",
    "StatisticsTracker",
    "FileProcessor",
    "SquashyError",
    "PathError",
    "FileSystemError",
    "UnsupportedFormat",
    "EncoderUnavailable",
    "ProbeError",
    "EncodeFailed",
    "CodecError",
    "format_size",
    "format_duration",
    "parse_resolution",
    "main",
]
