import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


# ============================================================================
# Enums
# ============================================================================


class CodecProfile(Enum):
    """Which family of video codec the policy selects."""

    COMPATIBLE = "compatible"  # H.264, plays everywhere
    MOBILE = "mobile"  # HEVC tagged for mobile decoders
    EFFICIENT = "efficient"  # AV1


class PlatformFamily(Enum):
    """Host platform family, used to pick a hardware HEVC encoder."""

    APPLE = "apple"
    OTHER = "other"

    @classmethod
    def current(cls) -> "PlatformFamily":
        """Detect the family of the running interpreter's host."""
        return cls.APPLE if sys.platform == "darwin" else cls.OTHER


# ============================================================================
# Configuration Classes
# ============================================================================


@dataclass
class VideoEncodingConfig:
    """
    Video encoding options.

    Any optional field left as None is omitted from the ffmpeg command line.
    video_codec overrides the codec chosen by codec_profile.
    """

    crf: Optional[int] = 23
    preset: Optional[str] = "medium"
    codec_profile: CodecProfile = CodecProfile.COMPATIBLE
    platform: PlatformFamily = PlatformFamily.OTHER
    video_codec: Optional[str] = None
    video_bitrate: Optional[str] = None
    resolution: Optional[str] = None
    audio_codec: Optional[str] = "aac"
    audio_bitrate: Optional[str] = "128k"
    custom_options: List[Tuple[str, str]] = field(default_factory=list)
    auto_resize_to_fullhd: bool = True


@dataclass
class ImageEncodingConfig:
    """Image encoding options."""

    quality: float = 70.0
    png_compress_level: int = 9
    force_reencode: bool = True


@dataclass
class CompressionConfig:
    """Configuration for a batch run."""

    root: Path = field(default_factory=Path.cwd)
    output_dir: Path = Path("compress")
    input_files: Optional[List[Path]] = None
    force: bool = False
    ffmpeg_path: Optional[str] = None
    ffprobe_path: Optional[str] = None
    progress_interval: float = 5.0
    image: ImageEncodingConfig = field(default_factory=ImageEncodingConfig)
    video: VideoEncodingConfig = field(default_factory=VideoEncodingConfig)

    @property
    def output_root(self) -> Path:
        """Output directory; relative values are anchored at the root."""
        if self.output_dir.is_absolute():
            return self.output_dir
        return self.root / self.output_dir


# ============================================================================
# Parameter Validator
# ============================================================================

VALID_PRESETS = [
    "ultrafast",
    "superfast",
    "veryfast",
    "faster",
    "fast",
    "medium",
    "slow",
    "slower",
    "veryslow",
]


class ParameterValidator:
    """Validates compression parameters."""

    @staticmethod
    def validate(config: CompressionConfig) -> None:
        """Validate all parameters in the configuration."""
        ParameterValidator.validate_output_dir(config.output_dir)
        ParameterValidator.validate_progress_interval(config.progress_interval)
        ParameterValidator.validate_image_quality(config.image.quality)
        ParameterValidator.validate_png_compress_level(config.image.png_compress_level)
        ParameterValidator.validate_video_crf(config.video.crf, config.video.codec_profile)
        ParameterValidator.validate_video_preset(config.video.preset)
        ParameterValidator.validate_video_resolution(config.video.resolution)

    @staticmethod
    def validate_output_dir(output_dir: Path) -> None:
        if str(output_dir).strip() in ("", "."):
            raise ValueError("output_dir must name a directory other than the root")

    @staticmethod
    def validate_progress_interval(progress_interval: float) -> None:
        if progress_interval <= 0:
            raise ValueError(f"progress_interval must be positive, got {progress_interval}")

    @staticmethod
    def validate_image_quality(quality: float) -> None:
        """Validate image quality value."""
        if not (0 <= quality <= 100):
            raise ValueError(f"image quality must be between 0 and 100, got {quality}")

    @staticmethod
    def validate_png_compress_level(level: int) -> None:
        if not (0 <= level <= 9):
            raise ValueError(f"png_compress_level must be between 0 and 9, got {level}")

    @staticmethod
    def validate_video_crf(crf: Optional[int], profile: CodecProfile = CodecProfile.COMPATIBLE) -> None:
        """Validate video CRF value (AV1 encoders accept up to 63)."""
        if crf is None:
            return
        upper = 63 if profile is CodecProfile.EFFICIENT else 51
        if not (0 <= crf <= upper):
            raise ValueError(f"video crf must be between 0 and {upper}, got {crf}")

    @staticmethod
    def validate_video_preset(preset: Optional[str]) -> None:
        """Validate video preset."""
        if preset is not None and preset not in VALID_PRESETS:
            raise ValueError(f"video preset must be one of {VALID_PRESETS}, got {preset}")

    @staticmethod
    def validate_video_resolution(resolution: Optional[str]) -> None:
        """Validate video resolution format."""
        if resolution is None:
            return

        from squashy.utils.format import parse_resolution

        try:
            parse_resolution(resolution)
        except ValueError as e:
            raise ValueError(f"Invalid video resolution: {e}")
