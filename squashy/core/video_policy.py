"""
Video encoding policy.

Turns a VideoEncodingConfig plus (optionally) the probed source dimensions
into the ffmpeg argument list. Everything here is pure so each branch can be
exercised without spawning processes.
"""

from pathlib import Path
from typing import List, Optional

from squashy.core.config import CodecProfile, PlatformFamily, VideoEncodingConfig
from squashy.core.models import ProbeResult
from squashy.utils.format import parse_resolution


FULLHD_WIDTH = 1920
FULLHD_HEIGHT = 1080
SIXTEEN_NINE_MIN = 1.775
SIXTEEN_NINE_MAX = 1.781
FULLHD_SCALE_FILTER = f"scale={FULLHD_WIDTH}:-2"

H264_ENCODER = "libx264"
HEVC_SOFTWARE_ENCODER = "libx265"
HEVC_APPLE_ENCODER = "hevc_videotoolbox"
AV1_ENCODER = "libsvtav1"
HEVC_MOBILE_TAG = "hvc1"


def is_sixteen_nine(dimensions: ProbeResult) -> bool:
    return SIXTEEN_NINE_MIN <= dimensions.aspect_ratio <= SIXTEEN_NINE_MAX


def needs_fullhd_downscale(dimensions: Optional[ProbeResult]) -> bool:
    """
    True for 16:9 sources larger than 1920x1080.

    Other aspect ratios and sources already within FullHD are left alone.
    """
    if dimensions is None:
        return False
    exceeds = dimensions.width > FULLHD_WIDTH or dimensions.height > FULLHD_HEIGHT
    return is_sixteen_nine(dimensions) and exceeds


def wants_probe(config: VideoEncodingConfig) -> bool:
    """Probing only matters when auto-resize could apply."""
    return config.auto_resize_to_fullhd and config.resolution is None


def select_video_codec(config: VideoEncodingConfig) -> str:
    if config.video_codec:
        return config.video_codec
    if config.codec_profile is CodecProfile.MOBILE:
        if config.platform is PlatformFamily.APPLE:
            return HEVC_APPLE_ENCODER
        return HEVC_SOFTWARE_ENCODER
    if config.codec_profile is CodecProfile.EFFICIENT:
        return AV1_ENCODER
    return H264_ENCODER


def resolution_arg(resolution: str) -> str:
    """Normalise '720p' / '1280X720' to the WxH form ffmpeg's -s expects."""
    width, height = parse_resolution(resolution)
    return f"{width}x{height}"


def build_ffmpeg_args(
    in_path: Path,
    out_path: Path,
    config: VideoEncodingConfig,
    dimensions: Optional[ProbeResult] = None,
) -> List[str]:
    """
    Build the full ffmpeg argument list (without the executable).

    Args:
        in_path: Input video path
        out_path: Output video path
        config: Video encoding options
        dimensions: Probed source size, or None if unknown

    Returns:
        List of FFmpeg arguments
    """
    args = ["-i", str(in_path), "-c:v", select_video_codec(config)]

    if config.codec_profile is CodecProfile.MOBILE and not config.video_codec:
        args.extend(["-tag:v", HEVC_MOBILE_TAG])

    if config.crf is not None:
        args.extend(["-crf", str(config.crf)])

    # HEVC/AV1 profiles never get -preset unless the codec was given explicitly
    if config.preset is not None and (config.codec_profile is CodecProfile.COMPATIBLE or config.video_codec):
        args.extend(["-preset", config.preset])

    if config.video_bitrate is not None:
        args.extend(["-b:v", config.video_bitrate])

    if config.resolution is not None:
        args.extend(["-s", resolution_arg(config.resolution)])
    elif config.auto_resize_to_fullhd and needs_fullhd_downscale(dimensions):
        args.extend(["-vf", FULLHD_SCALE_FILTER])

    if config.audio_codec is not None:
        args.extend(["-c:a", config.audio_codec])
    if config.audio_bitrate is not None:
        args.extend(["-b:a", config.audio_bitrate])

    for key, value in config.custom_options:
        args.append(key)
        if value:
            args.append(value)

    args.extend(["-y", str(out_path)])
    return args
