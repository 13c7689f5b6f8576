import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from squashy.core.config import (
    VALID_PRESETS,
    CodecProfile,
    CompressionConfig,
    ImageEncodingConfig,
    PlatformFamily,
    VideoEncodingConfig,
)
from squashy.core.exceptions import SquashyError
from squashy.core.media_compressor import MediaCompressor
from squashy.utils.format import format_duration, format_size
from squashy.utils.logger import get_logger


# ============================================================================
# Argument Parsing
# ============================================================================


def parse_custom_option(value: str) -> Tuple[str, str]:
    """'-movflags=+faststart' -> ('-movflags', '+faststart'); a bare key maps to ''."""
    key, _, option_value = value.partition("=")
    if not key:
        raise argparse.ArgumentTypeError(f"Invalid ffmpeg option: {value!r}")
    if not key.startswith("-"):
        key = f"-{key}"
    return key, option_value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="squashy",
        description="Compress images and videos into a mirrored output directory.",
    )
    parser.add_argument(
        "-o", "--output-dir", type=Path, default=Path("compress"), help="Output directory (default: compress)"
    )
    parser.add_argument(
        "-i",
        "--input-file",
        type=Path,
        nargs="+",
        dest="input_files",
        help="Compress only these files (default: every file under --root)",
    )
    parser.add_argument("--root", type=Path, default=Path("."), help="Directory to scan (default: current)")
    parser.add_argument("-q", "--quality", type=float, default=70.0, help="JPEG quality 0-100 (default: 70)")
    parser.add_argument("-f", "--force", action="store_true", help="Recompress files whose output already exists")

    video = parser.add_argument_group("video")
    video.add_argument("--crf", type=int, default=23, help="Constant rate factor (default: 23)")
    video.add_argument("--preset", choices=VALID_PRESETS, default="medium", help="Encoder preset (default: medium)")
    video.add_argument(
        "--codec-profile",
        choices=[p.value for p in CodecProfile],
        default=CodecProfile.COMPATIBLE.value,
        help="compatible=H.264, mobile=HEVC, efficient=AV1 (default: compatible)",
    )
    video.add_argument("--mobile-support", action="store_true", help="Shorthand for --codec-profile mobile")
    video.add_argument(
        "--platform",
        choices=[p.value for p in PlatformFamily],
        default=PlatformFamily.current().value,
        help="Platform family used to pick the HEVC encoder (default: detected)",
    )
    video.add_argument("--video-codec", help="Explicit ffmpeg video encoder, overrides --codec-profile")
    video.add_argument("--video-bitrate", help="Target video bitrate, e.g. 2M")
    video.add_argument("--resolution", help="Explicit output size, e.g. 1280x720 or 720p")
    video.add_argument("--audio-codec", default="aac", help="Audio encoder (default: aac)")
    video.add_argument("--audio-bitrate", default="128k", help="Audio bitrate (default: 128k)")
    video.add_argument(
        "--ffmpeg-option",
        type=parse_custom_option,
        action="append",
        default=[],
        metavar="KEY[=VALUE]",
        help="Extra ffmpeg option, e.g. --ffmpeg-option=-movflags=+faststart (repeatable)",
    )
    video.add_argument(
        "--no-auto-resize", action="store_true", help="Do not downscale 16:9 videos larger than 1920x1080"
    )

    image = parser.add_argument_group("image")
    image.add_argument("--png-level", type=int, default=9, help="PNG compression level 0-9 (default: 9)")
    image.add_argument(
        "--no-force-png", action="store_true", help="Keep the source PNG when re-encoding does not shrink it"
    )

    tools = parser.add_argument_group("tools")
    tools.add_argument("--ffmpeg-path", help="Path to the ffmpeg executable")
    tools.add_argument("--ffprobe-path", help="Path to the ffprobe executable")
    tools.add_argument("--progress-interval", type=float, default=5.0, help="Seconds between progress lines")

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )
    logging_group.add_argument("--log-dir", type=Path, help="Also write a log file to this directory")

    return parser


def build_config(args: argparse.Namespace) -> CompressionConfig:
    profile = CodecProfile.MOBILE if args.mobile_support else CodecProfile(args.codec_profile)
    video = VideoEncodingConfig(
        crf=args.crf,
        preset=args.preset,
        codec_profile=profile,
        platform=PlatformFamily(args.platform),
        video_codec=args.video_codec,
        video_bitrate=args.video_bitrate,
        resolution=args.resolution,
        audio_codec=args.audio_codec or None,
        audio_bitrate=args.audio_bitrate or None,
        custom_options=list(args.ffmpeg_option),
        auto_resize_to_fullhd=not args.no_auto_resize,
    )
    image = ImageEncodingConfig(
        quality=args.quality,
        png_compress_level=args.png_level,
        force_reencode=not args.no_force_png,
    )
    input_files = [f.absolute() for f in args.input_files] if args.input_files else None
    return CompressionConfig(
        root=args.root,
        output_dir=args.output_dir,
        input_files=input_files,
        force=args.force,
        ffmpeg_path=args.ffmpeg_path,
        ffprobe_path=args.ffprobe_path,
        progress_interval=args.progress_interval,
        image=image,
        video=video,
    )


# ============================================================================
# Summary
# ============================================================================


def print_summary(stats: Dict) -> None:
    print("\n" + "=" * 60)
    print("Compression Complete!")
    print("=" * 60)
    print(f"Processed: {stats['processed']} files")
    print(f"Skipped (already compressed): {stats['skipped']} files")
    print(f"Unsupported: {stats['unsupported']} files")
    print(f"Errors: {stats['errors']} files")
    print(f"Original size: {format_size(stats['total_original_size'])}")
    print(f"Compressed size: {format_size(stats['total_compressed_size'])}")
    print(f"Space saved: {format_size(stats['space_saved'])}")
    print(f"Total time: {format_duration(stats['total_processing_time'])}")

    failed = [f for f in stats["files"] if f["status"] == "error"]
    if failed:
        print("\nFailed files:")
        for file_info in failed:
            print(f"  ✗ {file_info['name']}: {file_info.get('message', 'unknown error')}")


# ============================================================================
# Entry Point
# ============================================================================


def main(argv: Optional[List[str]] = None) -> int:
    """Run a batch. Returns 1 if the batch could not run or any file failed."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = get_logger()
    try:
        logger.configure(log_level=args.log_level, log_dir=args.log_dir)
    except (OSError, ValueError) as e:
        print(f"Error: could not set up logging: {e}")
        return 1

    config = build_config(args)

    try:
        compressor = MediaCompressor(config)
        stats = compressor.compress()
    except (SquashyError, ValueError, OSError) as e:
        logger.error(f"Batch aborted: {e}")
        print(f"Error: {e}")
        return 1

    print_summary(stats)
    return 1 if stats["errors"] else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
