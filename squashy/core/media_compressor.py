import time
from pathlib import Path
from typing import Dict, List, Optional

from squashy.core.config import CompressionConfig, ParameterValidator
from squashy.core.exceptions import PathError, SquashyError, UnsupportedFormat
from squashy.core.ffmpeg_executor import FFmpegExecutor
from squashy.core.image_compressor import ImageCompressor
from squashy.core.media_types import MediaKind, classify
from squashy.core.models import CompressionStats, EncodingRequest, InputFile
from squashy.core.toolchain import MediaToolchain
from squashy.core.video_compressor import VideoCompressor
from squashy.services.statistics import ERROR, PROCESSED, SKIPPED, UNSUPPORTED, StatisticsTracker
from squashy.utils.file_processor import FileProcessor
from squashy.utils.format import format_duration, format_size
from squashy.utils.logger import get_logger


# ============================================================================
# Media Compressor
# ============================================================================


class MediaCompressor:
    """Main orchestrator: discover, classify, map, skip-check, encode."""

    def __init__(self, config: CompressionConfig, toolchain: Optional[MediaToolchain] = None):
        """
        Initialize media compressor with configuration.

        Args:
            config: Compression configuration
            toolchain: Prober/encoder; defaults to ffmpeg/ffprobe from the config
        """
        self.config = config
        self.toolchain = toolchain or FFmpegExecutor(
            config.ffmpeg_path,
            config.ffprobe_path,
            progress_interval=config.progress_interval,
        )
        self.video_compressor = VideoCompressor(self.toolchain)
        self.image_compressor = ImageCompressor()
        self.file_processor = FileProcessor()
        self.stats = StatisticsTracker()
        self.logger = get_logger()

    def compress(self) -> Dict:
        """
        Execute compression workflow.

        Returns:
            Dictionary with run statistics

        Raises:
            ValueError: If the configuration is invalid
            PathError: If the root cannot be resolved
            EncoderUnavailable: If the batch contains videos and ffmpeg cannot run
        """
        ParameterValidator.validate(self.config)

        root = self.file_processor.resolve_absolute(self.config.root)
        if not root.is_dir():
            raise PathError(f"Root is not a directory: {root}")
        output_root = self.config.output_root.resolve()

        start_time = time.monotonic()
        all_files = self._collect_files(root, output_root)

        if not all_files:
            print("No files found to compress.")
            return self.stats.get_stats()

        if any(classify(f.suffix) is MediaKind.VIDEO for f in all_files):
            self.toolchain.check_available()

        output_root.mkdir(parents=True, exist_ok=True)

        total_files_count = len(all_files)
        print(f"Found {total_files_count} file(s) to process...")

        for idx, file_path in enumerate(all_files, 1):
            self._process_file(file_path, idx, total_files_count, root, output_root)

        self.stats.set_total_processing_time(time.monotonic() - start_time)
        if self.stats.has_errors:
            self.logger.warning(f"{self.stats.stats['errors']} of {total_files_count} file(s) failed to compress")
        return self.stats.get_stats()

    def _collect_files(self, root: Path, output_root: Path) -> List[Path]:
        """
        Explicit input files when configured, otherwise every file under root.

        Files inside the output subtree are always dropped.
        """
        if self.config.input_files:
            candidates = [Path(f) if Path(f).is_absolute() else root / f for f in self.config.input_files]
        else:
            candidates = self.file_processor.walk(root, exclude=output_root)

        files = []
        for candidate in candidates:
            if self.file_processor.is_within(candidate, output_root):
                self.logger.debug(f"Ignoring output file {candidate}")
                continue
            files.append(candidate)
        return files

    def _process_file(self, file_path: Path, idx: int, total_files: int, root: Path, output_root: Path) -> None:
        """
        Process a single file. Errors are reported and never propagate.

        Args:
            file_path: Path to the file to process
            idx: Current file index
            total_files: Total number of files
            root: Canonical traversal root
            output_root: Canonical output root
        """
        file_start_time = time.monotonic()

        try:
            input_file = self.file_processor.build_input_file(root, file_path)
        except PathError as error:
            self._record_failure(str(file_path), None, error, file_start_time)
            return

        name = str(input_file.relative_path)
        kind = classify(input_file.extension)
        if kind is MediaKind.UNSUPPORTED:
            self.logger.debug(f"Unsupported file type, skipping: {name}")
            self.stats.record(name, UNSUPPORTED)
            return

        try:
            target = self.file_processor.map_output(output_root, input_file.relative_path, kind)
        except SquashyError as error:
            self._record_failure(name, kind, error, file_start_time)
            return

        if self.file_processor.should_skip(target.path, self.config.force):
            print(f"[{idx}/{total_files}] Already compressed: {name}")
            self.stats.record(name, SKIPPED, kind)
            return

        partial_path = self.file_processor.partial_path(target.path)
        request = self._build_request(input_file, partial_path, kind)
        print(f"[{idx}/{total_files}] Processing: {name}")

        try:
            result = self._compress_by_type(request)
            partial_path.replace(target.path)
        except (SquashyError, OSError) as error:
            self._record_failure(name, kind, error, file_start_time)
            self._cleanup_output(partial_path)
            return

        self.stats.record(
            name,
            PROCESSED,
            kind,
            original_size=result.original_size,
            compressed_size=result.compressed_size,
            processing_time=result.duration_seconds,
        )
        self._print_result(result)

    def _build_request(self, input_file: InputFile, out_path: Path, kind: MediaKind) -> EncodingRequest:
        options = self.config.image if kind.is_image else self.config.video
        return EncodingRequest(input_path=input_file.path, output_path=out_path, kind=kind, options=options)

    def _compress_by_type(self, request: EncodingRequest) -> CompressionStats:
        if request.kind is MediaKind.VIDEO:
            return self.video_compressor.compress(request.input_path, request.output_path, request.options)

        start = time.monotonic()
        original_size = request.input_path.stat().st_size
        if request.kind is MediaKind.RGB_IMAGE:
            self.image_compressor.compress_jpeg(request.input_path, request.output_path, request.options.quality)
        elif request.kind is MediaKind.RGBA_IMAGE:
            self.image_compressor.optimize_png(
                request.input_path,
                request.output_path,
                compress_level=request.options.png_compress_level,
                force_reencode=request.options.force_reencode,
            )
        else:
            raise UnsupportedFormat(f"Unsupported file type: {request.input_path.suffix}")

        compressed_size = request.output_path.stat().st_size
        return CompressionStats.from_sizes(original_size, compressed_size, time.monotonic() - start)

    @staticmethod
    def _print_result(result: CompressionStats) -> None:
        sizes = f"{format_size(result.original_size)} → {format_size(result.compressed_size)}"
        elapsed = format_duration(result.duration_seconds)
        if result.size_reduction_percent < 0:
            print(f"  ⚠️  Compressed (larger): {sizes} ({-result.size_reduction_percent:.1f}% increase, {elapsed})")
        else:
            print(f"  ✓ Compressed: {sizes} ({result.size_reduction_percent:.1f}% reduction, {elapsed})")

    def _record_failure(self, name: str, kind: Optional[MediaKind], error: Exception, file_start_time: float) -> None:
        print(f"  ✗ Error processing {name}: {error}")
        self.logger.error(f"Failed to compress {name}: {error}")
        self.stats.record(
            name,
            ERROR,
            kind,
            processing_time=time.monotonic() - file_start_time,
            message=str(error),
        )

    def _cleanup_output(self, out_path: Path) -> None:
        try:
            if out_path.exists():
                out_path.unlink()
        except OSError as error:
            self.logger.warning(f"Could not remove partial output {out_path}: {error}")
