import io
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from squashy.core.exceptions import CodecError
from squashy.utils.logger import get_logger


# ============================================================================
# Image Compressor
# ============================================================================

CODEC_ERRORS = (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError)
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class ImageCompressor:
    """Handles image compression using Pillow."""

    def __init__(self):
        self.logger = get_logger()

    def compress_jpeg(self, in_path: Path, out_path: Path, quality: float) -> None:
        """
        Re-encode an image as an 8-bit RGB JPEG.

        Args:
            in_path: Source image (any format Pillow can decode)
            out_path: Destination JPEG
            quality: 0-100, rounded to the nearest integer

        Raises:
            CodecError: If the image cannot be decoded or encoded
        """
        self.logger.debug(f"Compressing JPEG: {in_path.name} -> {out_path.name} (quality={quality})")
        try:
            with Image.open(in_path) as img:
                data = self._encode_jpeg(img, quality)
        except CODEC_ERRORS as error:
            raise CodecError(f"Cannot encode {in_path.name} as JPEG: {error}") from error
        self._write(out_path, data)

    def compress_jpeg_bytes(self, data: bytes, out_path: Path, quality: float) -> None:
        """Same as compress_jpeg for an encoded image already held in memory."""
        try:
            with Image.open(io.BytesIO(data)) as img:
                encoded = self._encode_jpeg(img, quality)
        except CODEC_ERRORS as error:
            raise CodecError(f"Cannot encode image data as JPEG: {error}") from error
        self._write(out_path, encoded)

    def optimize_png(self, in_path: Path, out_path: Path, compress_level: int = 9, force_reencode: bool = True) -> None:
        """
        Losslessly re-encode a PNG with Pillow's optimizer.

        Animated and 16-bit-per-channel PNGs cannot be re-saved by Pillow
        without losing frames or precision, so their source bytes are copied
        as-is. Without force_reencode the source bytes are also kept when the
        optimized stream is not smaller.

        Raises:
            CodecError: If the image cannot be decoded or encoded
        """
        self.logger.debug(f"Optimizing PNG: {in_path.name} -> {out_path.name} (level={compress_level})")
        try:
            source = in_path.read_bytes()
        except OSError as error:
            raise CodecError(f"Cannot optimize {in_path.name}: {error}") from error
        self._write(out_path, self._optimize_png_data(source, in_path.name, compress_level, force_reencode))

    def optimize_png_bytes(
        self, data: bytes, out_path: Path, compress_level: int = 9, force_reencode: bool = True
    ) -> None:
        """
        Same as optimize_png for an image already held in memory.

        Non-PNG input (any format Pillow decodes) is converted to RGBA first.
        """
        self._write(out_path, self._optimize_png_data(data, "image data", compress_level, force_reencode))

    def _optimize_png_data(self, source: bytes, label: str, compress_level: int, force_reencode: bool) -> bytes:
        try:
            with Image.open(io.BytesIO(source)) as img:
                if img.format == "PNG":
                    reason = self._lossy_resave_reason(img, source)
                    if reason:
                        self.logger.info(f"{label} is {reason}, keeping source bytes")
                        return source
                    frame = img
                else:
                    frame = img.convert("RGBA")
                buffer = io.BytesIO()
                frame.save(buffer, format="PNG", optimize=True, compress_level=compress_level)
        except CODEC_ERRORS as error:
            raise CodecError(f"Cannot optimize {label}: {error}") from error

        optimized = buffer.getvalue()
        if not force_reencode and source.startswith(PNG_SIGNATURE) and len(optimized) >= len(source):
            self.logger.debug(f"{label} is already optimal, keeping source bytes")
            return source
        return optimized

    @staticmethod
    def _lossy_resave_reason(img: Image.Image, source: bytes) -> Optional[str]:
        if getattr(img, "n_frames", 1) > 1:
            return "animated"
        depth = png_bit_depth(source)
        if depth is not None and depth > 8:
            return f"{depth}-bit"
        return None

    @staticmethod
    def _encode_jpeg(img: Image.Image, quality: float) -> bytes:
        rgb = img.convert("RGB")
        buffer = io.BytesIO()
        rgb.save(buffer, format="JPEG", quality=jpeg_quality_value(quality), optimize=True)
        return buffer.getvalue()

    @staticmethod
    def _write(out_path: Path, data: bytes) -> None:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "wb") as f:
            f.write(data)


def jpeg_quality_value(quality: float) -> int:
    """Clamp a float quality to Pillow's integer 0-100 range."""
    return max(0, min(100, int(round(quality))))


def png_bit_depth(data: bytes) -> Optional[int]:
    """Bits per channel from the IHDR chunk, or None if data is not a PNG stream."""
    if not data.startswith(PNG_SIGNATURE) or data[12:16] != b"IHDR" or len(data) < 25:
        return None
    return data[24]
