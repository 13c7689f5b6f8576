"""
Test data and file fixtures.
"""

import struct
import zlib
from pathlib import Path
from typing import List

from PIL import Image


def create_test_video_file(directory: Path, name: str = "test_video.mp4", size: int = 1000) -> Path:
    """Create a placeholder video file with specified size."""
    video_path = directory / name
    video_path.parent.mkdir(parents=True, exist_ok=True)
    video_path.write_bytes(b"0" * size)
    return video_path


def create_test_jpeg(directory: Path, name: str = "photo.jpg", size=(64, 48), color=(200, 40, 40)) -> Path:
    """Create a real JPEG image."""
    image_path = directory / name
    image_path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(image_path, format="JPEG", quality=100)
    return image_path


def create_test_png(directory: Path, name: str = "icon.png", size=(64, 48), color=(10, 120, 200, 128)) -> Path:
    """Create a real RGBA PNG image, saved without compression."""
    image_path = directory / name
    image_path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(image_path, format="PNG", compress_level=0)
    return image_path


def create_test_png16(directory: Path, name: str = "deep.png", size=(2, 2)) -> Path:
    """Create a 16-bit-per-channel RGBA PNG (Pillow cannot write these itself)."""

    def chunk(tag: bytes, body: bytes) -> bytes:
        return struct.pack(">I", len(body)) + tag + body + struct.pack(">I", zlib.crc32(tag + body))

    width, height = size
    row = b"\x00" + b"\x12\x34\x56\x78\x9a\xbc\xff\xff" * width
    data = (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", struct.pack(">IIBBBBB", width, height, 16, 6, 0, 0, 0))
        + chunk(b"IDAT", zlib.compress(row * height))
        + chunk(b"IEND", b"")
    )
    image_path = directory / name
    image_path.parent.mkdir(parents=True, exist_ok=True)
    image_path.write_bytes(data)
    return image_path


def create_test_apng(directory: Path, name: str = "anim.png", size=(8, 8)) -> Path:
    """Create a two-frame animated PNG."""
    image_path = directory / name
    image_path.parent.mkdir(parents=True, exist_ok=True)
    first = Image.new("RGBA", size, (255, 0, 0, 255))
    second = Image.new("RGBA", size, (0, 0, 255, 128))
    first.save(image_path, format="PNG", save_all=True, append_images=[second], duration=100, loop=0)
    return image_path


def create_test_directory_structure(base_dir: Path, structure: List[str]) -> None:
    """Create a directory structure for testing.

    Args:
        base_dir: Base directory to create structure in
        structure: List of relative paths (files or directories)
    """
    for item in structure:
        path = base_dir / item
        if item.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
