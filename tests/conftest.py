"""
Shared pytest fixtures and configuration.
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from squashy.core.config import CompressionConfig, ImageEncodingConfig, VideoEncodingConfig
from squashy.core.models import ProbeResult
from squashy.utils.logger import get_logger
from test_utils.mocks import FakeToolchain


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp()).resolve()
    yield temp_path
    # Cleanup
    if temp_path.exists():
        shutil.rmtree(temp_path)


@pytest.fixture
def sample_video(temp_dir):
    """Create a placeholder video file."""
    video_path = temp_dir / "test_video.mp4"
    video_path.write_bytes(b"0" * 1000)
    return video_path


@pytest.fixture
def fake_toolchain():
    """A FakeToolchain reporting a FullHD 16:9 source."""
    return FakeToolchain(dimensions=ProbeResult(1920, 1080))


@pytest.fixture
def video_config():
    """Default video options."""
    return VideoEncodingConfig()


@pytest.fixture
def mock_config(temp_dir):
    """Create a sample CompressionConfig rooted at temp_dir."""
    return CompressionConfig(
        root=temp_dir,
        output_dir=Path("compress"),
        force=False,
        ffmpeg_path="/fake/path/to/ffmpeg",
        ffprobe_path="/fake/path/to/ffprobe",
        progress_interval=1.0,
        image=ImageEncodingConfig(quality=70.0),
        video=VideoEncodingConfig(crf=23, preset="medium"),
    )


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers added by a test so later tests never write to a stale stream."""
    yield
    get_logger().configure(log_level="WARNING", enable_console=False)
