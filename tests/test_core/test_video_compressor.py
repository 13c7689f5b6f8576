"""
Tests for squashy.core.video_compressor module.
"""

import pytest

from squashy.core.config import VideoEncodingConfig
from squashy.core.exceptions import EncodeFailed, EncoderUnavailable, InputNotFoundError, UnsupportedFormat
from squashy.core.models import ProbeResult
from squashy.core.video_compressor import VideoCompressor
from test_utils.fixtures import create_test_video_file
from test_utils.mocks import FakeToolchain


@pytest.mark.unit
class TestVideoCompressor:
    """Tests for VideoCompressor class."""

    def test_initialization(self, fake_toolchain):
        compressor = VideoCompressor(fake_toolchain)

        assert compressor.toolchain is fake_toolchain

    def test_compress_returns_stats(self, fake_toolchain, video_config, temp_dir):
        """A successful encode reports sizes and reduction."""
        in_path = create_test_video_file(temp_dir, "clip.mov", size=1000)
        out_path = temp_dir / "compress" / "clip.mp4"
        fake_toolchain.output_size = 250

        stats = VideoCompressor(fake_toolchain).compress(in_path, out_path, video_config)

        assert out_path.exists()
        assert stats.original_size == 1000
        assert stats.compressed_size == 250
        assert stats.size_reduction_percent == pytest.approx(75.0)
        assert stats.duration_seconds >= 0

    def test_compress_creates_output_parent(self, fake_toolchain, video_config, temp_dir):
        in_path = create_test_video_file(temp_dir, "clip.mp4")
        out_path = temp_dir / "compress" / "deep" / "nested" / "clip.mp4"

        VideoCompressor(fake_toolchain).compress(in_path, out_path, video_config)

        assert out_path.parent.is_dir()

    def test_call_order(self, fake_toolchain, video_config, temp_dir):
        """Availability is checked before probing, probing before encoding."""
        in_path = create_test_video_file(temp_dir, "clip.mp4")

        VideoCompressor(fake_toolchain).compress(in_path, temp_dir / "out" / "clip.mp4", video_config)

        assert [call[0] for call in fake_toolchain.calls] == ["check_available", "probe", "encode"]

    def test_missing_input(self, fake_toolchain, video_config, temp_dir):
        with pytest.raises(InputNotFoundError) as exc_info:
            VideoCompressor(fake_toolchain).compress(temp_dir / "missing.mp4", temp_dir / "out.mp4", video_config)

        assert exc_info.value.path == temp_dir / "missing.mp4"
        assert fake_toolchain.calls == []

    def test_non_video_extension(self, fake_toolchain, video_config, temp_dir):
        in_path = temp_dir / "notes.txt"
        in_path.write_text("hello")

        with pytest.raises(UnsupportedFormat):
            VideoCompressor(fake_toolchain).compress(in_path, temp_dir / "out.mp4", video_config)

        assert fake_toolchain.calls == []

    def test_encoder_unavailable(self, video_config, temp_dir):
        """Nothing is probed and no output directory is created."""
        toolchain = FakeToolchain(dimensions=ProbeResult(1920, 1080), available=False)
        in_path = create_test_video_file(temp_dir, "clip.mp4")
        out_path = temp_dir / "compress" / "clip.mp4"

        with pytest.raises(EncoderUnavailable):
            VideoCompressor(toolchain).compress(in_path, out_path, video_config)

        assert toolchain.probe_calls == []
        assert toolchain.encode_calls == []
        assert not out_path.parent.exists()

    def test_uhd_source_is_downscaled(self, video_config, temp_dir):
        toolchain = FakeToolchain(dimensions=ProbeResult(3840, 2160))
        in_path = create_test_video_file(temp_dir, "uhd.mp4")

        VideoCompressor(toolchain).compress(in_path, temp_dir / "out" / "uhd.mp4", video_config)

        args = toolchain.encode_calls[0]
        assert args[args.index("-vf") + 1] == "scale=1920:-2"

    def test_probe_failure_encodes_without_resize(self, video_config, temp_dir):
        """An unreadable resolution is not fatal."""
        toolchain = FakeToolchain(probe_error=True)
        in_path = create_test_video_file(temp_dir, "odd.mkv")
        out_path = temp_dir / "out" / "odd.mp4"

        stats = VideoCompressor(toolchain).compress(in_path, out_path, video_config)

        assert len(toolchain.probe_calls) == 1
        assert "-vf" not in toolchain.encode_calls[0]
        assert stats.compressed_size == toolchain.output_size

    def test_probe_skipped_with_explicit_resolution(self, fake_toolchain, temp_dir):
        in_path = create_test_video_file(temp_dir, "clip.mp4")
        config = VideoEncodingConfig(resolution="1280x720")

        VideoCompressor(fake_toolchain).compress(in_path, temp_dir / "out" / "clip.mp4", config)

        assert fake_toolchain.probe_calls == []
        args = fake_toolchain.encode_calls[0]
        assert args[args.index("-s") + 1] == "1280x720"

    def test_probe_skipped_when_auto_resize_disabled(self, fake_toolchain, temp_dir):
        in_path = create_test_video_file(temp_dir, "clip.mp4")

        VideoCompressor(fake_toolchain).compress(
            in_path, temp_dir / "out" / "clip.mp4", VideoEncodingConfig(auto_resize_to_fullhd=False)
        )

        assert fake_toolchain.probe_calls == []

    def test_encode_failure(self, video_config, temp_dir):
        toolchain = FakeToolchain(dimensions=ProbeResult(1920, 1080), fail_for=["broken"], returncode=183)
        in_path = create_test_video_file(temp_dir, "broken.mp4")

        with pytest.raises(EncodeFailed) as exc_info:
            VideoCompressor(toolchain).compress(in_path, temp_dir / "out" / "broken.mp4", video_config)

        assert exc_info.value.returncode == 183
        assert exc_info.value.cmd == toolchain.encode_calls[0]
        assert "status 183" in str(exc_info.value)

    def test_uppercase_extension_is_accepted(self, fake_toolchain, video_config, temp_dir):
        in_path = create_test_video_file(temp_dir, "CLIP.MOV")

        stats = VideoCompressor(fake_toolchain).compress(in_path, temp_dir / "out" / "CLIP.mp4", video_config)

        assert stats.original_size == 1000
