"""
Reusable fakes for testing.
"""

from pathlib import Path
from typing import List, Optional, Sequence

from squashy.core.exceptions import EncoderUnavailable, ProbeError
from squashy.core.models import ProbeResult
from squashy.core.toolchain import MediaToolchain


class FakeToolchain(MediaToolchain):
    """
    In-memory stand-in for ffmpeg/ffprobe.

    encode() writes `output_size` bytes to the last argument (the output path)
    and returns 0, or returns `returncode` for inputs whose name contains any
    of `fail_for`.
    """

    def __init__(
        self,
        dimensions: Optional[ProbeResult] = None,
        probe_error: bool = False,
        available: bool = True,
        output_size: int = 100,
        returncode: int = 1,
        fail_for: Sequence[str] = (),
    ):
        self.dimensions = dimensions
        self.probe_error = probe_error
        self.available = available
        self.output_size = output_size
        self.returncode = returncode
        self.fail_for = tuple(fail_for)
        self.calls: List[tuple] = []

    @property
    def encode_calls(self) -> List[List[str]]:
        return [call[1] for call in self.calls if call[0] == "encode"]

    @property
    def probe_calls(self) -> List[Path]:
        return [call[1] for call in self.calls if call[0] == "probe"]

    def check_available(self) -> None:
        self.calls.append(("check_available",))
        if not self.available:
            raise EncoderUnavailable("FFmpeg not found")

    def probe(self, path: Path) -> ProbeResult:
        self.calls.append(("probe", path))
        if self.probe_error or self.dimensions is None:
            raise ProbeError("Unexpected probe output: ''")
        return self.dimensions

    def encode(self, args: List[str]) -> int:
        self.calls.append(("encode", list(args)))
        input_path = args[args.index("-i") + 1]
        if any(keyword in Path(input_path).name for keyword in self.fail_for):
            return self.returncode
        output_path = Path(args[-1])
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(b"0" * self.output_size)
        return 0


def mock_ffmpeg_progress_line(frame: int = 100, fps: float = 25.0, time: str = "00:00:10.00") -> str:
    """Generate a mock FFmpeg progress line."""
    return f"frame=   {frame} fps= {fps} q=28.0 size=    1024kB time={time} bitrate= 800.0kbits/s speed=1.0x"
