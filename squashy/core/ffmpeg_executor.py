import re
import shutil
import subprocess  # nosec B404
import time
from pathlib import Path
from typing import Dict, List, Optional

from squashy.core.exceptions import EncoderUnavailable, ProbeError
from squashy.core.models import ProbeResult
from squashy.core.toolchain import MediaToolchain, parse_probe_output
from squashy.utils.logger import get_logger


# ============================================================================
# FFmpeg Executor
# ============================================================================

WINDOWS_TOOL_DIRS = [
    r"C:\ffmpeg",
    r"C:\ffmpeg\bin",
    r"C:\Program Files\ffmpeg\bin",
    r"C:\Program Files (x86)\ffmpeg\bin",
]

PROBE_ARGS = [
    "-v",
    "error",
    "-select_streams",
    "v:0",
    "-show_entries",
    "stream=width,height",
    "-of",
    "csv=p=0",
]

# Fields ffmpeg writes on its periodic stderr status line
PROGRESS_FIELDS = {
    "frame": re.compile(r"frame=\s*(\d+)"),
    "fps": re.compile(r"fps=\s*([\d.]+)"),
    "time": re.compile(r"time=(\d{2}:\d{2}:\d{2}\.\d{2})"),
    "bitrate": re.compile(r"bitrate=\s*([\d.]+[kM]bits/s)"),
    "speed": re.compile(r"speed=\s*([\d.]+x)"),
}

PROGRESS_LABELS = [("time", "Time"), ("frame", "Frame"), ("fps", "FPS"), ("bitrate", "Bitrate"), ("speed", "Speed")]


class FFmpegExecutor(MediaToolchain):
    """Runs ffprobe and ffmpeg, printing ffmpeg progress while it encodes."""

    def __init__(
        self,
        ffmpeg_path: Optional[str] = None,
        ffprobe_path: Optional[str] = None,
        progress_interval: float = 5.0,
    ):
        """
        Resolve tool paths once; missing tools are reported by check_available().

        Args:
            ffmpeg_path: Explicit ffmpeg executable, or None to look it up
            ffprobe_path: Explicit ffprobe executable, or None to look it up
            progress_interval: Minimum seconds between printed progress lines
        """
        self.ffmpeg_path = ffmpeg_path or self.find_tool("ffmpeg")
        self.ffprobe_path = ffprobe_path or self.find_tool("ffprobe")
        self.progress_interval = progress_interval
        self.logger = get_logger()

    @staticmethod
    def find_tool(name: str) -> Optional[str]:
        """Look up a tool on PATH, then in the usual Windows install folders."""
        found = shutil.which(name)
        if found:
            return found

        for directory in WINDOWS_TOOL_DIRS:
            candidate = Path(directory) / f"{name}.exe"
            if candidate.exists():
                return str(candidate)

        return None

    def check_available(self) -> None:
        if self.ffmpeg_path is None:
            raise EncoderUnavailable(
                "FFmpeg not found. Please install FFmpeg and add it to PATH, "
                "or specify the path using --ffmpeg-path option."
            )
        if self.ffprobe_path is None:
            raise EncoderUnavailable(
                "ffprobe not found. It ships with FFmpeg; add it to PATH "
                "or specify the path using --ffprobe-path option."
            )

        try:
            result = subprocess.run(  # nosec B603
                [self.ffmpeg_path, "-version"],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as error:
            raise EncoderUnavailable(f"FFmpeg could not be started ({self.ffmpeg_path}): {error}") from error

        if result.returncode != 0:
            raise EncoderUnavailable(f"FFmpeg version check failed with status {result.returncode}")

    def probe(self, path: Path) -> ProbeResult:
        if self.ffprobe_path is None:
            raise ProbeError("ffprobe not found")

        cmd = [self.ffprobe_path] + PROBE_ARGS + [str(path)]
        self.logger.debug(f"Probing: {' '.join(cmd)}")
        try:
            result = subprocess.run(  # nosec B603
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as error:
            raise ProbeError(f"ffprobe could not be started: {error}") from error

        if result.returncode != 0:
            raise ProbeError(f"ffprobe exited with status {result.returncode}: {result.stderr.strip()}")
        return parse_probe_output(result.stdout)

    def encode(self, args: List[str]) -> int:
        if self.ffmpeg_path is None:
            raise EncoderUnavailable("FFmpeg not found")
        return self.run_with_progress(args, progress_interval=self.progress_interval).returncode

    @staticmethod
    def parse_progress(line: str) -> Optional[Dict[str, str]]:
        """Pull the frame/fps/time/bitrate/speed fields out of an ffmpeg status line."""
        progress = {}
        for key, pattern in PROGRESS_FIELDS.items():
            match = pattern.search(line)
            if match:
                progress[key] = match.group(1)
        return progress or None

    def run_with_progress(self, args: List[str], progress_interval: float = 5.0) -> subprocess.CompletedProcess:
        """
        Run ffmpeg with the given arguments, echoing throttled progress to stdout.

        Args:
            args: Arguments placed after the ffmpeg executable
            progress_interval: Minimum seconds between printed progress lines

        Returns:
            CompletedProcess whose stderr holds every non-empty stderr line; a non-zero exit is returned, not raised
        """
        cmd = [self.ffmpeg_path] + args
        self.logger.debug(f"Running: {' '.join(cmd)}")

        with self._launch_process(cmd) as process:
            stderr_lines = self._drain_stderr(process, progress_interval)
            stdout, remaining_stderr = process.communicate()

        if remaining_stderr:
            stderr_lines.extend(line.rstrip() for line in remaining_stderr.splitlines() if line.strip())

        if process.returncode != 0:
            tail = "\n".join(stderr_lines[-10:])
            self.logger.error(f"FFmpeg exited with status {process.returncode}:\n{tail}")

        return subprocess.CompletedProcess(cmd, process.returncode, stdout, "\n".join(stderr_lines))

    def _launch_process(self, cmd: List[str]) -> subprocess.Popen:
        return subprocess.Popen(  # nosec B603
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )

    def _drain_stderr(self, process: subprocess.Popen, progress_interval: float) -> List[str]:
        collected: List[str] = []
        last_echo = time.time()
        for raw in process.stderr:
            text = raw.rstrip()
            if text:
                collected.append(text)
                last_echo = self._echo_progress(text, last_echo, progress_interval)
        return collected

    def _echo_progress(self, line: str, last_echo: float, interval: float) -> float:
        """Print a progress line when due; returns the time of the latest echo."""
        progress = self.parse_progress(line)
        now = time.time()
        if progress is None or now - last_echo < interval:
            return last_echo
        print(self._format_progress(progress))
        return now

    @staticmethod
    def _format_progress(progress: Dict[str, str]) -> str:
        shown = [f"{label}: {progress[key]}" for key, label in PROGRESS_LABELS if key in progress]
        return "  [Progress] " + " | ".join(shown) if shown else "  [Progress]"
