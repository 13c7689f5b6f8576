from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from squashy.core.exceptions import ProbeError
from squashy.core.models import ProbeResult


# ============================================================================
# Media Toolchain Interface
# ============================================================================


class MediaToolchain(ABC):
    """External prober/encoder used by the video policy engine."""

    @abstractmethod
    def check_available(self) -> None:
        """
        Verify the encoder can be invoked.

        Raises:
            EncoderUnavailable: If the tools cannot be run
        """

    @abstractmethod
    def probe(self, path: Path) -> ProbeResult:
        """
        Return the dimensions of the first video stream.

        Raises:
            ProbeError: If the prober fails or its output cannot be parsed
        """

    @abstractmethod
    def encode(self, args: List[str]) -> int:
        """Run the encoder with args to completion and return its exit status."""


def parse_probe_output(output: str) -> ProbeResult:
    """
    Parse 'width,height' as printed by ffprobe with -of csv=p=0.

    Raises:
        ProbeError: Unless the output holds exactly two comma-separated integers
    """
    parts = output.strip().split(",")
    if len(parts) != 2:
        raise ProbeError(f"Unexpected probe output: {output.strip()!r}")
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError as error:
        raise ProbeError(f"Unexpected probe output: {output.strip()!r}") from error
    if width < 0 or height < 0:
        raise ProbeError(f"Negative dimensions in probe output: {output.strip()!r}")
    return ProbeResult(width=width, height=height)
