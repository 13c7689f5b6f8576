from pathlib import Path
from typing import List, Optional, Union


# ============================================================================
# Exceptions
# ============================================================================


class SquashyError(Exception):
    """Base class for all errors raised while compressing media."""


class PathError(SquashyError):
    """A path could not be resolved or is not inside the expected root."""


class FileSystemError(SquashyError):
    """I/O, permission or metadata failure."""


class InputNotFoundError(FileSystemError):
    """The input file does not exist."""

    def __init__(self, path: Union[str, Path]):
        super().__init__(f"Input file does not exist: {path}")
        self.path = Path(path)


class UnsupportedFormat(SquashyError):
    """The file extension is not handled by the active classifier."""


class EncoderUnavailable(SquashyError):
    """An external tool (ffmpeg/ffprobe) cannot be invoked."""


class ProbeError(SquashyError):
    """Probe output was missing or malformed."""


class EncodeFailed(SquashyError):
    """The encoder exited with a non-zero status."""

    def __init__(self, returncode: int, cmd: Optional[List[str]] = None):
        super().__init__(f"FFmpeg exited with status {returncode}")
        self.returncode = returncode
        self.cmd = cmd or []


class CodecError(SquashyError):
    """The image codec library failed to decode or encode."""
