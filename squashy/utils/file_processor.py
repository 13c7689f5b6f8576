import os
from pathlib import Path
from typing import Iterator, Optional

from squashy.core.exceptions import FileSystemError, PathError, UnsupportedFormat
from squashy.core.media_types import MediaKind, normalize_extension
from squashy.core.models import InputFile, OutputTarget
from squashy.utils.logger import get_logger


# ============================================================================
# File Processor
# ============================================================================


class FileProcessor:
    """Path resolution, traversal, output mapping and the skip policy."""

    @staticmethod
    def resolve_absolute(path: Path) -> Path:
        """
        Canonicalize an existing path.

        Raises:
            PathError: If the path does not exist or cannot be canonicalized
                (broken symlink, symlink loop, permission denied)
        """
        try:
            return Path(path).resolve(strict=True)
        except (OSError, RuntimeError) as error:
            raise PathError(f"Cannot resolve path {path}: {error}") from error

    @staticmethod
    def relativize(root: Path, path: Path) -> Path:
        """
        Return path relative to root.

        Raises:
            PathError: If path is not under root
        """
        try:
            return Path(path).relative_to(root)
        except ValueError as error:
            raise PathError(f"{path} is not inside {root}") from error

    @staticmethod
    def build_input_file(root: Path, path: Path) -> InputFile:
        """Resolve a candidate and record its path relative to the (canonical) root."""
        absolute = FileProcessor.resolve_absolute(path)
        relative = FileProcessor.relativize(root, absolute)
        return InputFile(path=absolute, relative_path=relative, extension=normalize_extension(absolute.suffix))

    @staticmethod
    def walk(root: Path, exclude: Optional[Path] = None) -> Iterator[Path]:
        """
        Yield every regular file under root, in sorted order.

        Unreadable directories are logged and skipped; the walk carries on
        with the rest of the tree. Symlinked directories are not followed.

        Args:
            root: Directory to traverse
            exclude: Subtree to prune from the walk (e.g. the output root)
        """
        logger = get_logger()
        excluded = exclude.resolve() if exclude is not None else None

        def on_error(error: OSError) -> None:
            logger.warning(f"Skipping unreadable directory {error.filename}: {error.strerror}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=False):
            current = Path(dirpath)
            if excluded is not None:
                dirnames[:] = [d for d in dirnames if not FileProcessor.is_within(current / d, excluded)]
            dirnames.sort()
            for name in sorted(filenames):
                candidate = current / name
                if candidate.is_file():
                    yield candidate

    @staticmethod
    def is_within(path: Path, folder: Path) -> bool:
        """True if path is folder itself or lies inside it (canonical path containment)."""
        try:
            return Path(path).resolve().is_relative_to(Path(folder).resolve())
        except (OSError, RuntimeError):
            return False

    @staticmethod
    def map_output(output_root: Path, relative_path: Path, kind: MediaKind) -> OutputTarget:
        """
        Mirror relative_path under output_root with the kind's extension.

        Creates the destination's parent directories.

        Raises:
            UnsupportedFormat: For MediaKind.UNSUPPORTED
            FileSystemError: If the directories cannot be created
        """
        extension = kind.output_extension
        if extension is None:
            raise UnsupportedFormat(f"No output format for {relative_path}")

        out_path = (output_root / relative_path).with_suffix(f".{extension}")
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise FileSystemError(f"Cannot create output directory {out_path.parent}: {error}") from error
        return OutputTarget(path=out_path, kind=kind)

    @staticmethod
    def should_skip(output_path: Path, force: bool) -> bool:
        """Skip when the output already exists as a file, unless forced."""
        return not force and output_path.is_file()

    @staticmethod
    def partial_path(out_path: Path) -> Path:
        """Hidden sibling an encode writes to before it is renamed onto out_path."""
        return out_path.with_name(f".{out_path.stem}.partial{out_path.suffix}")
