"""
Logging for Squashy.

A process-wide logger named "squashy" writing operator messages to the
console and, optionally, detailed records (with module:function:line) to a
dated log file.
"""

import logging
import sys
import threading
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


# ============================================================================
# Formatters
# ============================================================================


class DetailedFormatter(logging.Formatter):
    """Formatter with location tracking (module:function:line)."""

    def format(self, record: logging.LogRecord) -> str:
        record.location = f"{record.module}:{record.funcName}:{record.lineno}"
        return super().format(record)


CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] [%(location)s] %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# ============================================================================
# Singleton Logger
# ============================================================================


class SquashyLogger:
    """
    Thread-safe singleton wrapper around the "squashy" logger.

    Console output shows WARNING and above by default so it does not compete
    with the progress lines; the file handler captures everything at the
    configured level.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if getattr(self, "_initialized", False):
            return

        self._initialized = True
        self._logger = logging.getLogger("squashy")
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False

        self._console_handler: Optional[logging.Handler] = None
        self._file_handler: Optional[logging.Handler] = None
        self._log_file: Optional[Path] = None

    @property
    def log_file(self) -> Optional[Path]:
        return self._log_file

    def configure(
        self,
        log_level: str = "WARNING",
        log_dir: Optional[Union[str, Path]] = None,
        enable_console: bool = True,
        max_bytes: int = 0,
        backup_count: int = 5,
    ) -> None:
        """
        Configure handlers.

        Args:
            log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for the log file; no file logging when None
            enable_console: Emit records to stderr
            max_bytes: Rotate the log file at this size (0 disables rotation)
            backup_count: Rotated files to keep
        """
        self._cleanup_handlers()

        level = getattr(logging, log_level.upper(), None)
        if not isinstance(level, int):
            raise ValueError(f"Invalid log level: {log_level}")
        self._logger.setLevel(level)

        if enable_console:
            self._console_handler = logging.StreamHandler(sys.stderr)
            self._console_handler.setLevel(level)
            self._console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))
            self._logger.addHandler(self._console_handler)

        if log_dir is not None:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            self._log_file = log_path / f"squashy_{datetime.now().strftime('%Y%m%d')}.log"

            if max_bytes > 0:
                self._file_handler = RotatingFileHandler(
                    self._log_file,
                    maxBytes=max_bytes,
                    backupCount=backup_count,
                    encoding="utf-8",
                    delay=True,
                )
            else:
                self._file_handler = logging.FileHandler(self._log_file, encoding="utf-8", delay=True)

            self._file_handler.setLevel(level)
            self._file_handler.setFormatter(DetailedFormatter(fmt=FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
            self._logger.addHandler(self._file_handler)

    def get_logger(self) -> logging.Logger:
        """Get the underlying logger instance."""
        return self._logger

    def _cleanup_handlers(self) -> None:
        for handler in list(self._logger.handlers):
            handler.close()
            self._logger.removeHandler(handler)
        self._console_handler = None
        self._file_handler = None
        self._log_file = None

    def critical(self, msg: str, *args, **kwargs) -> None:
        kwargs.setdefault("stacklevel", 2)
        self._logger.critical(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        kwargs.setdefault("stacklevel", 2)
        self._logger.error(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        kwargs.setdefault("stacklevel", 2)
        self._logger.warning(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        kwargs.setdefault("stacklevel", 2)
        self._logger.info(msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs) -> None:
        kwargs.setdefault("stacklevel", 2)
        self._logger.debug(msg, *args, **kwargs)


# ============================================================================
# Global Logger Instance
# ============================================================================


def get_logger() -> SquashyLogger:
    """
    Get the global SquashyLogger instance.

    Returns:
        Singleton SquashyLogger instance
    """
    return SquashyLogger()
