"""LogSink implementation for mirroring client output to a logger and a file.

This module provides a concrete implementation of the LogSink protocol that:
- Streams stdout/stderr lines to a Python logger
- Optionally persists the raw bytes to a log file under the working directory
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)


class FileLogSink:
    """LogSink that writes to both a logger and (optionally) the filesystem.

    Stdout lines are logged at INFO, stderr lines at ERROR. When a log file
    path is given, every chunk is also appended to that file for archival.
    """

    def __init__(
        self,
        output_logger: logging.Logger,
        log_file_path: Optional[Path] = None,
    ) -> None:
        """Initialize FileLogSink with logger and optional file destination.

        Args:
            output_logger: Logger receiving decoded output lines
            log_file_path: Path to log file (e.g., `<workingDir>/checkout.log`)
        """
        self.output_logger = output_logger
        self.log_file_path = log_file_path
        self._file_handle: Optional[BinaryIO] = None

        if log_file_path is None:
            return

        try:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            # Append mode, several commands may share one file
            self._file_handle = open(log_file_path, "ab")
        except OSError as exc:
            # Log error but don't fail - the logger still gets the output
            logger.warning(
                "Failed to open log file %s: %s. Continuing with logger-only output.",
                log_file_path,
                exc,
            )
            self._file_handle = None

    def _log_lines(self, data: bytes, level: int) -> None:
        text = data.decode("utf-8", errors="replace")
        for line in text.splitlines():
            if line.strip():
                self.output_logger.log(level, line)

    def _persist(self, data: bytes) -> None:
        if not self._file_handle:
            return
        try:
            self._file_handle.write(data)
            self._file_handle.flush()
        except OSError as exc:
            logger.warning("Error writing to log file %s: %s", self.log_file_path, exc)

    def write_stdout(self, data: bytes) -> None:
        if not data:
            return
        self._log_lines(data, logging.INFO)
        self._persist(data)

    def write_stderr(self, data: bytes) -> None:
        if not data:
            return
        self._log_lines(data, logging.ERROR)
        self._persist(data)

    def close(self) -> None:
        """Close log file handle. Should be called when logging is complete."""
        if self._file_handle:
            try:
                self._file_handle.close()
            except OSError as exc:
                logger.warning("Error closing log file %s: %s", self.log_file_path, exc)
            finally:
                self._file_handle = None

    def __enter__(self) -> "FileLogSink":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
