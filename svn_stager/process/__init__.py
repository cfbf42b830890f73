"""Process execution boundary.

Downloaders depend only on the `ProcessRunner` protocol; the subprocess-backed
implementation is injected so tests can substitute a recording double.
"""

from .interface import InMemoryLogSink, LogSink, ProcessLaunchError, ProcessRunner
from .logging import FileLogSink
from .subprocess_runner import SubprocessRunner

__all__ = [
    "FileLogSink",
    "InMemoryLogSink",
    "LogSink",
    "ProcessLaunchError",
    "ProcessRunner",
    "SubprocessRunner",
]
