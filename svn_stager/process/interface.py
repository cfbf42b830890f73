from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence


class LogSink(Protocol):
    """Destination for child process stdout/stderr streams."""

    def write_stdout(self, data: bytes) -> None:  # pragma: no cover - protocol
        ...

    def write_stderr(self, data: bytes) -> None:  # pragma: no cover - protocol
        ...


class ProcessRunner(Protocol):
    """Abstract process executor used by the SCM downloaders.

    Implementations only report success or failure through the exit code.
    Interpreting the code is left to the caller.
    """

    def run(
        self,
        program: str,
        args: Sequence[str],
        sink: Optional[LogSink] = None,
        environment: Optional[Mapping[str, str]] = None,
    ) -> int:  # pragma: no cover - protocol
        """Run program with args and block until it exits.

        Args:
            program: Program name or path (e.g. "svn")
            args: Arguments passed after the program name
            sink: Receives captured stdout/stderr. When None the child
                inherits the parent's streams.
            environment: Extra environment variables for the child

        Returns:
            Exit code of the program

        Raises:
            ProcessLaunchError: If the program could not be started
        """
        ...


class ProcessLaunchError(RuntimeError):
    """Raised when an external program cannot be launched at all."""

    def __init__(
        self,
        message: str,
        *,
        program: str = "",
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.program = program
        self.__cause__ = cause


class InMemoryLogSink:
    """Simple bytes-accumulating sink useful for tests and output capture."""

    def __init__(self) -> None:
        self._stdout: bytearray = bytearray()
        self._stderr: bytearray = bytearray()

    def write_stdout(self, data: bytes) -> None:
        self._stdout.extend(data)

    def write_stderr(self, data: bytes) -> None:
        self._stderr.extend(data)

    @property
    def stdout(self) -> bytes:
        return bytes(self._stdout)

    @property
    def stderr(self) -> bytes:
        return bytes(self._stderr)

    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")
