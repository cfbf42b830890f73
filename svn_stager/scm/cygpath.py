"""Path translation for clients that expect Cygwin-style paths."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from .. import config as stager_config
from ..process.interface import InMemoryLogSink, ProcessLaunchError, ProcessRunner
from .base import ErrorKind, RetrievalError

logger = logging.getLogger(__name__)


class PathTranslator(Protocol):
    def translate(self, path: str) -> str:  # pragma: no cover - protocol
        ...


class CygpathTranslator:
    """Converts host paths with `cygpath --unix`.

    Used in hybrid mode, where the svn client is a Cygwin build running on
    a Windows host and cannot read native `C:\\...` paths.
    """

    def __init__(self, runner: ProcessRunner, command: Optional[str] = None) -> None:
        self.runner = runner
        self.command = command or stager_config.stager_cygpath_command()

    def translate(self, path: str) -> str:
        """Return the Cygwin form of path.

        Raises:
            RetrievalError: PATH_TRANSLATION_FAILURE if cygpath fails
        """
        sink = InMemoryLogSink()
        try:
            exit_code = self.runner.run(self.command, ["--unix", path], sink)
        except ProcessLaunchError as exc:
            logger.error("Path translation failed for %s: %s", path, exc)
            raise RetrievalError(
                f"Unable to run {self.command} for {path}: {exc}",
                kind=ErrorKind.PATH_TRANSLATION_FAILURE,
                target=path,
                cause=exc,
            ) from exc

        translated = sink.stdout_text().strip()
        if exit_code != 0 or not translated:
            stderr = sink.stderr.decode("utf-8", errors="replace").strip()
            logger.error(
                "Path translation failed for %s: exit code %d, output %r",
                path, exit_code, stderr,
            )
            raise RetrievalError(
                f"{self.command} could not translate {path}: {stderr or 'no output'}",
                kind=ErrorKind.PATH_TRANSLATION_FAILURE,
                target=path,
                exit_code=exit_code,
            )

        logger.debug("Translated path %s -> %s", path, translated)
        return translated
