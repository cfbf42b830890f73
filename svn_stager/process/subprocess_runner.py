"""Host process execution backed by the subprocess module."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Dict, Mapping, Optional, Sequence

from .interface import LogSink, ProcessLaunchError

logger = logging.getLogger(__name__)


class SubprocessRunner:
    """ProcessRunner implementation that launches programs on the host.

    Without a sink the child writes straight to our stdout/stderr so an
    operator watching the pipeline sees the client's progress. With a sink
    both streams are captured and handed over once the child exits.
    """

    def __init__(self, base_environment: Optional[Mapping[str, str]] = None) -> None:
        self._base_environment = base_environment

    def _build_environment(
        self, environment: Optional[Mapping[str, str]]
    ) -> Optional[Dict[str, str]]:
        if not environment and self._base_environment is None:
            return None
        env = dict(os.environ if self._base_environment is None else self._base_environment)
        if environment:
            env.update(environment)
        return env

    def run(
        self,
        program: str,
        args: Sequence[str],
        sink: Optional[LogSink] = None,
        environment: Optional[Mapping[str, str]] = None,
    ) -> int:
        command = [program, *args]
        env = self._build_environment(environment)
        logger.debug("Running command: %s", program)

        try:
            if sink is None:
                result = subprocess.run(command, env=env, check=False)
            else:
                result = subprocess.run(
                    command,
                    env=env,
                    check=False,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                )
        except OSError as exc:
            logger.error("Failed to launch %s: %s", program, exc)
            raise ProcessLaunchError(
                f"Failed to launch {program}: {exc}", program=program, cause=exc
            ) from exc

        if sink is not None:
            if result.stdout:
                sink.write_stdout(result.stdout)
            if result.stderr:
                sink.write_stderr(result.stderr)

        logger.debug("Command %s exited with code %d", program, result.returncode)
        return result.returncode
