"""Unit tests for the cygpath path translator."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from svn_stager.process.interface import ProcessLaunchError
from svn_stager.scm import CygpathTranslator, ErrorKind, RetrievalError


def fake_runner(exit_code=0, stdout=b"", stderr=b""):
    runner = MagicMock()

    def run(program, args, sink=None, environment=None):
        if stdout:
            sink.write_stdout(stdout)
        if stderr:
            sink.write_stderr(stderr)
        return exit_code

    runner.run.side_effect = run
    return runner


class TestCygpathTranslator:
    """Test CygpathTranslator.translate()."""

    def test_translate(self):
        """Test successful translation strips the trailing newline."""
        runner = fake_runner(stdout=b"/cygdrive/c/work/source\n")
        translator = CygpathTranslator(runner, command="cygpath")

        assert translator.translate("C:\\work\\source") == "/cygdrive/c/work/source"
        program, args = runner.run.call_args[0][:2]
        assert program == "cygpath"
        assert args == ["--unix", "C:\\work\\source"]

    def test_non_zero_exit(self):
        """Test that a failing cygpath raises PATH_TRANSLATION_FAILURE."""
        translator = CygpathTranslator(fake_runner(exit_code=1, stderr=b"bad path"), command="cygpath")

        with pytest.raises(RetrievalError, match="bad path") as excinfo:
            translator.translate("C:\\nope")

        assert excinfo.value.kind is ErrorKind.PATH_TRANSLATION_FAILURE
        assert excinfo.value.exit_code == 1

    def test_empty_output(self):
        """Test that empty output is treated as failure."""
        translator = CygpathTranslator(fake_runner(), command="cygpath")

        with pytest.raises(RetrievalError) as excinfo:
            translator.translate("C:\\x")

        assert excinfo.value.kind is ErrorKind.PATH_TRANSLATION_FAILURE

    def test_launch_failure(self):
        """Test that a missing cygpath binary raises PATH_TRANSLATION_FAILURE."""
        runner = MagicMock()
        runner.run.side_effect = ProcessLaunchError("no cygpath", program="cygpath")
        translator = CygpathTranslator(runner, command="cygpath")

        with pytest.raises(RetrievalError) as excinfo:
            translator.translate("C:\\x")

        assert excinfo.value.kind is ErrorKind.PATH_TRANSLATION_FAILURE
        assert isinstance(excinfo.value.__cause__, ProcessLaunchError)

    def test_command_from_config(self, monkeypatch):
        """Test that the cygpath command defaults to configuration."""
        monkeypatch.setenv("SVN_STAGER_CYGPATH_COMMAND", "/usr/bin/cygpath")
        translator = CygpathTranslator(MagicMock())
        assert translator.command == "/usr/bin/cygpath"
