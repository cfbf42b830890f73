"""Unit tests for the subprocess-backed process runner."""

from __future__ import annotations

import subprocess
import sys
from unittest.mock import patch

import pytest

from svn_stager.process import InMemoryLogSink, ProcessLaunchError, SubprocessRunner


class TestSubprocessRunner:
    """Test SubprocessRunner.run()."""

    def test_capture_to_sink(self):
        """Test that stdout/stderr are handed to the sink."""
        sink = InMemoryLogSink()
        code = (
            "import sys; sys.stdout.write('out'); sys.stderr.write('err')"
        )

        exit_code = SubprocessRunner().run(sys.executable, ["-c", code], sink)

        assert exit_code == 0
        assert sink.stdout == b"out"
        assert sink.stderr == b"err"

    def test_exit_code_returned(self):
        """Test that a non-zero exit code is returned, not raised."""
        exit_code = SubprocessRunner().run(
            sys.executable, ["-c", "raise SystemExit(3)"], InMemoryLogSink()
        )
        assert exit_code == 3

    def test_missing_program(self):
        """Test that a missing binary raises ProcessLaunchError."""
        with pytest.raises(ProcessLaunchError) as excinfo:
            SubprocessRunner().run("definitely-not-a-real-svn-binary", ["checkout"])

        assert excinfo.value.program == "definitely-not-a-real-svn-binary"
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_environment_layered(self, monkeypatch):
        """Test that extra environment entries reach the child."""
        monkeypatch.setenv("SVN_STAGER_BASE_VAR", "base")
        sink = InMemoryLogSink()
        code = "import os; print(os.environ['SVN_STAGER_BASE_VAR'], os.environ['LANG'])"

        SubprocessRunner().run(sys.executable, ["-c", code], sink, environment={"LANG": "C"})

        assert sink.stdout_text().split() == ["base", "C"]

    def test_inherits_streams_without_sink(self):
        """Test that no pipes are requested when no sink is given."""
        completed = subprocess.CompletedProcess(args=["svn"], returncode=0)
        with patch("svn_stager.process.subprocess_runner.subprocess.run", return_value=completed) as mock_run:
            SubprocessRunner().run("svn", ["--version"])

        kwargs = mock_run.call_args[1]
        assert "stdout" not in kwargs
        assert "stderr" not in kwargs
        assert mock_run.call_args[0][0] == ["svn", "--version"]
