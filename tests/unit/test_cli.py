"""Unit tests for the command line entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from svn_stager.cli import main
from svn_stager.scm import Credentials, ErrorKind, RetrievalError, SourceInfo

TRUNK = "https://svn.example.org/proj/trunk"


class TestDownloadCommand:
    """Test `svn-stager download`."""

    def test_download_success(self, tmp_path):
        """Test that the request is built from options and the result printed."""
        with patch("svn_stager.cli.SvnClone") as mock_clone:
            mock_clone.return_value.download.return_value = SourceInfo(
                location=TRUNK, ref="42", context_dir="lib/foo"
            )
            result = CliRunner().invoke(main, [
                "download", f"{TRUNK}#frag",
                "--working-dir", str(tmp_path),
                "--revision", "42",
                "--context-dir", "lib/foo",
                "--username", "u",
                "--password", "p",
                "--no-hybrid-paths",
            ])

        assert result.exit_code == 0, result.output
        assert f"Location: {TRUNK}" in result.output
        assert "Ref: 42" in result.output
        assert "Context dir: lib/foo" in result.output

        assert mock_clone.call_args[1]["hybrid_paths"] is False
        request = mock_clone.return_value.download.call_args[0][0]
        assert request.working_dir == Path(tmp_path)
        assert request.source.string_no_fragment() == TRUNK
        assert request.revision == "42"
        assert request.context_dir == "lib/foo"
        assert request.credentials == Credentials("u", "p")

    def test_download_without_credentials(self, tmp_path):
        """Test that no credentials are attached when none are given."""
        with patch("svn_stager.cli.SvnClone") as mock_clone:
            mock_clone.return_value.download.return_value = SourceInfo(location=TRUNK, ref="")
            result = CliRunner().invoke(main, ["download", TRUNK, "-w", str(tmp_path)])

        assert result.exit_code == 0, result.output
        request = mock_clone.return_value.download.call_args[0][0]
        assert request.credentials is None
        assert mock_clone.call_args[1]["hybrid_paths"] is None

    def test_download_failure(self, tmp_path):
        """Test that a RetrievalError exits with status 1 and names the kind."""
        with patch("svn_stager.cli.SvnClone") as mock_clone:
            mock_clone.return_value.download.side_effect = RetrievalError(
                "svn checkout failed", kind=ErrorKind.CHECKOUT_FAILURE
            )
            result = CliRunner().invoke(main, ["download", TRUNK, "-w", str(tmp_path)])

        assert result.exit_code == 1
        assert "checkout-failure" in result.output

    def test_invalid_source(self, tmp_path):
        """Test that an empty source exits with status 2."""
        result = CliRunner().invoke(main, ["download", "", "-w", str(tmp_path)])
        assert result.exit_code == 2
        assert "Invalid source" in result.output

    def test_log_file_sink(self, tmp_path):
        """Test that --log-file wires a FileLogSink into the downloader."""
        log_file = tmp_path / "logs" / "svn.log"
        with patch("svn_stager.cli.SvnClone") as mock_clone:
            mock_clone.return_value.download.return_value = SourceInfo(location=TRUNK, ref="")
            result = CliRunner().invoke(main, [
                "download", TRUNK, "-w", str(tmp_path), "--log-file", str(log_file),
            ])

        assert result.exit_code == 0, result.output
        sink = mock_clone.call_args[1]["output_sink"]
        assert sink is not None
        assert sink.log_file_path == log_file
        assert log_file.exists()
