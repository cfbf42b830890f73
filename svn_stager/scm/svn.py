"""Subversion downloader.

Stages a `svn checkout` of the requested location into the working
directory, optionally keeping only one subdirectory of the checkout.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ElementTree
from pathlib import Path
from typing import Any, Dict, List, Optional

from .. import config as stager_config
from ..fs import FileSystem
from ..process.interface import InMemoryLogSink, LogSink, ProcessLaunchError, ProcessRunner
from ..process.subprocess_runner import SubprocessRunner
from .base import (
    SOURCE_DIR_NAME,
    Credentials,
    ErrorKind,
    RetrievalError,
    RetrievalRequest,
    SourceInfo,
)
from .cygpath import CygpathTranslator, PathTranslator
from .url import SourceURL

logger = logging.getLogger(__name__)


def source_specifier(source: SourceURL, revision: str = "") -> str:
    """Location handed to svn: fragment dropped, pinned with @revision."""
    spec = source.string_no_fragment()
    if revision:
        spec = f"{spec}@{revision}"
    return spec


def build_checkout_args(
    source_spec: str,
    target: str,
    credentials: Optional[Credentials] = None,
) -> List[str]:
    """Build the svn argument list for a checkout.

    Credentials are only passed when both username and password are set.

    Examples:
        build_checkout_args("https://svn.example.org/proj/trunk", "/w/source")
        -> ["checkout", "--non-interactive", "https://svn.example.org/proj/trunk", "/w/source"]
    """
    args = ["checkout"]
    if credentials is not None and credentials.complete:
        args.extend(["--username", credentials.username, "--password", credentials.password])
    args.append("--non-interactive")
    args.extend([source_spec, target])
    return args


def _validate_context_dir(context_dir: str, source: SourceURL) -> None:
    path = Path(context_dir)
    if path.is_absolute() or ".." in path.parts:
        logger.error("Rejected context directory %r for %s", context_dir, source)
        raise RetrievalError(
            f"Context directory must be relative to the checkout: {context_dir}",
            kind=ErrorKind.EXTRACTION_FAILURE,
            source=source.string_no_fragment(),
            target=context_dir,
        )


class SvnClone:
    """Subversion checkout downloader.

    Handles svn://, svn+ssh://, file:// and http(s) repository URLs. All
    collaborators are injectable; omitted ones come from configuration.
    """

    SVN_URL_PATTERNS = [
        r'^svn://',
        r'^svn\+ssh://',
        r'^file://',
        r'^https?://svn\.',
        r'^https?://.*/svn(/|$)',
        r'^https?://.*/(trunk|branches|tags)(/|$)',
    ]

    @staticmethod
    def is_scm_url(url: str) -> bool:
        """Check if URL looks like a Subversion repository.

        Examples:
            >>> SvnClone.is_scm_url("svn://example.com/repo/trunk")
            True
            >>> SvnClone.is_scm_url("https://svn.example.org/proj/trunk")
            True
            >>> SvnClone.is_scm_url("git://example.com/repo.git")
            False
        """
        for pattern in SvnClone.SVN_URL_PATTERNS:
            if re.match(pattern, url):
                return True
        return False

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        filesystem: Optional[FileSystem] = None,
        translator: Optional[PathTranslator] = None,
        hybrid_paths: Optional[bool] = None,
        svn_command: Optional[str] = None,
        collect_info: Optional[bool] = None,
        context_tmp_name: Optional[str] = None,
        output_sink: Optional[LogSink] = None,
    ) -> None:
        """Initialize svn downloader.

        Args:
            runner: Process executor (default: SubprocessRunner)
            filesystem: Filesystem helper (default: FileSystem)
            translator: Path translator for hybrid mode (default: cygpath)
            hybrid_paths: Translate paths before invoking svn
            svn_command: svn program name or path
            collect_info: Record commit metadata with `svn info --xml`
            context_tmp_name: Scratch directory relative to the working dir,
                outside the canonical source directory
            output_sink: Receives checkout output; None inherits our streams

        Raises:
            ValueError: If context_tmp_name is absolute, escapes the working
                directory or lies inside the source directory
        """
        self.runner = runner if runner is not None else SubprocessRunner()
        self.filesystem = filesystem if filesystem is not None else FileSystem()
        self.hybrid_paths = (
            stager_config.stager_hybrid_paths() if hybrid_paths is None else hybrid_paths
        )
        self.svn_command = svn_command or stager_config.stager_svn_command()
        self.collect_info = (
            stager_config.stager_collect_info() if collect_info is None else collect_info
        )
        if context_tmp_name:
            context_tmp_name = stager_config.parse_scratch_dir(context_tmp_name)
        else:
            context_tmp_name = stager_config.stager_context_tmp_name()
        self.context_tmp_name = context_tmp_name
        self.output_sink = output_sink
        if translator is None and self.hybrid_paths:
            translator = CygpathTranslator(self.runner)
        self.translator = translator

    def download(self, request: RetrievalRequest) -> SourceInfo:
        """Check out request.source and stage it into `<working_dir>/source`.

        Args:
            request: What to check out and where

        Returns:
            SourceInfo with the fragment-free location and requested revision

        Raises:
            RetrievalError: If checkout or context extraction fails, or the
                context directory escapes the checkout (EXTRACTION_FAILURE)
        """
        working_dir = Path(request.working_dir)
        source_dir = working_dir / SOURCE_DIR_NAME
        target_dir = source_dir

        if request.context_dir:
            _validate_context_dir(request.context_dir, request.source)
            target_dir = working_dir / self.context_tmp_name
            logger.debug("Downloading %r (%r) ...", str(request.source), request.context_dir)
        else:
            logger.debug("Downloading %r ...", str(request.source))

        if request.ignore_submodules:
            logger.info("SVN checking out sources (ignoring submodules) into %s", target_dir)
        else:
            logger.info("SVN checking out sources into %s", target_dir)

        try:
            target_dir.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            # Nothing was launched; svn never saw this target
            logger.error("Unable to prepare checkout target %s: %s", target_dir, exc)
            raise RetrievalError(
                f"Unable to prepare checkout directory {target_dir} before running svn: {exc}",
                kind=ErrorKind.LAUNCH_FAILURE,
                source=request.source.string_no_fragment(),
                target=str(target_dir),
                cause=exc,
            ) from exc

        self.checkout(request.source, target_dir, request.revision, request.credentials)
        logger.info("Checked out to %r", request.revision)

        metadata = self.info(target_dir) if self.collect_info else {}
        info = SourceInfo(
            location=request.source.string_no_fragment(),
            ref=request.revision,
            context_dir=request.context_dir,
            commit_id=metadata.get("commit_id", ""),
            author_name=metadata.get("author_name", ""),
            date=metadata.get("date", ""),
        )

        if request.context_dir:
            self._extract_context(target_dir, request.context_dir, source_dir)

        return info

    def _extract_context(self, scratch_dir: Path, context_dir: str, source_dir: Path) -> None:
        """Replace source_dir with the context_dir subtree of scratch_dir.

        The canonical directory is cleared before the copy. A failed copy
        leaves it empty and keeps the scratch checkout for inspection.
        """
        context_path = scratch_dir / context_dir
        try:
            self.filesystem.remove_directory(source_dir)
        except OSError as exc:
            logger.error("Failed to clear %s before extraction: %s", source_dir, exc)
            raise RetrievalError(
                f"Unable to clear {source_dir}: {exc}",
                kind=ErrorKind.EXTRACTION_FAILURE,
                source=str(context_path),
                target=str(source_dir),
                cause=exc,
            ) from exc

        try:
            self.filesystem.copy_contents(context_path, source_dir)
        except OSError as exc:
            logger.error(
                "Context extraction failed: source %s, target %s, with error %s",
                context_path, source_dir, exc,
            )
            raise RetrievalError(
                f"Unable to copy context directory {context_dir!r}: {exc}",
                kind=ErrorKind.EXTRACTION_FAILURE,
                source=str(context_path),
                target=str(source_dir),
                cause=exc,
            ) from exc

        try:
            self.filesystem.remove_directory(scratch_dir)
        except OSError as exc:
            logger.warning("Failed to remove scratch checkout %s: %s", scratch_dir, exc)

    def checkout(
        self,
        source: SourceURL,
        target: Path,
        revision: str = "",
        credentials: Optional[Credentials] = None,
    ) -> None:
        """Run `svn checkout` of source into target.

        In hybrid mode the target, and the path of a local source, are
        translated first. Remote sources are passed through untouched.

        Raises:
            RetrievalError: LAUNCH_FAILURE, CHECKOUT_FAILURE or
                PATH_TRANSLATION_FAILURE
        """
        target_arg = str(target)
        if self.hybrid_paths and self.translator is not None:
            if source.is_local():
                source = source.with_local_path(self.translator.translate(source.local_path()))
            target_arg = self.translator.translate(target_arg)

        source_spec = source_specifier(source, revision)
        args = build_checkout_args(source_spec, target_arg, credentials)
        logger.debug(
            "SVN checkout command: %s checkout %s %s (credentials: %s)",
            self.svn_command, source_spec, target_arg,
            "yes" if credentials is not None and credentials.complete else "no",
        )

        try:
            exit_code = self.runner.run(self.svn_command, args, self.output_sink)
        except ProcessLaunchError as exc:
            logger.error(
                "Checkout failed: source %s, target %s, with error %s", source, target_arg, exc
            )
            raise RetrievalError(
                f"Unable to launch {self.svn_command}: {exc}",
                kind=ErrorKind.LAUNCH_FAILURE,
                source=source_spec,
                target=target_arg,
                cause=exc,
            ) from exc

        if exit_code != 0:
            logger.error(
                "Checkout failed: source %s, target %s, with exit code %d",
                source, target_arg, exit_code,
            )
            raise RetrievalError(
                f"svn checkout of {source_spec} into {target_arg} failed with exit code {exit_code}",
                kind=ErrorKind.CHECKOUT_FAILURE,
                source=source_spec,
                target=target_arg,
                exit_code=exit_code,
            )

    def info(self, target: Path) -> Dict[str, str]:
        """Read commit metadata of a working copy with `svn info --xml`.

        Failures are logged and yield an empty dict; metadata is optional.

        Returns:
            Dict with keys commit_id, author_name, date (when available)
        """
        target_arg = str(target)
        if self.hybrid_paths and self.translator is not None:
            try:
                target_arg = self.translator.translate(target_arg)
            except RetrievalError as exc:
                logger.warning("Skipping svn info for %s: %s", target, exc)
                return {}

        sink = InMemoryLogSink()
        try:
            exit_code = self.runner.run(self.svn_command, ["info", "--xml", target_arg], sink)
        except ProcessLaunchError as exc:
            logger.warning("Unable to run svn info on %s: %s", target_arg, exc)
            return {}
        if exit_code != 0:
            logger.warning("svn info on %s failed with exit code %d", target_arg, exit_code)
            return {}

        return _parse_info_xml(sink.stdout_text())


def _parse_info_xml(text: str) -> Dict[str, str]:
    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError as exc:
        logger.warning("Unparseable svn info output: %s", exc)
        return {}

    metadata: Dict[str, str] = {}
    commit = root.find("./entry/commit")
    if commit is None:
        return metadata
    revision = commit.get("revision")
    if revision:
        metadata["commit_id"] = revision
    author = commit.findtext("author")
    if author:
        metadata["author_name"] = author
    date = commit.findtext("date")
    if date:
        metadata["date"] = date
    return metadata


def get_scm_handler(url: str, **kwargs: Any) -> SvnClone:
    """Factory function to get appropriate SCM downloader for URL.

    Args:
        url: Source location
        kwargs: Passed to the downloader constructor

    Raises:
        ValueError: If URL is not recognized as valid SCM URL

    Example:
        downloader = get_scm_handler("svn://example.com/repo/trunk")
        info = downloader.download(request)
    """
    if SvnClone.is_scm_url(url):
        return SvnClone(**kwargs)
    raise ValueError(f"Unsupported SCM URL: {url}")
