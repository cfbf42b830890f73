"""Base SCM downloader protocol and the records it exchanges."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from ..config import SOURCE_DIR_NAME
from .url import SourceURL


@dataclass(frozen=True)
class Credentials:
    """Username/password pair handed to the SCM client."""

    username: str = ""
    password: str = ""

    @property
    def complete(self) -> bool:
        return bool(self.username) and bool(self.password)

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password=<redacted>)"


@dataclass(frozen=True)
class RetrievalRequest:
    """Everything one download call needs.

    - working_dir: staging root; the checkout lands in `<working_dir>/source`
    - source: location to check out (fragment is ignored)
    - revision: opaque revision pin, "" means the client's default
    - context_dir: subdirectory of the checkout that becomes the staged tree
    - credentials: optional username/password
    - ignore_submodules: skip externals/submodules where the client supports it
    """

    working_dir: Path
    source: SourceURL
    revision: str = ""
    context_dir: str = ""
    credentials: Optional[Credentials] = None
    ignore_submodules: bool = False


@dataclass(frozen=True)
class SourceInfo:
    """Description of a staged source tree, consumed by pipeline metadata."""

    location: str
    ref: str
    context_dir: str = ""
    commit_id: str = ""
    author_name: str = ""
    date: str = ""
    message: str = ""


class ErrorKind(enum.Enum):
    LAUNCH_FAILURE = "launch-failure"
    CHECKOUT_FAILURE = "checkout-failure"
    PATH_TRANSLATION_FAILURE = "path-translation-failure"
    EXTRACTION_FAILURE = "extraction-failure"


class RetrievalError(RuntimeError):
    """Raised when staging a source tree fails.

    `kind` tells callers which step failed without matching on the message.
    The underlying exception, if any, is available as `__cause__`.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind,
        source: str = "",
        target: str = "",
        exit_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.source = source
        self.target = target
        self.exit_code = exit_code
        self.__cause__ = cause


class SourceDownloader(Protocol):
    """Protocol for SCM downloaders.

    Each implementation wraps one external client program (svn, ...).
    """

    @staticmethod
    def is_scm_url(url: str) -> bool:
        """Check if URL can be handled by this downloader.

        Examples:
            SvnClone.is_scm_url("svn://example.com/repo/trunk") -> True
            SvnClone.is_scm_url("git://example.com/repo.git") -> False
        """
        ...

    def download(self, request: RetrievalRequest) -> SourceInfo:
        """Stage the requested source into `<working_dir>/source`.

        Raises:
            RetrievalError: If checkout or context extraction fails
        """
        ...
