"""SCM integration module for source staging.

Provides a protocol-based abstraction over external SCM clients; svn is the
implemented client.
"""

from .base import (
    SOURCE_DIR_NAME,
    Credentials,
    ErrorKind,
    RetrievalError,
    RetrievalRequest,
    SourceDownloader,
    SourceInfo,
)
from .cygpath import CygpathTranslator, PathTranslator
from .svn import SvnClone, build_checkout_args, get_scm_handler, source_specifier
from .url import SourceURL, parse_source_url

__all__ = [
    "SOURCE_DIR_NAME",
    "Credentials",
    "CygpathTranslator",
    "ErrorKind",
    "PathTranslator",
    "RetrievalError",
    "RetrievalRequest",
    "SourceDownloader",
    "SourceInfo",
    "SourceURL",
    "SvnClone",
    "build_checkout_args",
    "get_scm_handler",
    "parse_source_url",
    "source_specifier",
]
