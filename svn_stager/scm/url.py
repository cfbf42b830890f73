"""Parsing of source locations handed to the SCM downloaders."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from urllib.parse import urlsplit

URL_TYPE_URL = "url"
URL_TYPE_LOCAL = "local"

_SCHEME_RE = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*://')
_WINDOWS_DRIVE_RE = re.compile(r'^[A-Za-z]:[\\/]')


@dataclass(frozen=True)
class SourceURL:
    """A source location with an optional #fragment.

    - kind: "url" for remote locations, "local" for filesystem paths
    - scheme: URL scheme ("file" for file:// URLs, "" for bare paths)
    - base: the location without its fragment
    - path: path component (the filesystem path for local sources)
    - fragment: text after '#', without the '#'
    """

    kind: str
    scheme: str
    base: str
    path: str
    fragment: str = ""

    def is_local(self) -> bool:
        return self.kind == URL_TYPE_LOCAL

    def local_path(self) -> str:
        """Filesystem path of a local source.

        Raises:
            ValueError: If the source is not local
        """
        if not self.is_local():
            raise ValueError(f"Not a local source: {self.base}")
        return self.path

    def with_local_path(self, path: str) -> "SourceURL":
        """Return a copy pointing at a different local path."""
        if not self.is_local():
            raise ValueError(f"Not a local source: {self.base}")
        base = f"file://{path}" if self.scheme == "file" else path
        return replace(self, base=base, path=path)

    def string_no_fragment(self) -> str:
        return self.base

    def __str__(self) -> str:
        if self.fragment:
            return f"{self.base}#{self.fragment}"
        return self.base


def parse_source_url(value: str) -> SourceURL:
    """Parse a source location string.

    Examples:
        parse_source_url("https://svn.example.org/proj/trunk#r42")
        parse_source_url("file:///srv/svn/proj/trunk")
        parse_source_url("/srv/checkouts/proj")

    Raises:
        ValueError: If value is empty
    """
    if not value or not value.strip():
        raise ValueError("Source location must not be empty")

    value = value.strip()
    base, _, fragment = value.partition('#')

    if _WINDOWS_DRIVE_RE.match(base) or not _SCHEME_RE.match(base):
        return SourceURL(kind=URL_TYPE_LOCAL, scheme="", base=base, path=base, fragment=fragment)

    parts = urlsplit(base)
    scheme = parts.scheme.lower()
    if scheme == "file":
        path = parts.path
        if parts.netloc and parts.netloc != "localhost":
            path = f"//{parts.netloc}{parts.path}"
        return SourceURL(kind=URL_TYPE_LOCAL, scheme=scheme, base=base, path=path, fragment=fragment)

    return SourceURL(kind=URL_TYPE_URL, scheme=scheme, base=base, path=parts.path, fragment=fragment)
